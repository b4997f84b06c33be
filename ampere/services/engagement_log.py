import json
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from ampere.core.constants import ATTRIBUTION_KEY, ATTRIBUTION_LOG_PREFIX, VIEWING_KEY
from ampere.core.security import redact_url
from ampere.core.storage import KeyValueStorage, StorageError
from ampere.models.card import Card
from ampere.models.engagement import AttributionEvent, ViewingEvent
from ampere.services.session import SessionIdentity
from ampere.utils.text import utc_now

EventT = TypeVar("EventT", bound=BaseModel)

DEFAULT_VIEWING_CAP = 300
DEFAULT_ATTRIBUTION_CAP = 600

# Props that carry outbound URLs are reduced to their hostname before storage
URL_PROPS = ("url",)


class EngagementLog:
    """
    Two capped, append-only logs: viewing history and attribution events.

    Each save writes the whole (truncated) list in one storage call. Any read
    or write failure loses at most the event being recorded; nothing here
    raises to the caller.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        session: SessionIdentity,
        viewing_cap: int = DEFAULT_VIEWING_CAP,
        attribution_cap: int = DEFAULT_ATTRIBUTION_CAP,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.storage = storage
        self.session = session
        self.viewing_cap = viewing_cap
        self.attribution_cap = attribution_cap
        self.clock = clock

    # Generic list persistence

    def _load_list(self, key: str, model: type[EventT]) -> list[EventT]:
        try:
            raw = self.storage.get(key)
        except StorageError as exc:
            logger.warning(f"Cannot read {key}: {exc}")
            return []
        if not raw:
            return []

        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.debug(f"Discarding corrupt {key}: {exc}")
            return []
        if not isinstance(parsed, list):
            return []

        events: list[EventT] = []
        skipped = 0
        for entry in parsed:
            try:
                events.append(model.model_validate(entry))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.debug(f"Skipped {skipped} malformed entries in {key}")
        return events

    def _save_list(self, key: str, model: type[EventT], events: Sequence[EventT], cap: int) -> None:
        tail = list(events)[-cap:] if cap > 0 else []
        try:
            payload = TypeAdapter(list[model]).dump_json(tail, by_alias=True).decode("utf-8")
        except (TypeError, ValueError) as exc:
            logger.warning(f"Cannot serialize {key}; event dropped: {exc}")
            return
        try:
            self.storage.set(key, payload)
        except StorageError as exc:
            logger.warning(f"Failed to persist {key}; event lost: {exc}")

    # Viewing log

    def load_viewing(self) -> list[ViewingEvent]:
        return self._load_list(VIEWING_KEY, ViewingEvent)

    def save_viewing(self, events: Sequence[ViewingEvent]) -> None:
        """Persist the full desired list; only the newest `viewing_cap` entries are kept."""
        self._save_list(VIEWING_KEY, ViewingEvent, events, self.viewing_cap)

    def log_viewing(self, card: Card) -> None:
        """Record that the user opened `card`, then emit a `viewing_log` attribution event."""
        event = ViewingEvent(
            id=card.id,
            title=card.title,
            platform_id=card.platform_id,
            league=card.league,
            at=self.clock(),
        )
        self.save_viewing([*self.load_viewing(), event])
        self.track("viewing_log", {"id": card.id, "platformId": card.platform_id})

    # Attribution log

    def load_attribution(self) -> list[AttributionEvent]:
        return self._load_list(ATTRIBUTION_KEY, AttributionEvent)

    def save_attribution(self, events: Sequence[AttributionEvent]) -> None:
        self._save_list(ATTRIBUTION_KEY, AttributionEvent, events, self.attribution_cap)

    def track(self, event: str, props: Mapping[str, Any] | None = None) -> None:
        """Append a named attribution event for the current session and echo it to the log."""
        props = {str(k): v for k, v in props.items()} if isinstance(props, Mapping) else {}
        for name in URL_PROPS:
            if name in props:
                props[name] = redact_url(props[name])

        logger.info(f"{ATTRIBUTION_LOG_PREFIX} {event} {props}")

        try:
            record = AttributionEvent(
                at=self.clock(),
                session_id=self.session.get_session_id(),
                event=str(event),
                props=props,
            )
        except ValidationError as exc:
            logger.warning(f"Dropping malformed attribution event {event!r}: {exc}")
            return
        self.save_attribution([*self.load_attribution(), record])
