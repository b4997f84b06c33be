import json
from collections.abc import Mapping
from typing import Any, Literal

from loguru import logger
from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from ampere.core.config import Settings, settings
from ampere.core.constants import PROFILE_KEY
from ampere.core.storage import KeyValueStorage, StorageError
from ampere.models.profile import Profile, ProfileUpdate
from ampere.utils.text import uniq

FavoriteKind = Literal["platforms", "leagues", "teams"]

FAVORITE_FIELDS: dict[str, str] = {
    "platforms": "favorite_platform_ids",
    "leagues": "favorite_leagues",
    "teams": "favorite_teams",
}

_MISSING = object()


def default_profile(config: Settings | None = None) -> Profile:
    """Hard-coded starting profile; the favorite lists come from configuration."""
    config = config or settings
    return Profile(
        name=config.DEFAULT_PROFILE_NAME,
        profile_photo=None,
        header_photo=None,
        favorite_platform_ids=uniq(config.DEFAULT_FAVORITE_PLATFORM_IDS),
        favorite_leagues=uniq(config.DEFAULT_FAVORITE_LEAGUES),
        favorite_teams=uniq(config.DEFAULT_FAVORITE_TEAMS),
        connected_platform_ids={},
        notifications_enabled=True,
    )


def _lookup(data: Mapping, field: str) -> Any:
    # Persisted documents use camelCase; accept snake_case from Python callers too.
    alias = to_camel(field)
    if alias in data:
        return data[alias]
    return data.get(field, _MISSING)


def _favorite_list(value: Any, fallback: list[str]) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return list(fallback)
    return uniq(item for item in value if isinstance(item, str) and item)


def _optional_str(value: Any, fallback: str | None) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return fallback


def normalize_profile(partial: Profile | Mapping | None, defaults: Profile | None = None) -> Profile:
    """
    Build a valid Profile from whatever was persisted or submitted.

    Missing or wrongly typed fields fall back to `defaults`, unknown keys are
    ignored and the favorite collections are de-duplicated. Idempotent.
    """
    defaults = defaults or default_profile()
    if isinstance(partial, Profile):
        data: Mapping = partial.model_dump()
    elif isinstance(partial, Mapping):
        data = partial
    else:
        data = {}

    name = _lookup(data, "name")
    connected = _lookup(data, "connected_platform_ids")
    notifications = _lookup(data, "notifications_enabled")

    return Profile(
        name=name if isinstance(name, str) else defaults.name,
        profile_photo=_optional_str(_lookup(data, "profile_photo"), defaults.profile_photo),
        header_photo=_optional_str(_lookup(data, "header_photo"), defaults.header_photo),
        favorite_platform_ids=_favorite_list(
            _lookup(data, "favorite_platform_ids"), defaults.favorite_platform_ids
        ),
        favorite_leagues=_favorite_list(_lookup(data, "favorite_leagues"), defaults.favorite_leagues),
        favorite_teams=_favorite_list(_lookup(data, "favorite_teams"), defaults.favorite_teams),
        connected_platform_ids=(
            {str(k): v for k, v in connected.items() if isinstance(v, bool)}
            if isinstance(connected, Mapping)
            else {}
        ),
        notifications_enabled=notifications if isinstance(notifications, bool) else defaults.notifications_enabled,
    )


class ProfileStore:
    """
    Persists the profile and holds the in-memory copy for the current session.

    The in-memory profile stays authoritative when a write fails, so a full
    disk or an unreachable Redis only costs durability, never the session.
    """

    def __init__(self, storage: KeyValueStorage, defaults: Profile | None = None) -> None:
        self.storage = storage
        self.defaults = defaults or default_profile()
        self._current: Profile | None = None

    def normalize(self, partial: Profile | Mapping | None) -> Profile:
        return normalize_profile(partial, self.defaults)

    def load_profile(self) -> Profile:
        """Read the persisted profile, falling back to defaults for anything unusable."""
        try:
            raw = self.storage.get(PROFILE_KEY)
        except StorageError as exc:
            logger.warning(f"Profile storage unavailable, using defaults: {exc}")
            raw = None

        parsed: Any = None
        if raw:
            try:
                parsed = json.loads(raw)
            except (ValueError, RecursionError) as exc:
                logger.debug(f"Discarding corrupt persisted profile: {exc}")

        profile = self.normalize(parsed)
        self._current = profile
        return profile

    def save_profile(self, profile: Profile) -> None:
        normalized = self.normalize(profile)
        self._current = normalized
        try:
            self.storage.set(PROFILE_KEY, normalized.model_dump_json(by_alias=True))
        except StorageError as exc:
            logger.warning(f"Failed to persist profile; keeping in-memory copy: {exc}")

    def current(self) -> Profile:
        """In-memory profile for this session, loaded on first access."""
        if self._current is None:
            return self.load_profile()
        return self._current

    def update_profile(self, changes: ProfileUpdate | Mapping) -> Profile:
        """Apply a settings/setup save. Fields left as None keep their current value."""
        if isinstance(changes, Mapping):
            try:
                changes = ProfileUpdate.model_validate(changes)
            except ValidationError as exc:
                logger.debug(f"Ignoring malformed profile update: {exc}")
                return self.current()

        merged = self.current().model_dump()
        merged.update(changes.model_dump(exclude_none=True))
        if isinstance(merged.get("name"), str):
            merged["name"] = merged["name"].strip() or self.current().name

        profile = self.normalize(merged)
        self.save_profile(profile)
        return profile

    def toggle_favorite(self, kind: FavoriteKind, value: str) -> Profile:
        """Add `value` to the favorite collection of `kind`, or remove it if present."""
        field = FAVORITE_FIELDS.get(kind)
        if field is None:
            logger.debug(f"Ignoring toggle for unknown favorite kind: {kind}")
            return self.current()

        profile = self.current()
        items: list[str] = getattr(profile, field)
        if value in items:
            updated = [item for item in items if item != value]
        else:
            updated = [*items, value]

        profile = self.normalize(profile.model_copy(update={field: updated}))
        self.save_profile(profile)
        return profile

    def toggle_favorite_platform(self, platform_id: str) -> Profile:
        return self.toggle_favorite("platforms", platform_id)

    def toggle_favorite_league(self, league: str) -> Profile:
        return self.toggle_favorite("leagues", league)

    def toggle_favorite_team(self, team: str) -> Profile:
        return self.toggle_favorite("teams", team)

    def set_connected(self, platform_id: str, on: bool | None = None) -> Profile:
        """Set the connected flag for a platform; toggles it when `on` is None."""
        profile = self.current()
        next_on = on if isinstance(on, bool) else not profile.connected_platform_ids.get(platform_id, False)
        connected = {**profile.connected_platform_ids, platform_id: next_on}

        profile = self.normalize(profile.model_copy(update={"connected_platform_ids": connected}))
        self.save_profile(profile)
        return profile

    def set_notifications(self, enabled: bool) -> Profile:
        profile = self.normalize(self.current().model_copy(update={"notifications_enabled": bool(enabled)}))
        self.save_profile(profile)
        return profile
