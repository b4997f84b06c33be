import json
from typing import Any

from loguru import logger
from pydantic import ValidationError

from ampere.core.constants import EXPORT_VERSION
from ampere.models.engagement import AttributionEvent, ViewingEvent
from ampere.services.engagement_log import EngagementLog
from ampere.services.profile_store import ProfileStore
from ampere.utils.text import safe_now_iso


class DataPortability:
    """Export and restore everything the core persists as one JSON document."""

    def __init__(self, profiles: ProfileStore, engagement: EngagementLog) -> None:
        self.profiles = profiles
        self.engagement = engagement

    def export_all(self) -> str:
        data = {
            "profile": self.profiles.current().to_public(),
            "viewing": [e.model_dump(mode="json", by_alias=True) for e in self.engagement.load_viewing()],
            "attribution": [e.model_dump(mode="json", by_alias=True) for e in self.engagement.load_attribution()],
        }
        return json.dumps({"version": EXPORT_VERSION, "exportedAt": safe_now_iso(), "data": data}, indent=2)

    def import_all(self, document: str) -> bool:
        """
        Restore sections present in `document`.

        Returns False, leaving storage untouched, for malformed documents or an
        unknown version. Null or absent sections are skipped.
        """
        try:
            parsed: Any = json.loads(document)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.debug(f"Rejecting import: {exc}")
            return False
        if not isinstance(parsed, dict) or parsed.get("version") != EXPORT_VERSION:
            return False
        data = parsed.get("data")
        if not isinstance(data, dict):
            return False
        if data.get("profile") is not None and not isinstance(data["profile"], dict):
            return False

        try:
            viewing = [ViewingEvent.model_validate(e) for e in data["viewing"]] if data.get("viewing") else None
            attribution = (
                [AttributionEvent.model_validate(e) for e in data["attribution"]] if data.get("attribution") else None
            )
        except (ValidationError, TypeError) as exc:
            logger.debug(f"Rejecting import with malformed events: {exc}")
            return False

        if data.get("profile") is not None:
            self.profiles.save_profile(self.profiles.normalize(data["profile"]))
        if viewing is not None:
            self.engagement.save_viewing(viewing)
        if attribution is not None:
            self.engagement.save_attribution(attribution)

        logger.info("Imported exported data")
        return True
