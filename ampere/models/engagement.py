from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ViewingEvent(BaseModel):
    """A card the user opened."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    title: str
    platform_id: str | None = None
    league: str | None = None
    at: datetime


class AttributionEvent(BaseModel):
    """A named telemetry record correlated to the session that produced it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    at: datetime
    session_id: str
    event: str
    props: dict[str, Any] = Field(default_factory=dict)
