from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ampere.models.card import Card
from ampere.models.engagement import ViewingEvent
from ampere.models.profile import Profile
from ampere.services.rails import RailFilters


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RankRequest(_Request):
    cards: list[Card]
    # When omitted, the stored profile / viewing log is used
    profile: Profile | None = None
    viewing: list[ViewingEvent] | None = None


class DedupeRequest(_Request):
    cards: list[Card]


class RailsRequest(_Request):
    rails: dict[str, list[Card]] = Field(default_factory=dict, description="Rail name → cards in source order")
    filters: RailFilters = Field(default_factory=RailFilters)


class SearchRequest(RailsRequest):
    query: str = ""


class TrackRequest(_Request):
    event: str = Field(min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)


class ConnectedRequest(_Request):
    on: bool | None = Field(default=None, description="Omit to toggle")


class NotificationsRequest(_Request):
    enabled: bool


class FavoriteToggleRequest(_Request):
    value: str = Field(min_length=1)
