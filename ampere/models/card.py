from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Card(BaseModel):
    """
    One displayable content unit supplied by the content source.

    Cards are frozen: the core reorders and filters them but never edits one.
    Unknown display fields are kept so they round-trip to the rendering layer.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="allow")

    id: str
    title: str
    subtitle: str | None = None
    platform_id: str | None = None
    platform_label: str | None = None
    league: str | None = None
    genre: str | None = None
    badge: str | None = None  # "LIVE", "UPCOMING", "NEW", ...

    # Display-only metadata
    badge_right: str | None = None
    meta_left: str | None = None
    meta_right: str | None = None
    start_time: str | None = None
    time_remaining: str | None = None

    def to_public(self) -> dict:
        """Serialize with camelCase keys and without empty fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
