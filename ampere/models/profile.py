from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Profile(BaseModel):
    """
    Declared preferences for the single local user.

    Favorite collections have set semantics; `normalize_profile` keeps them
    de-duplicated on every load and save.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = "Demo User"
    profile_photo: str | None = None
    header_photo: str | None = None
    favorite_platform_ids: list[str] = Field(default_factory=list)
    favorite_leagues: list[str] = Field(default_factory=list)
    favorite_teams: list[str] = Field(default_factory=list)
    connected_platform_ids: dict[str, bool] = Field(
        default_factory=dict, description="Platform ID → connected flag"
    )
    notifications_enabled: bool = True

    def to_public(self) -> dict:
        return self.model_dump(by_alias=True)


class ProfileUpdate(BaseModel):
    """Partial profile sent by a settings or setup screen. Absent fields are left untouched."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    profile_photo: str | None = None
    header_photo: str | None = None
    favorite_platform_ids: list[str] | None = None
    favorite_leagues: list[str] | None = None
    favorite_teams: list[str] | None = None
    connected_platform_ids: dict[str, bool] | None = None
    notifications_enabled: bool | None = None
