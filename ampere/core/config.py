from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from ampere.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 8000
    APP_ENV: Literal["development", "production", "test"] = "production"
    LOG_LEVEL: str = "INFO"

    # Persistence
    STORAGE_BACKEND: Literal["memory", "file", "redis"] = "file"
    STORAGE_NAMESPACE: str = ""
    STORAGE_FILE_PATH: str = ".ampere/storage.json"
    # Upper bound on keys held by in-memory stores (session scope, tests)
    MEMORY_STORAGE_MAX_KEYS: int = 1024
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20

    # Engagement log caps
    VIEWING_LOG_CAP: int = 300
    ATTRIBUTION_LOG_CAP: int = 600

    # Ranking
    RANKING_RECENCY_WINDOW: int = 120
    RANKING_REPEAT_PENALTY: float = 2.0
    RANKING_MAX_REPEAT_PENALTY: float = 6.0
    RANKING_TIEBREAK_MODULUS: int = 7
    RANKING_TIEBREAK_STEP: float = 0.01

    # Default profile, overridable per surface
    DEFAULT_PROFILE_NAME: str = "Demo User"
    DEFAULT_FAVORITE_PLATFORM_IDS: list[str] = ["netflix", "espn", "plutotv", "foxsports1"]
    DEFAULT_FAVORITE_LEAGUES: list[str] = ["NFL", "NBA", "NCAAF", "NHL"]
    DEFAULT_FAVORITE_TEAMS: list[str] = ["Los Angeles Lakers", "Boston Celtics", "Kansas City Chiefs"]


settings = Settings()

APP_VERSION = __version__
