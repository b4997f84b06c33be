from dataclasses import dataclass, field

from loguru import logger

from ampere.core.config import Settings, settings
from ampere.core.storage import KeyValueStorage, MemoryStorage, build_storage
from ampere.models.ranking import RankingWeights
from ampere.services.engagement_log import EngagementLog
from ampere.services.portability import DataPortability
from ampere.services.profile_store import ProfileStore, default_profile
from ampere.services.rails import RailService
from ampere.services.ranking import RankingEngine
from ampere.services.session import SessionIdentity


@dataclass
class AmpereServices:
    """Explicitly constructed set of stores and engines sharing one backend."""

    storage: KeyValueStorage
    session_storage: KeyValueStorage
    session: SessionIdentity
    profiles: ProfileStore
    engagement: EngagementLog
    ranking: RankingEngine
    rails: RailService
    portability: DataPortability = field(init=False)

    def __post_init__(self) -> None:
        self.portability = DataPortability(self.profiles, self.engagement)

    def close(self) -> None:
        self.storage.close()
        self.session_storage.close()


def build_services(
    config: Settings | None = None,
    storage: KeyValueStorage | None = None,
    session_storage: KeyValueStorage | None = None,
) -> AmpereServices:
    config = config or settings
    storage = storage if storage is not None else build_storage(config)
    # Session scope: the id dies with the process, never with the profile
    if session_storage is None:
        session_storage = MemoryStorage(namespace=config.STORAGE_NAMESPACE)

    session = SessionIdentity(session_storage)
    engine = RankingEngine(RankingWeights.from_settings(config))
    logger.info(f"Using {type(storage).__name__} for persistent state")

    return AmpereServices(
        storage=storage,
        session_storage=session_storage,
        session=session,
        profiles=ProfileStore(storage, defaults=default_profile(config)),
        engagement=EngagementLog(
            storage,
            session,
            viewing_cap=config.VIEWING_LOG_CAP,
            attribution_cap=config.ATTRIBUTION_LOG_CAP,
        ),
        ranking=engine,
        rails=RailService(engine),
    )


_services: AmpereServices | None = None


def get_services() -> AmpereServices:
    """Process-wide services, created on first use (FastAPI dependency)."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def close_services() -> None:
    global _services
    if _services is not None:
        _services.close()
        _services = None
