"""
Pytest configuration and shared fixtures for the personalization core tests.
"""
import itertools
from datetime import datetime, timedelta, timezone

import pytest

from ampere.core.storage import KeyValueStorage, MemoryStorage, StorageError
from ampere.models.card import Card
from ampere.models.engagement import ViewingEvent
from ampere.models.profile import Profile
from ampere.services.engagement_log import EngagementLog
from ampere.services.profile_store import ProfileStore
from ampere.services.session import SessionIdentity

FIXED_NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Storage doubles
# ============================================================================


class BrokenStorage(KeyValueStorage):
    """Every operation fails, like a browser with storage disabled."""

    def get(self, key):
        raise StorageError("storage disabled")

    def set(self, key, value):
        raise StorageError("quota exceeded")

    def delete(self, key):
        raise StorageError("storage disabled")


class FlakyStorage(MemoryStorage):
    """Memory storage whose writes can be switched off mid-test."""

    def __init__(self):
        super().__init__()
        self.fail_writes = False

    def set(self, key, value):
        if self.fail_writes:
            raise StorageError("quota exceeded")
        super().set(key, value)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def flaky_storage() -> FlakyStorage:
    return FlakyStorage()


@pytest.fixture
def broken_storage() -> BrokenStorage:
    return BrokenStorage()


@pytest.fixture
def defaults() -> Profile:
    return Profile(
        name="Demo User",
        favorite_platform_ids=["netflix", "espn"],
        favorite_leagues=["NFL", "NBA"],
        favorite_teams=["Los Angeles Lakers"],
    )


@pytest.fixture
def session() -> SessionIdentity:
    return SessionIdentity(MemoryStorage(), id_factory=lambda: "s_test_session")


@pytest.fixture
def clock():
    ticks = itertools.count()
    return lambda: FIXED_NOW + timedelta(seconds=next(ticks))


@pytest.fixture
def profile_store(storage, defaults) -> ProfileStore:
    return ProfileStore(storage, defaults=defaults)


@pytest.fixture
def engagement(storage, session, clock) -> EngagementLog:
    return EngagementLog(storage, session, clock=clock)


@pytest.fixture
def make_card():
    def _make(id: str, title: str | None = None, **fields) -> Card:
        return Card(id=id, title=title or f"Title {id}", **fields)

    return _make


@pytest.fixture
def make_viewing():
    def _make(title: str, platform_id: str | None = None, league: str | None = None, id: str = "v") -> ViewingEvent:
        return ViewingEvent(id=id, title=title, platform_id=platform_id, league=league, at=FIXED_NOW)

    return _make


@pytest.fixture
def empty_profile() -> Profile:
    return Profile(favorite_platform_ids=[], favorite_leagues=[], favorite_teams=[])
