import secrets
import time
from collections.abc import Callable

from loguru import logger

from ampere.core.constants import SESSION_KEY
from ampere.core.security import redact_token
from ampere.core.storage import KeyValueStorage, StorageError


def generate_session_id() -> str:
    """Opaque id: random hex plus the creation time in hex milliseconds."""
    return f"s_{secrets.token_hex(6)}_{int(time.time() * 1000):x}"


def generate_fallback_id() -> str:
    return f"s_{secrets.token_hex(6)}"


class SessionIdentity:
    """
    Issues the per-session identifier used to correlate attribution events.

    The id lives in session-scoped storage only, never in the profile or the
    persistent engagement logs' keys.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        id_factory: Callable[[], str] = generate_session_id,
        fallback_factory: Callable[[], str] = generate_fallback_id,
    ) -> None:
        self.storage = storage
        self.id_factory = id_factory
        self.fallback_factory = fallback_factory

    def get_session_id(self) -> str:
        """
        Return the session id, creating and persisting it on first call.

        When session storage is unavailable every call gets a fresh id.
        """
        try:
            existing = self.storage.get(SESSION_KEY)
            if existing:
                return existing
            session_id = self.id_factory()
            self.storage.set(SESSION_KEY, session_id)
            logger.debug(f"Started session {redact_token(session_id)}")
            return session_id
        except StorageError as exc:
            logger.debug(f"Session storage unavailable, using a one-off id: {exc}")
            return self.fallback_factory()

    def reset(self) -> None:
        """End the current session; the next call issues a new id."""
        try:
            self.storage.delete(SESSION_KEY)
        except StorageError as exc:
            logger.debug(f"Failed to clear session id: {exc}")
