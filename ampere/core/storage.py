import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import redis
from cachetools import LRUCache
from loguru import logger

from ampere.core.config import Settings


class StorageError(Exception):
    """Raised by a storage backend when a read or write cannot be completed."""


class KeyValueStorage(ABC):
    """
    Keyed string store. Values are opaque strings (JSON-encoded by callers).

    Every `set` replaces the whole value in one call, so a failed write never
    leaves a partially written value behind.
    """

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace

    def _format_key(self, key: str) -> str:
        return f"{self.namespace}{key}"

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def close(self) -> None:
        return None


class MemoryStorage(KeyValueStorage):
    """In-process store bounded by an LRU eviction policy."""

    def __init__(self, namespace: str = "", maxsize: int = 1024) -> None:
        super().__init__(namespace)
        self._data: LRUCache = LRUCache(maxsize=maxsize)

    def get(self, key: str) -> str | None:
        return self._data.get(self._format_key(key))

    def set(self, key: str, value: str) -> None:
        self._data[self._format_key(key)] = value

    def delete(self, key: str) -> None:
        self._data.pop(self._format_key(key), None)

    def __len__(self) -> int:
        return len(self._data)


class FileStorage(KeyValueStorage):
    """
    Single JSON document on disk holding every key.

    Writes go to a temporary file in the same directory which then replaces the
    document, so readers only ever observe a complete document.
    """

    def __init__(self, path: str | Path, namespace: str = "") -> None:
        super().__init__(namespace)
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning(f"Storage document {self.path} is corrupt; treating it as empty")
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning(f"Storage document {self.path} is corrupt; treating it as empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".ampere-", dir=str(self.path.parent))
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> str | None:
        value = self._read_all().get(self._format_key(key))
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[self._format_key(key)] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(self._format_key(key), None) is not None:
            self._write_all(data)


class RedisStorage(KeyValueStorage):
    """Redis-backed store. The client is created lazily on first use."""

    def __init__(self, url: str, namespace: str = "", max_connections: int = 20) -> None:
        super().__init__(namespace)
        self.url = url
        self.max_connections = max_connections
        self._client: redis.Redis | None = None
        if not url:
            logger.warning("REDIS_URL is not set. Redis storage will fail until configured.")

    def _get_client(self) -> redis.Redis:
        if self._client is None:
            logger.info("Creating Redis client for RedisStorage")
            self._client = redis.from_url(
                self.url,
                decode_responses=True,
                encoding="utf-8",
                socket_connect_timeout=5,
                socket_timeout=5,
                max_connections=self.max_connections,
                health_check_interval=30,
                socket_keepalive=True,
            )
        return self._client

    def get(self, key: str) -> str | None:
        try:
            return self._get_client().get(self._format_key(key))
        except (redis.RedisError, OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to get key '{key}' from Redis: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            self._get_client().set(self._format_key(key), value)
        except (redis.RedisError, OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to set key '{key}' in Redis: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            self._get_client().delete(self._format_key(key))
        except (redis.RedisError, OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to delete key '{key}' in Redis: {exc}") from exc

    def close(self) -> None:
        """Close and disconnect the Redis client"""
        if self._client is not None:
            try:
                self._client.close()
                logger.info("RedisStorage client closed")
            except Exception as exc:
                logger.warning(f"Failed to close RedisStorage client: {exc}")
            finally:
                self._client = None


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the persistent backend selected by STORAGE_BACKEND."""
    backend = settings.STORAGE_BACKEND
    if backend == "redis":
        return RedisStorage(
            settings.REDIS_URL,
            namespace=settings.STORAGE_NAMESPACE,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
        )
    if backend == "file":
        return FileStorage(settings.STORAGE_FILE_PATH, namespace=settings.STORAGE_NAMESPACE)
    return MemoryStorage(namespace=settings.STORAGE_NAMESPACE, maxsize=settings.MEMORY_STORAGE_MAX_KEYS)
