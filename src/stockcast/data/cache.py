
"""
Key-value storage and the expiring cache built on top of it.

The key-value store is always injected.  Nothing in this module keeps
module-level state, so the cache (and the update tracker that shares the
same store abstraction) can be tested with an in-memory store and run in
production against a JSON file.

Cache entries are stored as ``{"data": <json>, "timestamp": <epoch secs>}``
under ``<prefix><key>``.  A read older than the TTL is a miss.
"""
import json
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

DEFAULT_TTL_SECONDS = 60.0


class KeyValueStore(ABC):
    """Minimal string key-value store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or ``None``."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any existing value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*; missing keys are ignored."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return every stored key."""


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dict-backed store."""

    def __init__(self):
        self._data: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._data)


class JsonFileKeyValueStore(KeyValueStore):
    """Store persisted as a single JSON object on disk.

    The whole file is rewritten on every mutation, which is fine for the
    handful of keys this application keeps.
    """

    def __init__(self, file_path: str):
        """
        Args:
            file_path: JSON file location.  Parent directories are created
                       on first write; a missing file reads as empty.
        """
        self.file_path = Path(file_path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.file_path.exists():
            return {}
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted key-value file {self.file_path}: {e}")
            return {}

    def _write(self, data: Dict[str, str]) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._read())


class ExpiringCache:
    """TTL cache of JSON-serialisable values over a ``KeyValueStore``."""

    def __init__(
        self,
        store: KeyValueStore,
        prefix: str = "stock_api_cache_",
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            store: Backing key-value store.
            prefix: Namespace prepended to every key; ``clear()`` only
                    touches keys with this prefix.
            ttl_seconds: Freshness window.  Older entries read as misses.
            clock: Source of epoch seconds (injectable for tests).
        """
        self.store = store
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        raw = self.store.get_item(self.prefix + key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            timestamp = float(entry["timestamp"])
            data = entry["data"]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

        if self._clock() - timestamp < self.ttl_seconds:
            logger.debug(f"Using cached data for: {key}")
            return data

        logger.debug(f"Cache expired for: {key}")
        return None

    def set(self, key: str, data: Any) -> None:
        entry = {"data": data, "timestamp": self._clock()}
        self.store.set_item(self.prefix + key, json.dumps(entry))
        logger.debug(f"Cached data for: {key}")

    def clear(self) -> int:
        """Remove every entry in this cache's namespace; return the count."""
        cache_keys = [k for k in self.store.keys() if k.startswith(self.prefix)]
        for key in cache_keys:
            self.store.remove_item(key)

        logger.info(f"Cache cleared - {len(cache_keys)} items removed")
        return len(cache_keys)
