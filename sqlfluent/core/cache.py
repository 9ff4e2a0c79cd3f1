"""Result caching keyed by compiled SQL text.

Components:
- CacheStats: hit/miss/store counters shared by the backends
- MemoryResultCache: in-process backend with TTL expiry
- FileResultCache: on-disk backend, one JSON file per statement
- CacheScope: one-shot, TTL-bound view of a backend used by a single statement
"""

import hashlib
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Final, Optional, Union

from mypy_extensions import mypyc_attr

from sqlfluent._serialization import decode_json, encode_json
from sqlfluent.core.result import from_plain, to_plain
from sqlfluent.exceptions import CacheError, SerializationError
from sqlfluent.typing import Empty
from sqlfluent.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from sqlfluent.protocols import ResultCacheBackendProtocol
    from sqlfluent.typing import EmptyType

__all__ = (
    "CACHE_FILE_SUFFIX",
    "CacheScope",
    "CacheStats",
    "FileResultCache",
    "MemoryResultCache",
    "cache_file_name",
)

logger = get_logger("core.cache")

CACHE_FILE_SUFFIX: Final = ".cache"
DEFAULT_CACHE_DIR: Final = ".sqlfluent_cache"

Clock = Callable[[], float]


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Cache statistics tracking."""

    __slots__ = ("expirations", "hits", "misses", "stores")

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.expirations = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.expirations = 0

    def __repr__(self) -> str:
        return (
            f"CacheStats(hit_rate={self.hit_rate:.1f}%, "
            f"hits={self.hits}, misses={self.misses}, "
            f"stores={self.stores}, expirations={self.expirations})"
        )


def cache_file_name(key: str) -> str:
    """File name under which the payload for ``key`` is stored."""
    return f"{hashlib.md5(key.encode('utf-8'), usedforsecurity=False).hexdigest()}{CACHE_FILE_SUFFIX}"


@mypyc_attr(allow_interpreted_subclasses=False)
class MemoryResultCache:
    """In-process result cache with per-entry expiry.

    Args:
        clock: Time source returning seconds, ``time.time`` by default.
    """

    __slots__ = ("_clock", "_entries", "_lock", "_stats")

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.RLock()
        self._clock = clock or time.time
        self._stats = CacheStats()

    def get(self, key: str) -> "Union[Any, EmptyType]":
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return Empty
            expires_at, payload = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                self._stats.misses += 1
                self._stats.expirations += 1
                return Empty
            self._stats.hits += 1
            return payload

    def set(self, key: str, payload: Any, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl, payload)
            self._stats.stores += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._stats.reset()

    def size(self) -> int:
        return len(self._entries)

    def get_stats(self) -> CacheStats:
        return self._stats


class FileResultCache:
    """On-disk result cache.

    Each statement is stored as ``<md5(sql)>.cache`` inside ``directory``. The file
    holds a JSON document with the absolute expiry time and the payload. Writes go
    through a temporary file that is renamed into place.

    Args:
        directory: Cache directory, created on first write.
        clock: Time source returning seconds, ``time.time`` by default.
    """

    __slots__ = ("_clock", "_directory", "_stats")

    def __init__(self, directory: "Union[str, Path, None]" = None, clock: Optional[Clock] = None) -> None:
        self._directory = Path(directory) if directory is not None else Path.cwd() / DEFAULT_CACHE_DIR
        self._clock = clock or time.time
        self._stats = CacheStats()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / cache_file_name(key)

    def get(self, key: str) -> "Union[Any, EmptyType]":
        """Return the stored payload for ``key``.

        Raises:
            CacheError: The cache file exists but cannot be read or decoded.

        Returns:
            The payload, or ``Empty`` when the entry is missing or expired.
        """
        path = self.path_for(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            self._stats.misses += 1
            return Empty
        except OSError as exc:
            msg = f"Unable to read cache file {path}: {exc}"
            raise CacheError(msg) from exc

        try:
            document = decode_json(raw)
        except SerializationError as exc:
            msg = f"Corrupt cache file {path}"
            raise CacheError(msg) from exc

        if not isinstance(document, dict) or "expires_at" not in document:
            msg = f"Corrupt cache file {path}"
            raise CacheError(msg)

        if self._clock() >= document["expires_at"]:
            self._stats.misses += 1
            self._stats.expirations += 1
            self._discard(path)
            return Empty

        self._stats.hits += 1
        return document.get("payload")

    def set(self, key: str, payload: Any, ttl: int) -> None:
        """Store ``payload`` for ``ttl`` seconds.

        Raises:
            CacheError: The payload cannot be encoded or the file cannot be written.
        """
        path = self.path_for(key)
        try:
            encoded = encode_json({"expires_at": self._clock() + ttl, "payload": to_plain(payload)}, as_bytes=True)
        except SerializationError as exc:
            msg = f"Unable to encode cache payload for {path.name}"
            raise CacheError(msg) from exc

        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as handle:
                    handle.write(encoded)
                Path(tmp_name).replace(path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            msg = f"Unable to write cache file {path}: {exc}"
            raise CacheError(msg) from exc
        self._stats.stores += 1

    def clear(self) -> None:
        """Remove every cache file from the directory."""
        if not self._directory.is_dir():
            return
        for path in self._directory.glob(f"*{CACHE_FILE_SUFFIX}"):
            self._discard(path)
        self._stats.reset()

    def get_stats(self) -> CacheStats:
        return self._stats

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove expired cache file %s", path)


class CacheScope:
    """One-shot, TTL-bound cache view consumed by the next executed statement.

    The scope always stores plain dictionaries so a payload written by an
    object-mode fetch can be served to an array-mode fetch and back. Backend
    failures are logged and reported as misses.

    Args:
        backend: Storage for payloads.
        ttl: Lifetime of stored payloads in seconds.
    """

    __slots__ = ("backend", "ttl")

    def __init__(self, backend: "ResultCacheBackendProtocol", ttl: int) -> None:
        self.backend = backend
        self.ttl = ttl

    def get(self, key: str, assoc: bool = False) -> "Union[Any, EmptyType]":
        """Look up ``key``; rows come back as dictionaries when ``assoc`` is set."""
        try:
            payload = self.backend.get(key)
        except CacheError as exc:
            log_with_context(logger, logging.WARNING, "cache.read_failed", sql=key, error=str(exc))
            return Empty
        if payload is Empty:
            log_with_context(logger, logging.DEBUG, "cache.miss", sql=key)
            return Empty
        log_with_context(logger, logging.DEBUG, "cache.hit", sql=key)
        return from_plain(payload, assoc)

    def set(self, key: str, payload: Any) -> None:
        try:
            self.backend.set(key, to_plain(payload), self.ttl)
        except CacheError as exc:
            log_with_context(logger, logging.WARNING, "cache.write_failed", sql=key, error=str(exc))
            return
        log_with_context(logger, logging.DEBUG, "cache.store", sql=key, ttl=self.ttl)

    def __repr__(self) -> str:
        return f"CacheScope(backend={type(self.backend).__name__}, ttl={self.ttl})"
