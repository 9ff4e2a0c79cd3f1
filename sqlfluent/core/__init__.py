"""Result hydration, result caching and error reporting."""

from sqlfluent.core.cache import CacheScope, CacheStats, FileResultCache, MemoryResultCache
from sqlfluent.core.errors import DebugErrorSink, RaisingErrorSink, create_error_sink
from sqlfluent.core.result import FetchMode, hydrate, payload_cardinality, resolve_fetch_mode

__all__ = (
    "CacheScope",
    "CacheStats",
    "DebugErrorSink",
    "FetchMode",
    "FileResultCache",
    "MemoryResultCache",
    "RaisingErrorSink",
    "create_error_sink",
    "hydrate",
    "payload_cardinality",
    "resolve_fetch_mode",
)
