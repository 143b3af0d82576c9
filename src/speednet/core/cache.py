"""TTL cache fronting session list and runtime reads.

One SessionCache is created per application (see main.lifespan) and handed to
the services that need it, so its lifetime follows the app's.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Iterable, Optional

from speednet.core.logging import get_logger

logger = get_logger(__name__)

SESSION_LIST_NAMESPACE = "networking:sessions:list"
SESSION_RUNTIME_NAMESPACE = "networking:sessions:runtime"

SESSION_LIST_TTL_SECONDS = int(os.getenv("SESSION_LIST_CACHE_TTL", "45"))
SESSION_RUNTIME_TTL_SECONDS = int(os.getenv("SESSION_RUNTIME_CACHE_TTL", "5"))


class SessionCache:
    """In-process key -> (value, expiry) map with prefix invalidation."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._entries: dict[str, tuple[Any, datetime]] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if it exists and hasn't expired."""
        if key not in self._entries:
            return None

        value, expires_at = self._entries[key]
        if self._clock() >= expires_at:
            del self._entries[key]
            return None

        return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Set value in cache with TTL."""
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = (value, expires_at)

    async def remember(
        self,
        key: str,
        ttl_seconds: int,
        producer: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Return the cached value for key, or produce, store and return it.

        Producer errors propagate. A failure to store is logged and ignored.
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        value = await producer()
        try:
            self.set(key, value, ttl_seconds)
        except Exception as exc:
            logger.warning("cache.populate_failed", key=key, error=str(exc))
        return value

    def invalidate(self, prefix: str) -> int:
        """Drop every entry whose key starts with prefix. Returns the count removed."""
        keys_to_delete = [key for key in self._entries if key.startswith(prefix)]
        for key in keys_to_delete:
            del self._entries[key]
        logger.info("cache.invalidated", prefix=prefix, removed=len(keys_to_delete))
        return len(keys_to_delete)

    def clear(self) -> None:
        self._entries.clear()


def scope_fingerprint(workspace_ids: Iterable[int]) -> str:
    """Stable identifier for an authorization scope. Empty scope is 'global'."""
    ids = sorted(set(workspace_ids))
    if not ids:
        return "global"
    return "-".join(str(workspace_id) for workspace_id in ids)


def make_cache_key(prefix: str, **kwargs) -> str:
    """Generate cache key from prefix and parameters."""
    parts = [prefix]
    for key, value in sorted(kwargs.items()):
        parts.append(f"{key}:{value}")
    return "|".join(parts)


def partition_prefix(namespace: str, field: str, value: Any) -> str:
    """Leading key segment shared by every entry of one partition (company, session)."""
    return f"{namespace}|{field}:{value}"


def make_partitioned_key(namespace: str, field: str, value: Any, **kwargs) -> str:
    """Cache key whose first segment after the namespace is the partition.

    Callers always pass at least one parameter (the scope fingerprint), so the
    partition segment is always terminated by '|'.
    """
    return make_cache_key(partition_prefix(namespace, field, value), **kwargs)


def invalidate_partition(cache: SessionCache, namespace: str, field: str, value: Any) -> int:
    """Drop all entries of one partition, e.g. every list cached for a company."""
    return cache.invalidate(f"{partition_prefix(namespace, field, value)}|")
