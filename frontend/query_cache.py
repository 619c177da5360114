"""
Query Cache
Keyed in-memory store for gateway reads with a staleness window and retry
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from frontend.config import ClientSettings, get_client_settings

logger = logging.getLogger(__name__)

QueryKey = Tuple[Any, ...]
Fetcher = Callable[[], Awaitable[Any]]


def normalize_key(key: QueryKey) -> QueryKey:
    """Turn a query key into a hashable tuple

    Parameter mappings become sorted item tuples so that two dicts with
    the same content address the same entry.
    """
    def freeze(value: Any) -> Any:
        if isinstance(value, dict):
            return tuple(sorted((k, freeze(v)) for k, v in value.items() if v is not None))
        if isinstance(value, (list, tuple)):
            return tuple(freeze(v) for v in value)
        return value

    return tuple(freeze(part) for part in key)


@dataclass
class CacheEntry:
    data: Any
    updated_at: float
    invalidated: bool = False


class QueryCache:
    """In-memory query store

    Entries are fresh for ``stale_time`` seconds after they were fetched.
    Stale or invalidated entries are refetched on the next read, failed
    fetches are retried ``retry`` times and never stored.
    """

    def __init__(
        self,
        config: ClientSettings = None,
        clock: Callable[[], float] = time.monotonic,
        retry_delay: float = 0.0
    ):
        config = config or get_client_settings()
        self.stale_time = config.stale_time
        self.retry = config.query_retry
        self.retry_delay = retry_delay
        self._clock = clock
        self._entries: Dict[QueryKey, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: QueryKey) -> bool:
        return normalize_key(key) in self._entries

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(normalize_key(key))
        if entry is None or entry.invalidated:
            return False
        return self._clock() - entry.updated_at < self.stale_time

    def get_query_data(self, key: QueryKey, default: Any = None) -> Any:
        """Cached data for a key regardless of freshness"""
        entry = self._entries.get(normalize_key(key))
        return entry.data if entry else default

    def set_query_data(self, key: QueryKey, data: Any) -> None:
        self._entries[normalize_key(key)] = CacheEntry(data=data, updated_at=self._clock())

    async def fetch_query(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        stale_time: Optional[float] = None,
        retry: Optional[int] = None
    ) -> Any:
        """
        Return cached data for the key, fetching it when missing or stale

        Args:
            key: Query key, e.g. ("texts", {"limit": 10})
            fetcher: Coroutine factory performing the request
            stale_time: Override of the staleness window in seconds
            retry: Override of the number of retries after a failure

        Returns:
            The cached or freshly fetched data

        Raises:
            The fetcher's exception once all attempts have failed
        """
        normalized = normalize_key(key)
        window = self.stale_time if stale_time is None else stale_time
        entry = self._entries.get(normalized)
        if entry and not entry.invalidated and self._clock() - entry.updated_at < window:
            return entry.data

        attempts = 1 + (self.retry if retry is None else retry)
        for attempt in range(1, attempts + 1):
            try:
                data = await fetcher()
            except Exception as e:
                if attempt >= attempts:
                    logger.error(f"Query {key[0]!r} failed after {attempt} attempt(s): {e}")
                    raise
                logger.warning(f"Query {key[0]!r} failed, retrying ({attempt}/{attempts - 1}): {e}")
                if self.retry_delay:
                    await asyncio.sleep(self.retry_delay)
                continue

            self._entries[normalized] = CacheEntry(data=data, updated_at=self._clock())
            return data

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark every entry whose key starts with the prefix as stale

        Returns:
            Number of entries invalidated
        """
        normalized = normalize_key(prefix)
        count = 0
        for key, entry in self._entries.items():
            if key[:len(normalized)] == normalized:
                entry.invalidated = True
                count += 1
        logger.debug(f"Invalidated {count} queries for prefix {prefix!r}")
        return count

    def remove(self, key: QueryKey) -> bool:
        return self._entries.pop(normalize_key(key), None) is not None

    def clear(self) -> None:
        self._entries.clear()
