from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from jobhub.careerjet.slugs import extract_hash_from_slug
from jobhub.schemas import Job

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class JobCache:
    """
    Short-lived lookup of recently seen jobs, keyed by the hash suffix of their slug.

    Entries expire ``ttl_seconds`` after they are written and are only evicted when
    read (``get``) or scanned (``snapshot``). A later job sharing the same hash
    replaces the earlier one.
    """

    def __init__(self, ttl_seconds: float = 900, clock: Clock = time.time) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[Job]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def remember(self, jobs: Iterable[Job]) -> None:
        expires_at = self._clock() + self._ttl
        count = 0
        for job in jobs:
            self._entries[extract_hash_from_slug(job.slug)] = CacheEntry(job, expires_at)
            count += 1
        logger.debug("Remembered %d jobs until %.0f", count, expires_at)

    def get(self, key: str) -> Job | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at < self._clock():
            self._entries.pop(key, None)
            return None
        return entry.value

    def snapshot(self) -> list[Job]: # live jobs; expired entries are dropped during the scan
        now = self._clock()
        jobs: list[Job] = []
        for key, entry in list(self._entries.items()):
            if entry.expires_at >= now:
                jobs.append(entry.value)
            else:
                self._entries.pop(key, None)
        return jobs

    def clear(self) -> None:
        self._entries.clear()


class ResponseCache(Generic[T]):
    """Time-windowed store: a value written at t is served until t + ttl_seconds."""

    def __init__(self, ttl_seconds: float = 600, clock: Clock = time.time) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        # keys vary per visitor (ip, user agent); drop every expired one on write
        for stale in [k for k, entry in self._entries.items() if entry.expires_at <= now]:
            del self._entries[stale]
        self._entries[key] = CacheEntry(value, now + self._ttl)

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
