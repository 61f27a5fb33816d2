"""
workbench_api.auth.cache

In-process TTL store for outstanding challenges.

Responsibilities:
- Hold at most one entry per service name (put overwrites).
- Hand each entry out at most once (`take` reads and deletes atomically).
- Never return an entry past its deadline, with or without a sweep.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class _Entry(Generic[V]):
    value: V
    deadline: float


class ChallengeCache(Generic[V]):
    """
    Keyed TTL cache with read-once semantics.

    One instance is created per application and injected where needed.
    All access goes through `put`/`take`; the lock keeps both atomic so two
    concurrent takes for the same key cannot both see the entry.
    """

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _Entry[V]] = {}
        self._lock = threading.Lock()

    def put(self, key: str, value: V, ttl_seconds: float) -> None:
        now = self._clock()
        with self._lock:
            self._purge_locked(now)
            self._entries[key] = _Entry(value=value, deadline=now + ttl_seconds)

    def take(self, key: str) -> V | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.pop(key, None)
        if entry is None or entry.deadline <= now:
            return None
        return entry.value

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            return self._purge_locked(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_locked(self, now: float) -> int:
        dead = [k for k, e in self._entries.items() if e.deadline <= now]
        for k in dead:
            del self._entries[k]
        return len(dead)


# --- Module Notes -----------------------------------------------------------
# Expiry is lazy: `take` checks the deadline itself, and `put` sweeps dead
# entries so abandoned challenges do not accumulate. No background task exists.
