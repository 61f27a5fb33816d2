from __future__ import annotations

import threading

from conftest import FakeClock
from workbench_api.auth.cache import ChallengeCache


def test_take_returns_value_once() -> None:
    cache: ChallengeCache[str] = ChallengeCache()
    cache.put("svc-A", "nonce-1", 60)

    assert cache.take("svc-A") == "nonce-1"
    assert cache.take("svc-A") is None


def test_take_unknown_key_is_absent() -> None:
    cache: ChallengeCache[str] = ChallengeCache()
    assert cache.take("never-set") is None


def test_put_overwrites_previous_entry() -> None:
    cache: ChallengeCache[str] = ChallengeCache()
    cache.put("svc-A", "first", 60)
    cache.put("svc-A", "second", 60)

    assert cache.take("svc-A") == "second"
    assert cache.take("svc-A") is None


def test_expired_entry_is_never_returned() -> None:
    clock = FakeClock()
    cache: ChallengeCache[str] = ChallengeCache(clock=clock)
    cache.put("svc-A", "nonce", 60)

    clock.now += 60
    assert cache.take("svc-A") is None


def test_overwrite_resets_deadline() -> None:
    clock = FakeClock()
    cache: ChallengeCache[str] = ChallengeCache(clock=clock)
    cache.put("svc-A", "old", 60)
    clock.now += 50
    cache.put("svc-A", "new", 60)
    clock.now += 50

    assert cache.take("svc-A") == "new"


def test_keys_are_independent() -> None:
    cache: ChallengeCache[str] = ChallengeCache()
    cache.put("svc-A", "a", 60)
    cache.put("svc-B", "b", 60)

    assert cache.take("svc-A") == "a"
    assert cache.take("svc-B") == "b"


def test_purge_drops_only_expired_entries() -> None:
    clock = FakeClock()
    cache: ChallengeCache[str] = ChallengeCache(clock=clock)
    cache.put("short", "x", 10)
    cache.put("long", "y", 100)

    clock.now += 20
    assert cache.purge_expired() == 1
    assert len(cache) == 1
    assert cache.take("long") == "y"


def test_put_sweeps_expired_entries() -> None:
    clock = FakeClock()
    cache: ChallengeCache[str] = ChallengeCache(clock=clock)
    cache.put("abandoned", "x", 10)
    clock.now += 11
    cache.put("svc-A", "y", 60)

    assert len(cache) == 1


def test_concurrent_takes_have_exactly_one_winner() -> None:
    cache: ChallengeCache[str] = ChallengeCache()
    for round_ in range(50):
        cache.put("svc-A", f"nonce-{round_}", 60)
        barrier = threading.Barrier(8)
        results: list[str | None] = []
        results_lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            value = cache.take("svc-A")
            with results_lock:
                results.append(value)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        winners = [r for r in results if r is not None]
        assert winners == [f"nonce-{round_}"]
