"""Tests for the persistent TTL cache."""

from __future__ import annotations

import asyncio
import json
import time
import warnings

import pytest

from medium_feed.cache import DEFAULT_TTL_MS, TTLCache
from medium_feed.errors import PersistenceWarning


class _Clock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


def test_set_then_get_returns_equal_value(tmp_path):
    cache = TTLCache(tmp_path / "cache.json", clock=_Clock())
    value = [{"title": "A", "tags": ["x", "y"]}, {"title": "B", "tags": []}]

    async def scenario():
        await cache.set("search:a:2", value, ttl=1000)
        return await cache.get("search:a:2")

    assert asyncio.run(scenario()) == value


def test_expired_entry_is_evicted_on_read(tmp_path):
    clock = _Clock()
    cache = TTLCache(tmp_path / "cache.json", clock=clock)

    async def scenario():
        await cache.set("k", "v", ttl=1000)
        clock.now += 1000
        live = await cache.get("k")
        clock.now += 1
        still_present = await cache.has("k")
        expired = await cache.get("k")
        present_after = await cache.has("k")
        return live, still_present, expired, present_after

    live, still_present, expired, present_after = asyncio.run(scenario())
    assert live == "v"
    # Eviction is lazy: only the read removes the entry
    assert still_present is True
    assert expired is None
    assert present_after is False


def test_eviction_is_persisted(tmp_path):
    path = tmp_path / "cache.json"
    clock = _Clock()
    cache = TTLCache(path, clock=clock)

    async def scenario():
        await cache.set("k", "v", ttl=10)
        clock.now += 11
        await cache.get("k")

    asyncio.run(scenario())
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_snapshot_survives_new_instance(tmp_path):
    path = tmp_path / "nested" / "cache.json"
    clock = _Clock()

    asyncio.run(TTLCache(path, clock=clock).set("article:u", {"title": "T"}))

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["article:u"] == {"data": {"title": "T"}, "timestamp": clock.now, "ttl": DEFAULT_TTL_MS}
    assert asyncio.run(TTLCache(path, clock=clock).get("article:u")) == {"title": "T"}


def test_set_overwrites_existing_entry(tmp_path):
    cache = TTLCache(tmp_path / "cache.json", clock=_Clock())

    async def scenario():
        await cache.set("k", 1)
        await cache.set("k", 2)
        return await cache.get("k"), await cache.size()

    assert asyncio.run(scenario()) == (2, 1)


def test_missing_snapshot_starts_empty_without_warning(tmp_path):
    cache = TTLCache(tmp_path / "absent.json")

    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert asyncio.run(cache.get("anything")) is None


def test_corrupted_snapshot_yields_empty_store(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("{not json", encoding="utf-8")
    cache = TTLCache(path, clock=_Clock())

    with pytest.warns(PersistenceWarning):
        assert asyncio.run(cache.get("k")) is None

    # The cache keeps working and rewrites a valid snapshot
    asyncio.run(cache.set("k", "v"))
    assert json.loads(path.read_text(encoding="utf-8"))["k"]["data"] == "v"


def test_non_object_snapshot_yields_empty_store(tmp_path):
    path = tmp_path / "cache.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.warns(PersistenceWarning):
        assert asyncio.run(TTLCache(path).has("k")) is False


def test_write_failure_is_swallowed(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be", encoding="utf-8")
    cache = TTLCache(blocker / "cache.json", clock=_Clock())

    async def scenario():
        await cache.set("k", "v")
        return await cache.get("k")

    with pytest.warns(PersistenceWarning):
        assert asyncio.run(scenario()) == "v"


def test_clear_removes_everything(tmp_path):
    path = tmp_path / "cache.json"
    cache = TTLCache(path, clock=_Clock())

    async def scenario():
        await cache.set("a", 1)
        await cache.set("b", 2)
        await cache.clear()
        return await cache.size()

    assert asyncio.run(scenario()) == 0
    assert json.loads(path.read_text(encoding="utf-8")) == {}


def test_concurrent_set_is_not_lost_to_lazy_load(tmp_path):
    path = tmp_path / "cache.json"
    clock = _Clock()
    asyncio.run(TTLCache(path, clock=clock).set("existing", "old"))
    cache = TTLCache(path, clock=clock)

    async def scenario():
        await asyncio.gather(cache.set("fresh", "new"), cache.get("existing"), cache.set("other", 1))
        return await cache.get("existing"), await cache.get("fresh"), await cache.get("other")

    assert asyncio.run(scenario()) == ("old", "new", 1)


class _SlowFirstWriteCache(TTLCache):
    """Delays the first snapshot write so a later one could overtake it."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes = 0

    def _write_snapshot(self, snapshot):
        self.writes += 1
        if self.writes == 1:
            time.sleep(0.3)
        super()._write_snapshot(snapshot)


def test_interleaved_sets_leave_latest_snapshot_on_disk(tmp_path):
    path = tmp_path / "cache.json"
    cache = _SlowFirstWriteCache(path, clock=_Clock())

    async def scenario():
        await asyncio.gather(cache.set("a", 1), cache.set("b", 2))

    asyncio.run(scenario())

    assert sorted(json.loads(path.read_text(encoding="utf-8"))) == ["a", "b"]
    assert asyncio.run(TTLCache(path, clock=_Clock()).get("b")) == 2
