"""Tests for the in-memory backend."""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import UTC, datetime
from typing import Any, cast

import pytest

from plantsensor.models import CombinedPlantData
from plantsensor.storage import ConcurrentMap, InMemoryStore, StorageFailure


def _item(tray_id: int, plant_type: str = "Lettuce", current_temperature: float = 22.5) -> CombinedPlantData:
    return CombinedPlantData(
        tray_id=tray_id,
        plant_type=plant_type,
        current_temperature=current_temperature,
        current_humidity=65.0,
        current_light=1200.0,
        target_temperature=23.0,
        target_humidity=70.0,
        target_light=1000.0,
        timestamp=datetime(2026, 1, 1, tzinfo=UTC),
    )


class TestConcurrentMap:
    def test_put_reports_replacement(self) -> None:
        storage: ConcurrentMap[int, str] = ConcurrentMap()
        assert storage.put(1, "a") is False
        assert storage.put(1, "b") is True
        assert storage.values() == ["b"]
        assert len(storage) == 1

    def test_values_is_a_snapshot(self) -> None:
        storage: ConcurrentMap[int, str] = ConcurrentMap()
        storage.put(1, "a")
        snapshot = storage.values()
        storage.put(2, "b")
        assert snapshot == ["a"]

    def test_concurrent_writers_from_threads(self) -> None:
        storage: ConcurrentMap[int, int] = ConcurrentMap()

        def writer(offset: int) -> None:
            for i in range(200):
                storage.put(i, offset)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(storage) == 200


@pytest.mark.asyncio
async def test_upsert_then_read_returns_item() -> None:
    store = InMemoryStore()
    item = _item(1)

    result = await store.upsert([item])

    assert result.ok
    assert result.inserted == 1
    assert result.updated == 0
    assert store.read() == [item]


@pytest.mark.asyncio
async def test_upsert_overwrites_whole_record() -> None:
    store = InMemoryStore()
    await store.upsert([_item(1, "Lettuce", 20.0)])

    result = await store.upsert([_item(1, "Basil", 25.0)])

    assert result.ok
    assert result.updated == 1
    (stored,) = store.read()
    assert stored.plant_type == "Basil"
    assert stored.current_temperature == 25.0


@pytest.mark.asyncio
async def test_upsert_is_idempotent() -> None:
    store = InMemoryStore()
    items = [_item(1), _item(2)]

    await store.upsert(items)
    first = sorted(store.read(), key=lambda r: r.tray_id)
    await store.upsert(items)
    second = sorted(store.read(), key=lambda r: r.tray_id)

    assert first == second
    assert len(second) == 2


@pytest.mark.asyncio
async def test_empty_upsert_succeeds_and_keeps_state() -> None:
    store = InMemoryStore()
    await store.upsert([_item(1)])

    result = await store.upsert([])

    assert result.ok
    assert [r.tray_id for r in store.read()] == [1]


@pytest.mark.asyncio
async def test_failure_keeps_items_applied_before_it(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.ERROR, logger="plantsensor.storage.memory")
    store = InMemoryStore()
    # None has no tray_id and breaks the loop on the second item.
    items = cast(list[Any], [_item(1), None, _item(3)])

    result = await store.upsert(items)

    assert not result.ok
    assert result.failure == StorageFailure.UNEXPECTED
    assert [r.tray_id for r in store.read()] == [1]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


@pytest.mark.asyncio
async def test_shared_map_seen_by_every_store_instance() -> None:
    shared: ConcurrentMap[int, CombinedPlantData] = ConcurrentMap()
    writer = InMemoryStore(shared)
    reader = InMemoryStore(shared)

    await writer.upsert([_item(5)])

    assert [r.tray_id for r in await reader.read_all()] == [5]


@pytest.mark.asyncio
async def test_concurrent_upserts_keep_one_record_per_tray() -> None:
    store = InMemoryStore()

    await asyncio.gather(*(store.upsert([_item(i % 5, current_temperature=float(i))]) for i in range(50)))

    assert sorted(r.tray_id for r in store.read()) == [0, 1, 2, 3, 4]
