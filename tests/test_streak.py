from datetime import date

import pytest

from docshelf.services.streak import LAST_COMPLETED_KEY, STREAK_COUNT_KEY, StreakTracker
from docshelf.storage.errors import StorageError
from docshelf.storage.kv_store import JsonKeyValueStore

from conftest import MemoryKeyValueStore


class FakeClock:
    def __init__(self, day: date):
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.mark.asyncio
async def test_initial_state(kv_store: MemoryKeyValueStore) -> None:
    status = await StreakTracker(kv_store, today=FakeClock(date(2024, 3, 1))).get_streak()
    assert status.count == 0
    assert status.completed_today is False
    assert status.last_completed is None


@pytest.mark.asyncio
async def test_completing_twice_on_same_day_counts_once(kv_store: MemoryKeyValueStore) -> None:
    tracker = StreakTracker(kv_store, today=FakeClock(date(2024, 3, 1)))

    first = await tracker.complete_daily_task()
    second = await tracker.complete_daily_task()

    assert first.count == 1
    assert second.count == 1
    assert second.completed_today is True
    assert kv_store.data[STREAK_COUNT_KEY] == "1"
    assert kv_store.data[LAST_COMPLETED_KEY] == "2024-03-01"


@pytest.mark.asyncio
async def test_completing_on_two_days_counts_twice(kv_store: MemoryKeyValueStore) -> None:
    clock = FakeClock(date(2024, 3, 1))
    tracker = StreakTracker(kv_store, today=clock)
    await tracker.complete_daily_task()

    clock.day = date(2024, 3, 2)
    assert (await tracker.get_streak()).completed_today is False
    status = await tracker.complete_daily_task()

    assert status.count == 2
    assert status.completed_today is True


@pytest.mark.asyncio
async def test_missed_days_do_not_reset_the_count(kv_store: MemoryKeyValueStore) -> None:
    clock = FakeClock(date(2024, 3, 1))
    tracker = StreakTracker(kv_store, today=clock)
    await tracker.complete_daily_task()

    clock.day = date(2024, 3, 20)
    status = await tracker.complete_daily_task()
    assert status.count == 2


@pytest.mark.asyncio
async def test_get_streak_is_read_only(kv_store: MemoryKeyValueStore) -> None:
    tracker = StreakTracker(kv_store, today=FakeClock(date(2024, 3, 1)))
    await tracker.get_streak()
    assert kv_store.data == {}


@pytest.mark.asyncio
async def test_invalid_stored_count_reads_as_zero() -> None:
    store = MemoryKeyValueStore({STREAK_COUNT_KEY: "many", LAST_COMPLETED_KEY: "2024-02-28"})
    tracker = StreakTracker(store, today=FakeClock(date(2024, 3, 1)))
    assert (await tracker.get_streak()).count == 0
    assert (await tracker.complete_daily_task()).count == 1


@pytest.mark.asyncio
async def test_unreadable_store_reports_defaults(kv_store: MemoryKeyValueStore) -> None:
    kv_store.fail_reads = True
    status = await StreakTracker(kv_store, today=FakeClock(date(2024, 3, 1))).get_streak()
    assert status.count == 0
    assert status.completed_today is False


@pytest.mark.asyncio
async def test_failed_write_leaves_status_unchanged() -> None:
    store = MemoryKeyValueStore({STREAK_COUNT_KEY: "4", LAST_COMPLETED_KEY: "2024-02-28"})
    store.fail_writes = True
    status = await StreakTracker(store, today=FakeClock(date(2024, 3, 1))).complete_daily_task()
    assert status.count == 4
    assert status.completed_today is False


class FailingSecondWriteStore(MemoryKeyValueStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = 0

    async def set(self, key: str, value: str) -> None:
        self.writes += 1
        if self.writes == 2:
            raise StorageError("disk full")
        await super().set(key, value)


@pytest.mark.asyncio
async def test_partial_write_never_counts_the_same_day_twice() -> None:
    store = FailingSecondWriteStore({STREAK_COUNT_KEY: "4", LAST_COMPLETED_KEY: "2024-02-28"})
    tracker = StreakTracker(store, today=FakeClock(date(2024, 3, 1)))

    first = await tracker.complete_daily_task()
    assert first.count == 4

    second = await tracker.complete_daily_task()
    assert second.count == 4
    assert second.completed_today is True
    assert store.data[STREAK_COUNT_KEY] == "4"


@pytest.mark.asyncio
async def test_undecodable_store_file_reads_as_defaults(tmp_path) -> None:
    path = tmp_path / "kv.json"
    path.write_bytes(b'{"@streak_count": "\xff\xfe"}')
    tracker = StreakTracker(JsonKeyValueStore(path), today=FakeClock(date(2024, 3, 1)))

    assert (await tracker.get_streak()).count == 0
    status = await tracker.complete_daily_task()
    assert status.count == 1
    assert (await tracker.get_streak()).completed_today is True
