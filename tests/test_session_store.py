from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from pomoplus.database import store_errors
from pomoplus.errors import PermanentStoreError, TransientStoreError
from pomoplus.schemas.session import SessionRecord
from pomoplus.schemas.timer import Phase
from pomoplus.services import session_service


def _record(minutes_ago: int, tag: str = "Work") -> SessionRecord:
    end = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago)
    return SessionRecord(
        start_time=end - timedelta(minutes=25),
        end_time=end,
        duration_seconds=1500,
        tag=tag,
        phase=Phase.WORK,
    )


@pytest.mark.asyncio
async def test_append_and_list_all(session_store):
    first, second = _record(60), _record(0, tag="Study")
    await session_store.append(first)
    await session_store.append(second)

    records = await session_store.list_all()
    assert sorted(records, key=lambda r: r.start_time) == [first, second]
    assert all(r.start_time.tzinfo is not None for r in records)


@pytest.mark.asyncio
async def test_non_utc_timestamps_round_trip(session_store):
    plus_two = timezone(timedelta(hours=2))
    start = datetime(2026, 3, 10, 14, 0, tzinfo=plus_two)
    record = SessionRecord(
        start_time=start,
        end_time=start + timedelta(minutes=25),
        duration_seconds=1500,
        tag="Work",
        phase=Phase.WORK,
    )
    await session_store.append(record)
    [stored] = await session_store.list_all()
    assert stored.start_time == start
    assert stored.start_time.tzinfo == timezone.utc


@pytest.mark.asyncio
@pytest.mark.parametrize("backend", ["sql", "memory"])
async def test_recent_newest_first_with_paging(session_store, backend):
    store = session_store if backend == "sql" else session_service.InMemorySessionStore()
    for minutes_ago in (120, 60, 0):
        await store.append(_record(minutes_ago))

    newest = await store.recent(limit=2)
    assert [r.end_time.hour for r in newest] == [12, 11]

    older = await store.recent(limit=2, offset=1)
    assert [r.end_time.hour for r in older] == [11, 10]

    since = await store.recent(start_date=datetime(2026, 3, 10, 10, 30, tzinfo=timezone.utc))
    assert len(since) == 2

    until = await store.recent(end_date=datetime(2026, 3, 10, 10, 30, tzinfo=timezone.utc))
    assert [r.end_time.hour for r in until] == [10]


@pytest.mark.asyncio
async def test_in_memory_store_returns_snapshot():
    store = session_service.InMemorySessionStore()
    await store.append(_record(0))
    snapshot = await store.list_all()
    await store.append(_record(30))
    assert len(snapshot) == 1
    assert len(await store.list_all()) == 2


@pytest.mark.asyncio
async def test_store_errors_are_classified():
    with pytest.raises(TransientStoreError):
        async with store_errors("append session"):
            raise OperationalError("INSERT", {}, Exception("database is locked"))
    with pytest.raises(PermanentStoreError):
        async with store_errors("append session"):
            raise IntegrityError("INSERT", {}, Exception("constraint failed"))


def test_record_rejects_inverted_interval():
    end = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        SessionRecord(
            start_time=end,
            end_time=end - timedelta(seconds=1),
            duration_seconds=1,
            tag="Work",
            phase=Phase.WORK,
        )


def test_record_requires_tag():
    now = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        SessionRecord(start_time=now, end_time=now, duration_seconds=0, tag="", phase=Phase.WORK)
