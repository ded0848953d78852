from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pomoplus.database import async_session, store_errors
from pomoplus.models.session import Session
from pomoplus.schemas.session import SessionRecord


class SessionStore(Protocol):
    """Append-only storage of completed intervals."""

    async def append(self, record: SessionRecord) -> None:
        ...

    async def list_all(self) -> list[SessionRecord]:
        ...

    async def recent(
        self,
        limit: int = 50,
        offset: int = 0,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[SessionRecord]:
        """Newest first, filtered on start time."""
        ...


class InMemorySessionStore:
    def __init__(self, records: list[SessionRecord] | None = None):
        self._records: list[SessionRecord] = list(records or [])

    async def append(self, record: SessionRecord) -> None:
        self._records.append(record)

    async def list_all(self) -> list[SessionRecord]:
        return list(self._records)

    async def recent(
        self,
        limit: int = 50,
        offset: int = 0,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[SessionRecord]:
        records = [
            r
            for r in self._records
            if (start_date is None or r.start_time >= _as_utc(start_date))
            and (end_date is None or r.start_time <= _as_utc(end_date))
        ]
        records.sort(key=lambda r: r.start_time, reverse=True)
        return records[offset : offset + limit]


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_record(row: Session) -> SessionRecord:
    return SessionRecord(
        start_time=_as_utc(row.start_time),
        end_time=_as_utc(row.end_time),
        duration_seconds=row.duration_seconds,
        tag=row.tag,
        phase=row.phase,
    )


class SqlSessionStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self._session_factory = session_factory

    async def append(self, record: SessionRecord) -> None:
        async with store_errors("append session"):
            async with self._session_factory() as db, db.begin():
                db.add(
                    Session(
                        start_time=_as_utc(record.start_time),
                        end_time=_as_utc(record.end_time),
                        duration_seconds=record.duration_seconds,
                        tag=record.tag,
                        phase=record.phase.value,
                    )
                )

    async def list_all(self) -> list[SessionRecord]:
        # One SELECT is one consistent read; rows committed later are simply not seen
        async with store_errors("list sessions"):
            async with self._session_factory() as db:
                result = await db.execute(select(Session))
                return [to_record(row) for row in result.scalars().all()]

    async def recent(
        self,
        limit: int = 50,
        offset: int = 0,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> list[SessionRecord]:
        async with store_errors("list recent sessions"):
            async with self._session_factory() as db:
                return await get_sessions(
                    db, limit=limit, offset=offset,
                    start_date=start_date, end_date=end_date,
                )


async def get_sessions(
    db: AsyncSession,
    limit: int = 50,
    offset: int = 0,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
) -> list[SessionRecord]:
    query = select(Session)
    if start_date:
        query = query.where(Session.start_time >= _as_utc(start_date))
    if end_date:
        query = query.where(Session.start_time <= _as_utc(end_date))
    query = query.order_by(Session.start_time.desc()).limit(limit).offset(offset)
    result = await db.execute(query)
    return [to_record(row) for row in result.scalars().all()]
