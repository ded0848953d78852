import os

os.environ.setdefault("POMOPLUS_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import StaticPool  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from pomoplus.clock import ManualClock  # noqa: E402
from pomoplus.main import app  # noqa: E402
from pomoplus.models import Base  # noqa: E402
from pomoplus.services.persistence_service import Persistence  # noqa: E402
from pomoplus.services.preference_service import SqlPreferenceStore  # noqa: E402
from pomoplus.services.session_service import SqlSessionStore  # noqa: E402
from pomoplus.services.tag_service import TagRegistry  # noqa: E402
from pomoplus.services.timer_controller import SessionTimer  # noqa: E402
from pomoplus.services import timer_service  # noqa: E402
from pomoplus.services.write_queue import WriteQueue  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


async def _no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock(datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
async def db_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def session_store(session_factory) -> SqlSessionStore:
    return SqlSessionStore(session_factory)


@pytest.fixture
def preferences(session_factory) -> SqlPreferenceStore:
    return SqlPreferenceStore(session_factory)


@pytest.fixture
async def write_queue() -> AsyncGenerator[WriteQueue, None]:
    queue = WriteQueue(retry_delays=[0.0, 0.0], sleep=_no_sleep)
    queue.start()
    yield queue
    await queue.close()


@pytest.fixture
def timer(clock, session_store, preferences, write_queue) -> SessionTimer:
    """Timer with 1 minute work / 1 minute break and tags Work, Study."""
    registry = TagRegistry(["Work", "Study"])
    state = timer_service.initial_state(work_seconds=60, break_seconds=60)
    return SessionTimer(
        registry,
        clock,
        state=state,
        persistence=Persistence(write_queue, session_store, preferences),
    )


@pytest.fixture
async def client(clock, session_store, write_queue, timer) -> AsyncGenerator[AsyncClient, None]:
    app.state.clock = clock
    app.state.session_store = session_store
    app.state.write_queue = write_queue
    app.state.timer = timer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

