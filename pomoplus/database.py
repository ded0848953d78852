from contextlib import asynccontextmanager

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from pomoplus.config import DATA_DIR, settings
from pomoplus.errors import PermanentStoreError, TransientStoreError

if settings.DATABASE_URL.startswith("sqlite") and ":memory:" not in settings.DATABASE_URL:
    DATA_DIR.mkdir(parents=True, exist_ok=True)

engine = create_async_engine(settings.DATABASE_URL)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(bind: AsyncEngine = engine) -> None:
    from pomoplus.models import Base

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def store_errors(action: str):
    """Translate SQLAlchemy failures into the store error hierarchy.

    Locked or busy databases surface as OperationalError and are worth
    retrying; everything else is treated as permanent.
    """
    try:
        yield
    except OperationalError as exc:
        raise TransientStoreError(f"{action} failed: {exc.orig}") from exc
    except SQLAlchemyError as exc:
        raise PermanentStoreError(f"{action} failed: {exc}") from exc
