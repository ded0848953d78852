from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pomoplus.database import async_session, store_errors
from pomoplus.models.config_entry import ConfigEntry
from pomoplus.models.tag import Tag

WORK_DURATION_KEY = "work_duration"
BREAK_DURATION_KEY = "break_duration"
SELECTED_TAG_KEY = "selected_tag"
TAGS_SEEDED_KEY = "tags_seeded"


class SqlPreferenceStore:
    """Key-value configuration and the ordered tag list."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self._session_factory = session_factory

    async def get(self, key: str) -> str | None:
        async with store_errors(f"read {key}"):
            async with self._session_factory() as db:
                result = await db.execute(select(ConfigEntry.value).where(ConfigEntry.key == key))
                return result.scalar_one_or_none()

    async def set(self, key: str, value: str) -> None:
        async with store_errors(f"write {key}"):
            async with self._session_factory() as db, db.begin():
                await _upsert(db, key, value)

    async def load_tags(self) -> list[str] | None:
        """Saved tag names in display order, or None if tags were never saved."""
        async with store_errors("load tags"):
            async with self._session_factory() as db:
                seeded = await db.execute(
                    select(ConfigEntry.value).where(ConfigEntry.key == TAGS_SEEDED_KEY)
                )
                if seeded.scalar_one_or_none() is None:
                    return None
                result = await db.execute(select(Tag.name).order_by(Tag.position))
                return list(result.scalars().all())

    async def save_tags(self, names: list[str]) -> None:
        async with store_errors("save tags"):
            async with self._session_factory() as db, db.begin():
                await db.execute(delete(Tag))
                db.add_all(Tag(name=name, position=i) for i, name in enumerate(names))
                await _upsert(db, TAGS_SEEDED_KEY, "1")


async def _upsert(db: AsyncSession, key: str, value: str) -> None:
    result = await db.execute(select(ConfigEntry).where(ConfigEntry.key == key))
    entry = result.scalar_one_or_none()
    if entry is None:
        db.add(ConfigEntry(key=key, value=value))
    else:
        entry.value = value
