"""
Async SQLAlchemy database setup.

Holds saved properties and the single user settings row. SQLite (via
aiosqlite) is the default store; any async SQLAlchemy URL works.

Answers and weights live in plain JSON columns, which do not track in-place
mutation. Handlers always assign a new dict (see ``merge_answers``) so the
change is flushed.
"""

import os
from typing import AsyncGenerator, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from nestscore.config import settings


def sqlite_file_path(url: str) -> Optional[str]:
    """Return the database file for a SQLite URL, or None for other backends and in-memory databases."""
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return None
    if not parsed.database or parsed.database == ":memory:":
        return None
    return parsed.database


def ensure_database_dir(url: str) -> None:
    """Create the folder holding a SQLite file so the first connect does not fail."""
    path = sqlite_file_path(url)
    if path:
        folder = os.path.dirname(os.path.abspath(path))
        os.makedirs(folder, exist_ok=True)


ensure_database_dir(settings.async_database_url)

engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    future=True,
)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for the property and settings models."""

    pass


def _register_models() -> None:
    from nestscore.models import property  # noqa: F401


async def init_db() -> None:
    """Create the properties and settings tables if missing."""
    _register_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def reset_db() -> None:
    """Drop and recreate every table, discarding all saved properties and settings."""
    _register_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits on success and rolls back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
