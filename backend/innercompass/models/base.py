"""Database base configuration and session management."""

from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from innercompass.config import settings


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


# Configure engine with SQLite-specific settings for better concurrency
engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    # Use StaticPool for SQLite to share connection across threads
    poolclass=StaticPool,
    # Required for aiosqlite
    connect_args={"check_same_thread": False},
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def _ensure_sqlite_dir(db_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not db_url.startswith("sqlite") or ":memory:" in db_url:
        return
    path = db_url[db_url.find(":///") + 4:]
    Path(path).parent.mkdir(parents=True, exist_ok=True)


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    _ensure_sqlite_dir(settings.database_url)
    async with engine.begin() as conn:
        if settings.database_url.startswith("sqlite"):
            # Enable WAL mode for better concurrency
            await conn.execute(text("PRAGMA journal_mode=WAL"))
            await conn.execute(text("PRAGMA busy_timeout=5000"))
        await conn.run_sync(Base.metadata.create_all)

