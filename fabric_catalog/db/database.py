from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from fabric_catalog.config import Config


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str, db_type: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    db_type = db_type.lower()
    if db_type == "postgresql":
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif db_type == "mysql":
        return url.replace("mysql://", "mysql+aiomysql://")
    elif db_type == "sqlite":
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine and hands out one session per operation."""

    def __init__(self, url: str | None = None, db_type: str | None = None):
        self.url = url or Config.DATABASE_URL
        self.db_type = (db_type or Config.DATABASE_TYPE).lower()
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self):
        """Create database engine and session factory."""
        kwargs = {"echo": Config.DATABASE_ECHO}
        if self.db_type == "sqlite" and ":memory:" in self.url:
            # Every session must see the same in-memory database
            kwargs["poolclass"] = StaticPool

        self.engine = create_async_engine(get_async_url(self.url, self.db_type), **kwargs)
        if self.db_type == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

    async def create_tables(self):
        """Create all tables known to the ORM metadata."""
        import fabric_catalog.models  # noqa: F401  (registers the mappers)

        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session; the caller decides where the transaction begins."""
        if not self.engine:
            await self.connect()

        async with self.session_factory() as session:
            yield session


db = Database()
