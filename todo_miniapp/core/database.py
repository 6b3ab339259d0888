"""
Database Configuration.

SQLAlchemy async engine and session management.

A single ``Database`` instance owns the engine (and its connection pool)
and the session factory. It is created once in ``create_app`` and stored
on ``app.state.database``; request handlers receive sessions through the
``get_db_session`` dependency rather than a module-level handle.
"""

from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from todo_miniapp.core.config_schema import DatabaseSchema
from todo_miniapp.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Engine plus session factory.

    Usage:
        database = Database.from_config(url, app_config.database)
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        if engine.dialect.name == "sqlite":
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    @classmethod
    def from_config(cls, url: str, db_config: DatabaseSchema) -> "Database":
        """Create the engine from a URL and the database.yaml settings."""
        engine_kwargs: dict[str, Any] = {"echo": db_config.echo}
        if not db_config.is_sqlite:
            engine_kwargs.update(
                pool_size=db_config.pool_size,
                max_overflow=db_config.max_overflow,
                pool_timeout=db_config.pool_timeout,
                pool_recycle=db_config.pool_recycle,
                pool_pre_ping=True,
            )

        engine = create_async_engine(url, **engine_kwargs)
        logger.debug(
            "Database engine created",
            extra={"driver": db_config.driver, "host": db_config.host, "name": db_config.name},
        )
        return cls(engine)

    def session(self) -> AsyncSession:
        """Open a new session."""
        return self.session_factory()

    async def create_all(self) -> None:
        """Create any missing tables from the model metadata."""
        from todo_miniapp.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ensured")

    async def ping(self) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Commits when the handler returns normally, rolls back on error.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: DbSession):
            ...
    """
    database = get_database(request)
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
