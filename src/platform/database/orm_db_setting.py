"""
SQLAlchemy async engine and session management

This module provides:
1. Base: declarative base shared by every ORM model
2. Database: engine + session factory holder (wired as a DI singleton)

SQLite URLs (``sqlite+aiosqlite://``) are supported for local runs and tests;
in-memory databases use a StaticPool so every session sees the same schema.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class Base(DeclarativeBase):
    pass


class Database:
    """
    Lazily creates the async engine on first use so that the engine is bound
    to the event loop that actually runs the queries.
    """

    def __init__(self, *, url: str | None = None, echo: bool | None = None) -> None:
        self._url = url or settings.DATABASE_URL
        self._echo = settings.DB_ECHO if echo is None else echo
        self._engine: Optional[AsyncEngine] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._engine = self._create_engine()
            Logger.base.info(f'🔗 [DB] Engine created for {self._engine.url.render_as_string()}')
        return self._engine

    def _create_engine(self) -> AsyncEngine:
        kwargs: dict[str, Any] = {'echo': self._echo}
        if self._url.startswith('sqlite'):
            kwargs['connect_args'] = {'check_same_thread': False}
            if ':memory:' in self._url or self._url.rstrip('/').endswith('sqlite+aiosqlite:'):
                kwargs['poolclass'] = StaticPool
        else:
            kwargs['pool_pre_ping'] = True
        return create_async_engine(self._url, **kwargs)

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Context manager for database sessions

        Note: Automatically handles rollback on exception
        """
        async with self.session_maker() as session:
            yield session

    async def create_tables(self) -> None:
        """Create database tables if they don't exist"""
        # Model modules must be imported so their tables are registered on Base.metadata
        import src.service.booking.driven_adapter.model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
