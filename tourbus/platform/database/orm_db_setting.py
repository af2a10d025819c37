"""
SQLAlchemy async engine and session management

Used when BOOKING_STORE_BACKEND=postgres.

AsyncEngineManager keeps the engine bound to the running event loop so that a
test run (or a worker restart) that spins up a fresh loop never reuses pooled
connections created on a dead one.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tourbus.platform.config.core_setting import settings
from tourbus.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    def __init__(self) -> None:
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self) -> AsyncEngine:
        """Get engine for current event loop, creating new one if needed"""
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, disposing old engine...')
                self._engine = None
                self._session_maker = None

            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        assert self._engine is not None
        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(
            settings.DATABASE_URL_ASYNC,
            echo=False,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


class Base(DeclarativeBase):
    pass


class Database:
    """Session provider handed to repositories through the DI container"""

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with get_session_maker()() as session:
            yield session


async def create_db_and_tables() -> None:
    # models register themselves on Base.metadata when imported
    from tourbus.service.booking.driven_adapter.model import booking_model  # noqa: F401
    from tourbus.service.seating.driven_adapter.model import tour_seating_model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    Logger.base.info('🗄️  [DB] Tables ensured')


async def close_engine() -> None:
    await _engine_manager.dispose()
