"""
Tour Bus Booking Service - Main Application
Seat reservation, booking lifecycle and admin decisions.
"""

from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI

from tourbus.platform.app_factory import create_app
from tourbus.platform.config.core_setting import settings
from tourbus.platform.config.di import container
from tourbus.platform.database.orm_db_setting import close_engine, create_db_and_tables
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.state.lua_script_executor import lua_script_executor
from tourbus.platform.state.redis_client import redis_client
from tourbus.service.booking.driving_adapter.background.booking_expiry_sweeper import (
    BookingExpirySweeper,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Tour Bus Service] Starting up...')

    if settings.SEAT_STORE_BACKEND == 'redis':
        # Fail-fast: a seat store that cannot reach Redis must not accept traffic
        client = await redis_client.initialize()
        await lua_script_executor.initialize(client=client)
        Logger.base.info('📡 [Tour Bus Service] Redis seat store initialized')

    if settings.BOOKING_STORE_BACKEND == 'postgres':
        await create_db_and_tables()
        Logger.base.info('🗄️ [Tour Bus Service] PostgreSQL booking store initialized')

    sweeper = BookingExpirySweeper(
        use_case=container.expire_pending_bookings_use_case(),
        interval_seconds=settings.EXPIRY_SWEEP_INTERVAL_SECONDS,
    )

    async with anyio.create_task_group() as task_group:
        task_group.start_soon(sweeper.run_forever)
        Logger.base.info('✅ [Tour Bus Service] Startup complete')

        yield

        Logger.base.info('🛑 [Tour Bus Service] Shutting down...')
        task_group.cancel_scope.cancel()

    if settings.SEAT_STORE_BACKEND == 'redis':
        await redis_client.disconnect()
    if settings.BOOKING_STORE_BACKEND == 'postgres':
        await close_engine()

    Logger.base.info('👋 [Tour Bus Service] Shutdown complete')


app = create_app(lifespan=lifespan)


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('tourbus.main:app', host='0.0.0.0', port=8000, reload=settings.DEBUG)
