"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from tourbus.platform.config.core_setting import settings
from tourbus.platform.config.di import container
from tourbus.platform.config.wire_modules import WIRE_MODULES
from tourbus.platform.exception.exception_handlers import register_exception_handlers
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.driving_adapter.http_controller.admin_booking_controller import (
    router as admin_booking_router,
)
from tourbus.service.booking.driving_adapter.http_controller.booking_controller import (
    router as booking_router,
)
from tourbus.service.booking.driving_adapter.http_controller.payment_settings_controller import (
    router as payment_settings_router,
)
from tourbus.service.seating.driving_adapter.http_controller.seat_map_controller import (
    router as seat_map_router,
)
from tourbus.service.seating.driving_adapter.http_controller.tour_seating_admin_controller import (
    router as tour_seating_admin_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Tour bus seat reservation and booking',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(seat_map_router, prefix='/api/tours', tags=['seats'])
    app.include_router(booking_router, prefix='/api/bookings', tags=['booking'])
    app.include_router(admin_booking_router, prefix='/api/admin/bookings', tags=['admin'])
    app.include_router(tour_seating_admin_router, prefix='/api/admin/tours', tags=['admin'])
    app.include_router(payment_settings_router, prefix='/api/payment-settings', tags=['payment'])

    _register_common_endpoints(app)

    # Use cases resolve their adapters through Provide[...] markers
    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [App] Dependency injection wired')

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
