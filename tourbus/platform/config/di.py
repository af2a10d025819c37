"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from tourbus.platform.config.core_setting import settings
from tourbus.platform.database.orm_db_setting import Database
from tourbus.platform.event.in_memory_broadcaster import InMemoryEventBroadcasterImpl
from tourbus.platform.state.lua_script_executor import lua_script_executor
from tourbus.platform.state.redis_client import redis_client
from tourbus.platform.types.clock import utc_now
from tourbus.service.booking.app.command.booking_transition_executor import (
    BookingTransitionExecutor,
)
from tourbus.service.booking.app.command.expire_pending_bookings_use_case import (
    ExpirePendingBookingsUseCase,
)
from tourbus.service.booking.driven_adapter.broadcaster.booking_status_broadcaster_impl import (
    BookingStatusBroadcasterImpl,
)
from tourbus.service.booking.driven_adapter.repo.booking_repo_impl import BookingRepoImpl
from tourbus.service.booking.driven_adapter.repo.booking_repo_in_memory_impl import (
    BookingRepoInMemoryImpl,
)
from tourbus.service.seating.driven_adapter.broadcaster.seat_map_broadcaster_impl import (
    SeatMapBroadcasterImpl,
)
from tourbus.service.seating.driven_adapter.repo.tour_seating_repo_impl import TourSeatingRepoImpl
from tourbus.service.seating.driven_adapter.repo.tour_seating_repo_in_memory_impl import (
    TourSeatingRepoInMemoryImpl,
)
from tourbus.service.seating.driven_adapter.state.seat_map_store_in_memory_impl import (
    SeatMapStoreInMemoryImpl,
)
from tourbus.service.seating.driven_adapter.state.seat_map_store_redis_impl import (
    SeatMapStoreRedisImpl,
)


def _seat_store_backend() -> str:
    return settings.SEAT_STORE_BACKEND


def _booking_store_backend() -> str:
    return settings.BOOKING_STORE_BACKEND


class Container(containers.DeclarativeContainer):
    # Time source (overridden in tests)
    clock = providers.Object(utc_now)

    # Database (uses AsyncEngineManager with settings)
    database = providers.Singleton(Database)

    # In-process pub/sub feeding the SSE endpoints
    event_broadcaster = providers.Singleton(InMemoryEventBroadcasterImpl)
    seat_map_broadcaster = providers.Singleton(
        SeatMapBroadcasterImpl, event_broadcaster=event_broadcaster
    )
    booking_status_broadcaster = providers.Singleton(
        BookingStatusBroadcasterImpl, event_broadcaster=event_broadcaster
    )

    # Seat map store: in-process locks or Redis Lua scripts
    seat_map_store = providers.Selector(
        _seat_store_backend,
        memory=providers.Singleton(SeatMapStoreInMemoryImpl),
        redis=providers.Singleton(
            SeatMapStoreRedisImpl,
            redis_client=providers.Factory(redis_client.get_client),
            lua_scripts=providers.Object(lua_script_executor),
        ),
    )

    # Repositories (stateless - use session_factory per call)
    tour_seating_repo = providers.Selector(
        _booking_store_backend,
        memory=providers.Singleton(TourSeatingRepoInMemoryImpl),
        postgres=providers.Singleton(
            TourSeatingRepoImpl, session_factory=database.provided.session
        ),
    )
    booking_repo = providers.Selector(
        _booking_store_backend,
        memory=providers.Singleton(BookingRepoInMemoryImpl),
        postgres=providers.Singleton(BookingRepoImpl, session_factory=database.provided.session),
    )

    booking_transition_executor = providers.Singleton(
        BookingTransitionExecutor,
        booking_repo=booking_repo,
        seat_map_store=seat_map_store,
        booking_status_broadcaster=booking_status_broadcaster,
        seat_map_broadcaster=seat_map_broadcaster,
        clock=clock,
    )

    # Background sweeper use case
    expire_pending_bookings_use_case = providers.Singleton(
        ExpirePendingBookingsUseCase,
        booking_repo=booking_repo,
        transition_executor=booking_transition_executor,
        clock=clock,
    )


container = Container()
