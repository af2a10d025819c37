from datetime import datetime, timedelta
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.core_setting import settings
from tourbus.platform.config.di import Container
from tourbus.platform.exception.exceptions import DomainError, SeatConflictError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.platform.types.clock import Clock
from tourbus.service.seating.app.command.bus_unlock_guard import (
    ensure_bus_unlocked,
    is_secondary_bus_unlocked,
    raise_bus_locked,
)
from tourbus.service.seating.app.interface.i_seat_map_broadcaster import ISeatMapBroadcaster
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.entity.seat_entity import Seat
from tourbus.service.seating.domain.value_object.bus_layout import normalize_seat_ids


class ReplaceSeatSelectionUseCase:
    """
    Replace a visitor's reservation set on one bus

    Flow:
    1. Validate bus and seat ids
    2. Enforce the bus unlock policy when new seats are claimed on a secondary bus
    3. Atomically replace the reservation set in the seat map store, undoing
       new secondary-bus claims if the primary bus re-opened meanwhile
    4. Broadcast and return the committed seat map

    Raises:
        DomainError: unknown bus or seat ids
        ForbiddenError: claiming on a locked bus
        SeatConflictError: a requested seat is booked or held by someone else
    """

    def __init__(
        self,
        *,
        seat_map_store: ISeatMapStore,
        tour_seating_repo: ITourSeatingRepo,
        seat_map_broadcaster: ISeatMapBroadcaster,
        clock: Clock,
    ) -> None:
        self.seat_map_store = seat_map_store
        self.tour_seating_repo = tour_seating_repo
        self.seat_map_broadcaster = seat_map_broadcaster
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        seat_map_store: ISeatMapStore = Depends(Provide[Container.seat_map_store]),
        tour_seating_repo: ITourSeatingRepo = Depends(Provide[Container.tour_seating_repo]),
        seat_map_broadcaster: ISeatMapBroadcaster = Depends(
            Provide[Container.seat_map_broadcaster]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            seat_map_store=seat_map_store,
            tour_seating_repo=tour_seating_repo,
            seat_map_broadcaster=seat_map_broadcaster,
            clock=clock,
        )

    @Logger.io
    async def execute(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        selected_seats: List[str],
    ) -> List[Seat]:
        if not user_id.strip():
            raise DomainError('userId is required')

        seating = await self.tour_seating_repo.get_or_default(tour_id=tour_id)
        if not seating.has_bus(bus_id):
            raise DomainError(f'Unknown bus: {bus_id}')
        seat_ids = normalize_seat_ids(selected_seats)

        now = self.clock()
        new_claims = await ensure_bus_unlocked(
            seat_map_store=self.seat_map_store,
            tour_id=tour_id,
            bus_id=bus_id,
            user_id=user_id,
            seat_ids=seat_ids,
            now=now,
        )
        hold_until = now + timedelta(seconds=settings.RESERVATION_TTL_SECONDS)

        result = await self.seat_map_store.replace_reservation(
            tour_id=tour_id,
            bus_id=bus_id,
            user_id=user_id,
            selected_seats=seat_ids,
            now=now,
            hold_until=hold_until,
        )
        if not result.ok:
            booking_metrics.record_reservation(bus_id=bus_id, result='conflict')
            Logger.base.info(
                f'⚔️ [SEAT-SELECT] Conflict on tour={tour_id} bus={bus_id}: {result.conflicts}'
            )
            raise SeatConflictError(seat_ids=result.conflicts)

        if new_claims and not await is_secondary_bus_unlocked(
            seat_map_store=self.seat_map_store, tour_id=tour_id, now=now
        ):
            await self._undo_claims(
                tour_id=tour_id,
                bus_id=bus_id,
                user_id=user_id,
                kept=[s for s in seat_ids if s not in new_claims],
                now=now,
                hold_until=hold_until,
            )
            raise_bus_locked(bus_id=bus_id)

        booking_metrics.record_reservation(bus_id=bus_id, result='success')
        seat_map = await self.seat_map_store.get_seat_map(tour_id=tour_id, bus_id=bus_id, now=now)
        seats = seat_map.snapshot(now=now)
        await self.seat_map_broadcaster.publish_seat_map(tour_id=tour_id, bus_id=bus_id, seats=seats)
        return seats

    async def _undo_claims(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        kept: List[str],
        now: datetime,
        hold_until: datetime,
    ) -> None:
        """The primary bus re-opened between the unlock check and the claim"""
        Logger.base.warning(
            f'🔒 [SEAT-SELECT] Bus {bus_id} relocked during claim on tour={tour_id}, undoing'
        )
        result = await self.seat_map_store.replace_reservation(
            tour_id=tour_id,
            bus_id=bus_id,
            user_id=user_id,
            selected_seats=kept,
            now=now,
            hold_until=hold_until,
        )
        if not result.ok:
            Logger.base.warning(f'⚠️ [SEAT-SELECT] Could not keep {result.conflicts} on bus {bus_id}')
            await self.seat_map_store.replace_reservation(
                tour_id=tour_id,
                bus_id=bus_id,
                user_id=user_id,
                selected_seats=[s for s in kept if s not in result.conflicts],
                now=now,
                hold_until=hold_until,
            )
