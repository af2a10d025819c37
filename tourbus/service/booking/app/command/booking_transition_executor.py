"""
Booking Transition Executor

Commits a decided booking: compare-and-set the status, then settle the pinned
seats and notify subscribers. Only the caller whose compare-and-set wins
touches the seats.
"""

from datetime import datetime

from tourbus.platform.exception.exceptions import ConflictError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.platform.types.clock import Clock
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.app.interface.i_booking_status_broadcaster import (
    IBookingStatusBroadcaster,
)
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.seating.app.interface.i_seat_map_broadcaster import ISeatMapBroadcaster
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore


class BookingTransitionExecutor:
    def __init__(
        self,
        *,
        booking_repo: IBookingRepo,
        seat_map_store: ISeatMapStore,
        booking_status_broadcaster: IBookingStatusBroadcaster,
        seat_map_broadcaster: ISeatMapBroadcaster,
        clock: Clock,
    ) -> None:
        self.booking_repo = booking_repo
        self.seat_map_store = seat_map_store
        self.booking_status_broadcaster = booking_status_broadcaster
        self.seat_map_broadcaster = seat_map_broadcaster
        self.clock = clock

    @Logger.io
    async def commit(self, *, decided: Booking) -> Booking:
        """
        Raises:
            ConflictError: another caller already moved the booking out of pending
        """
        won = await self.booking_repo.transition_status(
            booking=decided, expected=BookingStatus.PENDING
        )
        if not won:
            current = await self.booking_repo.get_by_id(booking_id=decided.id)
            current_status = current.status if current else 'missing'
            raise ConflictError(f'Booking {decided.id} is already {current_status}')

        if decided.selected_seats:
            outcome = 'book' if decided.status is BookingStatus.APPROVED else 'release'
            settled = await self.seat_map_store.settle_booking(
                tour_id=decided.tour_id,
                bus_id=decided.bus_id,
                booking_id=decided.id,
                outcome=outcome,
            )
            Logger.base.info(f'🎫 [BOOKING] {decided.id} {decided.status}: {outcome} {settled}')
            now = self.clock()
            seat_map = await self.seat_map_store.get_seat_map(
                tour_id=decided.tour_id, bus_id=decided.bus_id, now=now
            )
            await self.seat_map_broadcaster.publish_seat_map(
                tour_id=decided.tour_id, bus_id=decided.bus_id, seats=seat_map.snapshot(now=now)
            )

        booking_metrics.record_transition(status=decided.status.value)
        await self.booking_status_broadcaster.publish_status(booking=decided)
        return decided

    async def expire_if_overdue(self, *, booking: Booking, now: datetime) -> Booking:
        """Returns the booking as stored after a possible expiry"""
        if not booking.is_overdue(now):
            return booking
        try:
            return await self.commit(decided=booking.expire(now=now))
        except ConflictError:
            # lost the race; someone else decided first
            current = await self.booking_repo.get_by_id(booking_id=booking.id)
            return current or booking
