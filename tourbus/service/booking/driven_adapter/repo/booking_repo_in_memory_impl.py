from datetime import datetime
from typing import Dict, List, Optional

import anyio
import attrs

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus


class BookingRepoInMemoryImpl(IBookingRepo):
    def __init__(self) -> None:
        self._bookings: Dict[str, Booking] = {}
        self._lock = anyio.Lock()

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self._lock:
            if booking.id in self._bookings:
                raise ValueError(f'Booking {booking.id} already exists')
            self._bookings[booking.id] = booking
        return booking

    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    async def list_bookings(self, *, status: Optional[BookingStatus] = None) -> List[Booking]:
        bookings = [b for b in self._bookings.values() if status is None or b.status is status]
        return sorted(bookings, key=lambda b: b.created_at, reverse=True)

    async def list_overdue(self, *, now: datetime) -> List[Booking]:
        return [b for b in self._bookings.values() if b.is_overdue(now)]

    @Logger.io
    async def transition_status(
        self,
        *,
        booking: Booking,
        expected: BookingStatus = BookingStatus.PENDING,
    ) -> bool:
        async with self._lock:
            stored = self._bookings.get(booking.id)
            if stored is None or stored.status is not expected:
                return False
            self._bookings[booking.id] = attrs.evolve(
                stored,
                status=booking.status,
                decided_at=booking.decided_at,
                updated_at=booking.updated_at,
            )
            return True
