"""
Booking Repository Interface

Status changes go through `transition_status`, a compare-and-set on the
current status, so concurrent deciders cannot both win.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus


class IBookingRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        pass

    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_bookings(self, *, status: Optional[BookingStatus] = None) -> List[Booking]:
        """Newest first"""
        pass

    @abstractmethod
    async def list_overdue(self, *, now: datetime) -> List[Booking]:
        """Pending bookings whose deadline is at or before `now`"""
        pass

    @abstractmethod
    async def transition_status(
        self,
        *,
        booking: Booking,
        expected: BookingStatus = BookingStatus.PENDING,
    ) -> bool:
        """
        Persist `booking.status`, `decided_at` and `updated_at` only if the
        stored status is still `expected`.

        Returns:
            True if this call performed the transition
        """
        pass
