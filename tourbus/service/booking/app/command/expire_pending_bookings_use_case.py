from typing import List

from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.types.clock import Clock
from tourbus.service.booking.app.command.booking_transition_executor import (
    BookingTransitionExecutor,
)
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.enum.booking_status import BookingStatus


class ExpirePendingBookingsUseCase:
    """Used by the background sweeper; not exposed over HTTP"""

    def __init__(
        self,
        *,
        booking_repo: IBookingRepo,
        transition_executor: BookingTransitionExecutor,
        clock: Clock,
    ) -> None:
        self.booking_repo = booking_repo
        self.transition_executor = transition_executor
        self.clock = clock

    @Logger.io
    async def expire_overdue(self) -> List[str]:
        """Returns ids of the bookings this call expired"""
        now = self.clock()
        expired: List[str] = []
        for booking in await self.booking_repo.list_overdue(now=now):
            result = await self.transition_executor.expire_if_overdue(booking=booking, now=now)
            if result.status is BookingStatus.EXPIRED and result.decided_at == now:
                expired.append(result.id)
        if expired:
            Logger.base.info(f'⏰ [EXPIRY] Expired {len(expired)} booking(s): {expired}')
        return expired
