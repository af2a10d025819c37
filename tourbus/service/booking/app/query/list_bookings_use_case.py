from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus


class ListBookingsUseCase:
    def __init__(self, *, booking_repo: IBookingRepo) -> None:
        self.booking_repo = booking_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
    ) -> Self:
        return cls(booking_repo=booking_repo)

    @Logger.io
    async def list_bookings(self, *, status: Optional[BookingStatus] = None) -> List[Booking]:
        return await self.booking_repo.list_bookings(status=status)
