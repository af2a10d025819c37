from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.exception.exceptions import NotFoundError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.entity.booking_entity import Booking


class GetBookingUseCase:
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
    async def get_booking(self, *, booking_id: str) -> Booking:
        booking = await self.booking_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        return booking
