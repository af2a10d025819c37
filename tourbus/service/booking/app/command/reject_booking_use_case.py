from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.exception.exceptions import NotFoundError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.types.clock import Clock
from tourbus.service.booking.app.command.booking_transition_executor import (
    BookingTransitionExecutor,
)
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.entity.booking_entity import Booking


class RejectBookingUseCase:
    """pending -> rejected; the pinned seats are released"""

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

    @classmethod
    @inject
    def depends(
        cls,
        booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
        transition_executor: BookingTransitionExecutor = Depends(
            Provide[Container.booking_transition_executor]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(booking_repo=booking_repo, transition_executor=transition_executor, clock=clock)

    @Logger.io
    async def reject(self, *, booking_id: str) -> Booking:
        booking = await self.booking_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')

        return await self.transition_executor.commit(decided=booking.reject(now=self.clock()))
