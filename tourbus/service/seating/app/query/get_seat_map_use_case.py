from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.exception.exceptions import DomainError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.types.clock import Clock
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.entity.seat_entity import Seat
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID


class GetSeatMapUseCase:
    def __init__(
        self,
        *,
        seat_map_store: ISeatMapStore,
        tour_seating_repo: ITourSeatingRepo,
        clock: Clock,
    ) -> None:
        self.seat_map_store = seat_map_store
        self.tour_seating_repo = tour_seating_repo
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        seat_map_store: ISeatMapStore = Depends(Provide[Container.seat_map_store]),
        tour_seating_repo: ITourSeatingRepo = Depends(Provide[Container.tour_seating_repo]),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(seat_map_store=seat_map_store, tour_seating_repo=tour_seating_repo, clock=clock)

    @Logger.io
    async def get_seats(self, *, tour_id: str, bus_id: str = PRIMARY_BUS_ID) -> List[Seat]:
        seating = await self.tour_seating_repo.get_or_default(tour_id=tour_id)
        if not seating.has_bus(bus_id):
            raise DomainError(f'Unknown bus: {bus_id}')

        now = self.clock()
        seat_map = await self.seat_map_store.get_seat_map(tour_id=tour_id, bus_id=bus_id, now=now)
        return seat_map.snapshot(now=now)
