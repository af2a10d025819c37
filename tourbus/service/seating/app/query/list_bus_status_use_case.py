from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.types.clock import Clock
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.bus_unlock_policy import is_next_bus_unlocked
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID
from tourbus.service.seating.domain.value_object.bus_status import BusStatus


class ListBusStatusUseCase:
    """Per bus availability of a tour; secondary buses follow the unlock policy"""

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
    async def list_buses(self, *, tour_id: str) -> List[BusStatus]:
        seating = await self.tour_seating_repo.get_or_default(tour_id=tour_id)
        now = self.clock()

        statuses: List[BusStatus] = []
        secondary_unlocked = False
        for bus_id in seating.bus_ids:
            seat_map = await self.seat_map_store.get_seat_map(
                tour_id=tour_id, bus_id=bus_id, now=now
            )
            available = seat_map.available_seat_ids(now=now)
            if bus_id == PRIMARY_BUS_ID:
                secondary_unlocked = is_next_bus_unlocked(available)
            statuses.append(
                BusStatus(
                    bus_id=bus_id,
                    unlocked=bus_id == PRIMARY_BUS_ID or secondary_unlocked,
                    available_count=len(available),
                )
            )
        return statuses
