from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from tourbus.platform.config.di import Container
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating


class ConfigureTourSeatingUseCase:
    def __init__(self, *, tour_seating_repo: ITourSeatingRepo) -> None:
        self.tour_seating_repo = tour_seating_repo

    @classmethod
    @inject
    def depends(
        cls,
        tour_seating_repo: ITourSeatingRepo = Depends(Provide[Container.tour_seating_repo]),
    ) -> Self:
        return cls(tour_seating_repo=tour_seating_repo)

    @Logger.io
    async def configure(
        self,
        *,
        tour_id: str,
        bus_count: Optional[int] = None,
        has_bus_seat_selection: Optional[bool] = None,
        price_per_person: Optional[int] = None,
    ) -> TourSeating:
        """Fields left as None keep their current (or default) value"""
        current = await self.tour_seating_repo.get_or_default(tour_id=tour_id)
        seating = current.reconfigure(
            bus_count=bus_count,
            has_bus_seat_selection=has_bus_seat_selection,
            price_per_person=price_per_person,
        )
        return await self.tour_seating_repo.save(seating=seating)
