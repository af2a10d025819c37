from typing import Dict, Optional

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo
from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating


class TourSeatingRepoInMemoryImpl(ITourSeatingRepo):
    def __init__(self) -> None:
        self._seatings: Dict[str, TourSeating] = {}

    async def get(self, *, tour_id: str) -> Optional[TourSeating]:
        return self._seatings.get(tour_id)

    @Logger.io
    async def save(self, *, seating: TourSeating) -> TourSeating:
        self._seatings[seating.tour_id] = seating
        return seating
