from abc import ABC, abstractmethod
from typing import Optional

from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating


class ITourSeatingRepo(ABC):
    @abstractmethod
    async def get(self, *, tour_id: str) -> Optional[TourSeating]:
        pass

    @abstractmethod
    async def save(self, *, seating: TourSeating) -> TourSeating:
        pass

    async def get_or_default(self, *, tour_id: str) -> TourSeating:
        return await self.get(tour_id=tour_id) or TourSeating.default(tour_id=tour_id)
