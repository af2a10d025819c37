from abc import ABC, abstractmethod
from typing import List

from tourbus.service.seating.domain.entity.seat_entity import Seat


class ISeatMapBroadcaster(ABC):
    """Pushes committed seat map snapshots to live subscribers of a (tour, bus)"""

    @abstractmethod
    async def publish_seat_map(self, *, tour_id: str, bus_id: str, seats: List[Seat]) -> None:
        pass
