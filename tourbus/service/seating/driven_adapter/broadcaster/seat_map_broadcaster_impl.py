"""Seat map broadcaster via the in-process event broadcaster"""

from typing import List

from tourbus.platform.event.i_in_memory_broadcaster import (
    IInMemoryEventBroadcaster,
    seat_map_channel,
)
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.interface.i_seat_map_broadcaster import ISeatMapBroadcaster
from tourbus.service.seating.domain.entity.seat_entity import Seat


def seat_to_dict(seat: Seat) -> dict:
    return {
        'id': seat.id,
        'isAvailable': seat.is_available,
        'reservedBy': seat.reserved_by,
        'bookedBy': seat.booked_by,
    }


class SeatMapBroadcasterImpl(ISeatMapBroadcaster):
    def __init__(self, *, event_broadcaster: IInMemoryEventBroadcaster) -> None:
        self.event_broadcaster = event_broadcaster

    async def publish_seat_map(self, *, tour_id: str, bus_id: str, seats: List[Seat]) -> None:
        """
        Message format: {'tourId': str, 'busId': str, 'seats': [seat dict, ...]}

        Note:
            Failures are logged but never raised; subscribers re-sync by polling
        """
        try:
            await self.event_broadcaster.broadcast(
                channel=seat_map_channel(tour_id=tour_id, bus_id=bus_id),
                event_data={
                    'tourId': tour_id,
                    'busId': bus_id,
                    'seats': [seat_to_dict(seat) for seat in seats],
                },
            )
        except Exception as e:
            Logger.base.warning(f'⚠️ [SEAT-BROADCASTER] Publish failed: {e}')
