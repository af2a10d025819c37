"""Booking status broadcaster via the in-process event broadcaster"""

from tourbus.platform.event.i_in_memory_broadcaster import (
    IInMemoryEventBroadcaster,
    booking_status_channel,
)
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.interface.i_booking_status_broadcaster import (
    IBookingStatusBroadcaster,
)
from tourbus.service.booking.domain.entity.booking_entity import Booking


def booking_status_event(booking: Booking) -> dict:
    return {
        'bookingId': booking.id,
        'status': booking.status.value,
        'expiresAt': booking.expires_at.isoformat(),
    }


class BookingStatusBroadcasterImpl(IBookingStatusBroadcaster):
    def __init__(self, *, event_broadcaster: IInMemoryEventBroadcaster) -> None:
        self.event_broadcaster = event_broadcaster

    async def publish_status(self, *, booking: Booking) -> None:
        try:
            await self.event_broadcaster.broadcast(
                channel=booking_status_channel(booking_id=booking.id),
                event_data=booking_status_event(booking),
            )
        except Exception as e:
            Logger.base.warning(f'⚠️ [BOOKING-BROADCASTER] Publish failed: {e}')
