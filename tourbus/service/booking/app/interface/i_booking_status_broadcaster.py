from abc import ABC, abstractmethod

from tourbus.service.booking.domain.entity.booking_entity import Booking


class IBookingStatusBroadcaster(ABC):
    """Pushes booking status changes to live subscribers of that booking"""

    @abstractmethod
    async def publish_status(self, *, booking: Booking) -> None:
        pass
