from datetime import datetime
from typing import Optional

import attrs


@attrs.frozen
class SeatState:
    """Stored state of one seat; `booking_id` is set while pinned to a pending booking"""

    seat_id: str
    reserved_by: Optional[str] = None
    booked_by: Optional[str] = None
    hold_expires_at: Optional[datetime] = None
    booking_id: Optional[str] = None

    def is_booked(self) -> bool:
        return self.booked_by is not None

    def is_hold_active(self, now: datetime) -> bool:
        if self.reserved_by is None:
            return False
        return self.hold_expires_at is None or self.hold_expires_at > now

    def is_hold_lapsed(self, now: datetime) -> bool:
        return self.reserved_by is not None and not self.is_hold_active(now)

    def is_claimable_by(self, user_id: str, now: datetime) -> bool:
        if self.is_booked():
            return False
        if not self.is_hold_active(now):
            return True
        return self.reserved_by == user_id

    def cleared(self) -> 'SeatState':
        return SeatState(seat_id=self.seat_id)

    def to_seat(self, now: datetime) -> 'Seat':
        if self.is_booked():
            return Seat(id=self.seat_id, booked_by=self.booked_by)
        if self.is_hold_active(now):
            return Seat(id=self.seat_id, reserved_by=self.reserved_by)
        return Seat(id=self.seat_id)


@attrs.frozen
class Seat:
    """Public view of a seat"""

    id: str
    reserved_by: Optional[str] = None
    booked_by: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.reserved_by is None and self.booked_by is None
