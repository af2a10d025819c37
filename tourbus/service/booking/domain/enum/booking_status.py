"""Booking Status Enum"""

from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    EXPIRED = 'expired'

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.PENDING
