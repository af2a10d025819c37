from datetime import date, datetime
from enum import StrEnum
from typing import List, Optional

import attrs


class SeatViewState(StrEnum):
    AVAILABLE = 'available'
    SELECTED = 'selected'
    RESERVED_BY_OTHER = 'reserved_by_other'
    BOOKED = 'booked'


@attrs.frozen
class SeatInfo:
    id: str
    is_available: bool
    reserved_by: Optional[str] = None
    booked_by: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict) -> 'SeatInfo':
        return cls(
            id=data['id'],
            is_available=data['isAvailable'],
            reserved_by=data.get('reservedBy'),
            booked_by=data.get('bookedBy'),
        )


@attrs.frozen
class BusInfo:
    bus_id: str
    unlocked: bool
    available_count: int


@attrs.frozen
class BookingDraft:
    """Everything the visitor fills in before submitting a booking"""

    tour_id: str
    persons: int
    customer_name: str
    customer_email: str
    customer_phone: str
    from_location: str
    travel_date: Optional[date]
    bus_id: str = '1'
    selected_seats: List[str] = attrs.field(factory=list)
    transaction_id: Optional[str] = None
    payment_proof_file: Optional[str] = None
    payment_method: str = 'manual'
    to_location: Optional[str] = None
    notes: Optional[str] = None

    def to_json(self, *, user_id: str) -> dict:
        return {
            'tourId': self.tour_id,
            'busId': self.bus_id,
            'userId': user_id,
            'selectedSeats': list(self.selected_seats),
            'persons': self.persons,
            'customerInfo': {
                'name': self.customer_name,
                'email': self.customer_email,
                'phone': self.customer_phone,
            },
            'paymentReference': {
                'transactionId': self.transaction_id,
                'paymentProofFile': self.payment_proof_file,
            },
            'paymentMethod': self.payment_method,
            'fromLocation': self.from_location,
            'toLocation': self.to_location,
            'travelDate': self.travel_date.isoformat() if self.travel_date else None,
            'notes': self.notes,
        }


@attrs.frozen
class BookingStatusInfo:
    status: str
    expires_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status != 'pending'


@attrs.frozen
class CreatedBooking:
    id: str
    status: str
    expires_at: datetime
