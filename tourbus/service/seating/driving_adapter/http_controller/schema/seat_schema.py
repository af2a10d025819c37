from typing import List, Optional

from pydantic import Field

from tourbus.platform.types.camel_model import CamelModel
from tourbus.service.seating.domain.entity.seat_entity import Seat
from tourbus.service.seating.domain.entity.tour_seating_entity import TourSeating
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID
from tourbus.service.seating.domain.value_object.bus_status import BusStatus


class SeatResponse(CamelModel):
    id: str
    is_available: bool
    reserved_by: Optional[str] = None
    booked_by: Optional[str] = None

    @classmethod
    def from_seat(cls, seat: Seat) -> 'SeatResponse':
        return cls(
            id=seat.id,
            is_available=seat.is_available,
            reserved_by=seat.reserved_by,
            booked_by=seat.booked_by,
        )


class SeatMapResponse(CamelModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'seats': [
                    {'id': 'A1', 'isAvailable': True, 'reservedBy': None, 'bookedBy': None},
                    {'id': 'A2', 'isAvailable': False, 'reservedBy': 'u-7f3a', 'bookedBy': None},
                ]
            }
        },
    }

    seats: List[SeatResponse]

    @classmethod
    def from_seats(cls, seats: List[Seat]) -> 'SeatMapResponse':
        return cls(seats=[SeatResponse.from_seat(seat) for seat in seats])


class SeatSelectionRequest(CamelModel):
    model_config = {
        'json_schema_extra': {
            'example': {'busId': '1', 'selectedSeats': ['A1', 'A2'], 'userId': 'u-7f3a'}
        },
    }

    bus_id: str = PRIMARY_BUS_ID
    selected_seats: List[str] = []
    user_id: str = Field(min_length=1)


class BusStatusResponse(CamelModel):
    bus_id: str
    unlocked: bool
    available_count: int

    @classmethod
    def from_status(cls, status: BusStatus) -> 'BusStatusResponse':
        return cls(
            bus_id=status.bus_id, unlocked=status.unlocked, available_count=status.available_count
        )


class BusListResponse(CamelModel):
    buses: List[BusStatusResponse]


class TourSeatingRequest(CamelModel):
    bus_count: Optional[int] = Field(default=None, ge=1, le=5)
    has_bus_seat_selection: Optional[bool] = None
    price_per_person: Optional[int] = Field(default=None, ge=0)


class TourSeatingResponse(CamelModel):
    tour_id: str
    bus_count: int
    has_bus_seat_selection: bool
    price_per_person: int

    @classmethod
    def from_entity(cls, seating: TourSeating) -> 'TourSeatingResponse':
        return cls(
            tour_id=seating.tour_id,
            bus_count=seating.bus_count,
            has_bus_seat_selection=seating.has_bus_seat_selection,
            price_per_person=seating.price_per_person,
        )
