"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from tourbus.service.booking.app.command import (
    approve_booking_use_case,
    create_booking_use_case,
    reject_booking_use_case,
)
from tourbus.service.booking.app.query import (
    get_booking_status_use_case,
    get_booking_use_case,
    list_bookings_use_case,
)
from tourbus.service.seating.app.command import (
    configure_tour_seating_use_case,
    replace_seat_selection_use_case,
)
from tourbus.service.seating.app.query import get_seat_map_use_case, list_bus_status_use_case


WIRE_MODULES: list[ModuleType] = [
    replace_seat_selection_use_case,
    configure_tour_seating_use_case,
    get_seat_map_use_case,
    list_bus_status_use_case,
    create_booking_use_case,
    approve_booking_use_case,
    reject_booking_use_case,
    get_booking_status_use_case,
    get_booking_use_case,
    list_bookings_use_case,
]
