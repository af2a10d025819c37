"""
Bus unlock policy

A tour fills its buses in order. Seats on any bus after the primary one may
only be claimed once the primary bus is full, or once the only seats left on
it are exactly the trailing eight (I1..I4, J, K, L, M).
"""

from typing import Iterable

from tourbus.service.seating.domain.value_object.bus_layout import LAST_8_SEATS, bus_index


def is_next_bus_unlocked(available_seat_ids: Iterable[str]) -> bool:
    available = frozenset(available_seat_ids)
    return not available or available == LAST_8_SEATS


def requires_unlock(*, bus_id: str, claiming: bool) -> bool:
    """Releasing is always allowed; claiming on a secondary bus is gated"""
    return claiming and bus_index(bus_id) > 0
