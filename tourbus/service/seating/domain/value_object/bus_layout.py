"""
Bus seat layout

Every bus has the same 40 seats: rows A-I with four seats each (A1..I4)
followed by the four single back seats J, K, L, M.
"""

from typing import Iterable

from tourbus.platform.exception.exceptions import DomainError


ROWS = 'ABCDEFGHI'
SEATS_PER_ROW = 4
BACK_ROW_SEATS = ('J', 'K', 'L', 'M')

SEAT_IDS: tuple[str, ...] = tuple(
    f'{row}{n}' for row in ROWS for n in range(1, SEATS_PER_ROW + 1)
) + BACK_ROW_SEATS
SEAT_COUNT = len(SEAT_IDS)

# The trailing eight seats; see bus_unlock_policy
LAST_8_SEATS: frozenset[str] = frozenset(SEAT_IDS[-8:])

PRIMARY_BUS_ID = '1'

_SEAT_ID_SET = frozenset(SEAT_IDS)


def is_valid_seat_id(seat_id: str) -> bool:
    return seat_id in _SEAT_ID_SET


def normalize_seat_ids(seat_ids: Iterable[str]) -> list[str]:
    """Strip, upper-case and de-duplicate (keeping order); unknown ids are rejected"""
    normalized: list[str] = []
    for raw in seat_ids:
        seat_id = raw.strip().upper()
        if not is_valid_seat_id(seat_id):
            raise DomainError(f'Unknown seat: {raw}')
        if seat_id not in normalized:
            normalized.append(seat_id)
    return normalized


def bus_ids(bus_count: int) -> list[str]:
    return [str(i) for i in range(1, bus_count + 1)]


def bus_index(bus_id: str) -> int:
    """0-based index of a bus id ('1' -> 0)"""
    try:
        index = int(bus_id) - 1
    except ValueError:
        raise DomainError(f'Invalid bus id: {bus_id}')
    if index < 0:
        raise DomainError(f'Invalid bus id: {bus_id}')
    return index
