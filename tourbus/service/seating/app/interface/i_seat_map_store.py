"""
Seat Map Store Interface

The single arbiter of seat ownership. Every mutation is atomic per
(tour, bus): concurrent callers are serialised and a mutation either applies
completely or not at all.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from tourbus.service.seating.domain.aggregate.seat_map_aggregate import SeatMap, SettleOutcome
from tourbus.service.seating.domain.value_object.reservation_result import ReservationResult


class ISeatMapStore(ABC):
    @abstractmethod
    async def get_seat_map(self, *, tour_id: str, bus_id: str, now: datetime) -> SeatMap:
        """
        Latest committed seat map of one bus.

        Holds that lapsed before `now` are purged and reported as available.
        Unknown tours/buses get a fresh 40-seat map.
        """
        pass

    @abstractmethod
    async def replace_reservation(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        selected_seats: List[str],
        now: datetime,
        hold_until: datetime,
    ) -> ReservationResult:
        """
        Replace the caller's un-pinned reservation set with `selected_seats`.

        Returns:
            ReservationResult; `conflicts` lists requested seats that are booked
            or actively held by someone else, in which case nothing changed.
        """
        pass

    @abstractmethod
    async def hold_for_booking(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        seat_ids: List[str],
        booking_id: str,
        now: datetime,
        hold_until: datetime,
    ) -> ReservationResult:
        """Pin seats to a pending booking (all-or-nothing)"""
        pass

    @abstractmethod
    async def settle_booking(
        self,
        *,
        tour_id: str,
        bus_id: str,
        booking_id: str,
        outcome: SettleOutcome,
    ) -> List[str]:
        """
        'book' turns the seats pinned to `booking_id` into permanent bookings,
        'release' frees them. Returns the affected seat ids.
        """
        pass
