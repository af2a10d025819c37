"""
Seat map aggregate

All seat ownership rules live here. A mutation either applies completely or,
when any requested seat is unavailable to the caller, not at all.
The in-memory store runs these methods under a per-bus lock; the Redis
store mirrors them in Lua.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional

import attrs

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.domain.entity.seat_entity import Seat, SeatState
from tourbus.service.seating.domain.value_object.bus_layout import SEAT_IDS
from tourbus.service.seating.domain.value_object.reservation_result import ReservationResult


SettleOutcome = Literal['book', 'release']


@attrs.define
class SeatMap:
    tour_id: str
    bus_id: str
    seats: Dict[str, SeatState]

    @classmethod
    def fresh(cls, *, tour_id: str, bus_id: str) -> 'SeatMap':
        return cls(
            tour_id=tour_id,
            bus_id=bus_id,
            seats={seat_id: SeatState(seat_id=seat_id) for seat_id in SEAT_IDS},
        )

    def snapshot(self, *, now: datetime) -> List[Seat]:
        return [self.seats[seat_id].to_seat(now) for seat_id in SEAT_IDS]

    def available_seat_ids(self, *, now: datetime) -> List[str]:
        return [seat.id for seat in self.snapshot(now=now) if seat.is_available]

    def release_lapsed(self, *, now: datetime) -> List[str]:
        released = [s.seat_id for s in self.seats.values() if s.is_hold_lapsed(now)]
        for seat_id in released:
            self.seats[seat_id] = self.seats[seat_id].cleared()
        return released

    def _conflicts(self, *, user_id: str, seat_ids: List[str], now: datetime) -> List[str]:
        return [
            seat_id for seat_id in seat_ids if not self.seats[seat_id].is_claimable_by(user_id, now)
        ]

    @Logger.io
    def replace_reservation(
        self,
        *,
        user_id: str,
        selected_seats: List[str],
        now: datetime,
        hold_until: datetime,
    ) -> ReservationResult:
        """
        Make `selected_seats` the caller's complete reservation set on this bus.

        Seats pinned to a booking are left alone: they are neither released
        when missing from the selection nor re-stamped when present.
        """
        conflicts = self._conflicts(user_id=user_id, seat_ids=selected_seats, now=now)
        if conflicts:
            return ReservationResult(conflicts=conflicts)

        wanted = set(selected_seats)
        released: List[str] = []
        for seat_id in SEAT_IDS:
            state = self.seats[seat_id]
            if (
                seat_id not in wanted
                and state.reserved_by == user_id
                and state.booking_id is None
                and state.is_hold_active(now)
            ):
                self.seats[seat_id] = state.cleared()
                released.append(seat_id)

        claimed: List[str] = []
        for seat_id in selected_seats:
            state = self.seats[seat_id]
            if state.booking_id is not None and state.is_hold_active(now):
                continue
            if not (state.reserved_by == user_id and state.is_hold_active(now)):
                claimed.append(seat_id)
            self.seats[seat_id] = SeatState(
                seat_id=seat_id, reserved_by=user_id, hold_expires_at=hold_until
            )

        return ReservationResult(claimed=claimed, released=released)

    @Logger.io
    def hold_for_booking(
        self,
        *,
        user_id: str,
        seat_ids: List[str],
        booking_id: str,
        now: datetime,
        hold_until: datetime,
    ) -> ReservationResult:
        """Pin seats to a booking; each must be held by the caller or free"""
        conflicts = [
            seat_id
            for seat_id in seat_ids
            if not self.seats[seat_id].is_claimable_by(user_id, now)
            or self.seats[seat_id].booking_id not in (None, booking_id)
            and self.seats[seat_id].is_hold_active(now)
        ]
        if conflicts:
            return ReservationResult(conflicts=conflicts)

        claimed: List[str] = []
        for seat_id in seat_ids:
            state = self.seats[seat_id]
            if not (state.reserved_by == user_id and state.is_hold_active(now)):
                claimed.append(seat_id)
            self.seats[seat_id] = SeatState(
                seat_id=seat_id,
                reserved_by=user_id,
                hold_expires_at=hold_until,
                booking_id=booking_id,
            )
        return ReservationResult(claimed=claimed)

    @Logger.io
    def settle_booking(self, *, booking_id: str, outcome: SettleOutcome) -> List[str]:
        """
        Finish the seats pinned to `booking_id`.

        'book' makes the holder the permanent owner; 'release' frees the seats.
        Returns the affected seat ids.
        """
        affected: List[str] = []
        for seat_id in SEAT_IDS:
            state = self.seats[seat_id]
            if state.booking_id != booking_id or state.reserved_by is None:
                continue
            if outcome == 'book':
                self.seats[seat_id] = SeatState(
                    seat_id=seat_id, booked_by=state.reserved_by, booking_id=booking_id
                )
            else:
                self.seats[seat_id] = state.cleared()
            affected.append(seat_id)
        return affected

    def holder_of(self, seat_id: str, *, now: datetime) -> Optional[str]:
        seat = self.seats[seat_id].to_seat(now)
        return seat.booked_by or seat.reserved_by
