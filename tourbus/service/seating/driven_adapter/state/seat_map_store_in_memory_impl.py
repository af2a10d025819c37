"""
In-process Seat Map Store

Each (tour, bus) map is guarded by its own anyio lock; every operation loads,
mutates and commits the aggregate while holding it, so claims are serialised
within the process.
"""

import copy
import time
from datetime import datetime
from typing import Dict, List, Tuple

import anyio

from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.domain.aggregate.seat_map_aggregate import SeatMap, SettleOutcome
from tourbus.service.seating.domain.value_object.reservation_result import ReservationResult


_MapKey = Tuple[str, str]


class SeatMapStoreInMemoryImpl(ISeatMapStore):
    def __init__(self) -> None:
        self._maps: Dict[_MapKey, SeatMap] = {}
        self._locks: Dict[_MapKey, anyio.Lock] = {}

    def _lock(self, key: _MapKey) -> anyio.Lock:
        return self._locks.setdefault(key, anyio.Lock())

    def _load(self, key: _MapKey) -> SeatMap:
        seat_map = self._maps.get(key)
        if seat_map is None:
            seat_map = SeatMap.fresh(tour_id=key[0], bus_id=key[1])
            self._maps[key] = seat_map
        return seat_map

    async def get_seat_map(self, *, tour_id: str, bus_id: str, now: datetime) -> SeatMap:
        key = (tour_id, bus_id)
        async with self._lock(key):
            seat_map = self._load(key)
            released = seat_map.release_lapsed(now=now)
            if released:
                Logger.base.info(f'⏰ [SEAT-STORE] Lapsed holds released on {key}: {released}')
            # callers get a copy so they never mutate committed state
            return copy.deepcopy(seat_map)

    @Logger.io
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
        start = time.perf_counter()
        key = (tour_id, bus_id)
        async with self._lock(key):
            result = self._load(key).replace_reservation(
                user_id=user_id, selected_seats=selected_seats, now=now, hold_until=hold_until
            )
        booking_metrics.seat_reservation_duration.labels(backend='memory').observe(
            time.perf_counter() - start
        )
        return result

    @Logger.io
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
        key = (tour_id, bus_id)
        async with self._lock(key):
            return self._load(key).hold_for_booking(
                user_id=user_id,
                seat_ids=seat_ids,
                booking_id=booking_id,
                now=now,
                hold_until=hold_until,
            )

    @Logger.io
    async def settle_booking(
        self,
        *,
        tour_id: str,
        bus_id: str,
        booking_id: str,
        outcome: SettleOutcome,
    ) -> List[str]:
        key = (tour_id, bus_id)
        async with self._lock(key):
            return self._load(key).settle_booking(booking_id=booking_id, outcome=outcome)
