"""
Redis Seat Map Store

One hash per (tour, bus); every mutation is a single Lua script against that
hash, so it is atomic across all service instances sharing the Redis.
Seats absent from the hash are available.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import orjson
from redis.asyncio import Redis

from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.platform.state.lua_script_executor import LuaScripts
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.domain.aggregate.seat_map_aggregate import SeatMap, SettleOutcome
from tourbus.service.seating.domain.entity.seat_entity import SeatState
from tourbus.service.seating.domain.value_object.bus_layout import is_valid_seat_id
from tourbus.service.seating.domain.value_object.reservation_result import ReservationResult
from tourbus.service.seating.driven_adapter.state.key_str_generator import make_seat_map_key


def to_ms(value: datetime) -> int:
    return int(value.timestamp() * 1000)


def from_ms(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def decode_seat_state(seat_id: str, raw: str) -> SeatState:
    data: Dict[str, Any] = orjson.loads(raw)
    return SeatState(
        seat_id=seat_id,
        reserved_by=data.get('r'),
        booked_by=data.get('b'),
        hold_expires_at=from_ms(data.get('h')),
        booking_id=data.get('k'),
    )


def _as_list(value: Any) -> List[str]:
    # cjson encodes an empty Lua table as {}
    return list(value) if isinstance(value, list) else []


class SeatMapStoreRedisImpl(ISeatMapStore):
    def __init__(self, *, redis_client: Redis, lua_scripts: LuaScripts) -> None:
        self.redis_client = redis_client
        self.lua_scripts = lua_scripts

    async def _run(self, name: str, *, key: str, args: List[Any]) -> Any:
        raw = await self.lua_scripts.run(name, client=self.redis_client, keys=[key], args=args)
        return orjson.loads(raw)

    async def get_seat_map(self, *, tour_id: str, bus_id: str, now: datetime) -> SeatMap:
        key = make_seat_map_key(tour_id=tour_id, bus_id=bus_id)
        released = await self._run('purge_lapsed', key=key, args=[to_ms(now)])
        if _as_list(released):
            Logger.base.info(f'⏰ [SEAT-STORE] Lapsed holds released on {key}: {released}')

        seat_map = SeatMap.fresh(tour_id=tour_id, bus_id=bus_id)
        raw_seats: Dict[str, str] = await self.redis_client.hgetall(key)  # type: ignore[misc]
        for seat_id, raw in raw_seats.items():
            if is_valid_seat_id(seat_id):
                seat_map.seats[seat_id] = decode_seat_state(seat_id, raw)
        return seat_map

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
        result = await self._run(
            'replace_reservation',
            key=make_seat_map_key(tour_id=tour_id, bus_id=bus_id),
            args=[user_id, to_ms(now), to_ms(hold_until), orjson.dumps(selected_seats).decode()],
        )
        booking_metrics.seat_reservation_duration.labels(backend='redis').observe(
            time.perf_counter() - start
        )
        return ReservationResult(
            conflicts=_as_list(result.get('conflicts')),
            claimed=_as_list(result.get('claimed')),
            released=_as_list(result.get('released')),
        )

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
        result = await self._run(
            'hold_for_booking',
            key=make_seat_map_key(tour_id=tour_id, bus_id=bus_id),
            args=[
                user_id,
                to_ms(now),
                to_ms(hold_until),
                booking_id,
                orjson.dumps(seat_ids).decode(),
            ],
        )
        return ReservationResult(
            conflicts=_as_list(result.get('conflicts')),
            claimed=_as_list(result.get('claimed')),
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
        result = await self._run(
            'settle_booking',
            key=make_seat_map_key(tour_id=tour_id, bus_id=bus_id),
            args=[booking_id, outcome],
        )
        return _as_list(result)
