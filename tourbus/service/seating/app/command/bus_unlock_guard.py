from datetime import datetime
from typing import List, NoReturn

from tourbus.platform.exception.exceptions import ForbiddenError
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.domain.bus_unlock_policy import is_next_bus_unlocked, requires_unlock
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID


async def is_secondary_bus_unlocked(
    *, seat_map_store: ISeatMapStore, tour_id: str, now: datetime
) -> bool:
    primary = await seat_map_store.get_seat_map(tour_id=tour_id, bus_id=PRIMARY_BUS_ID, now=now)
    return is_next_bus_unlocked(primary.available_seat_ids(now=now))


async def ensure_bus_unlocked(
    *,
    seat_map_store: ISeatMapStore,
    tour_id: str,
    bus_id: str,
    user_id: str,
    seat_ids: List[str],
    now: datetime,
) -> List[str]:
    """
    Raise ForbiddenError when `user_id` would claim new seats on a locked bus.

    Seats the caller already holds are not new claims, so shrinking a selection
    on a secondary bus is always allowed. Returns the gated new claims (empty
    on the primary bus).

    The primary bus is read before the claim lands and nothing is held across
    both steps, so callers that can undo their claim should re-check with
    `is_secondary_bus_unlocked` afterwards.
    """
    if not seat_ids or not requires_unlock(bus_id=bus_id, claiming=True):
        return []

    current = await seat_map_store.get_seat_map(tour_id=tour_id, bus_id=bus_id, now=now)
    new_claims = [s for s in seat_ids if current.holder_of(s, now=now) != user_id]
    if not new_claims:
        return []

    if not await is_secondary_bus_unlocked(seat_map_store=seat_map_store, tour_id=tour_id, now=now):
        raise_bus_locked(bus_id=bus_id)
    return new_claims


def raise_bus_locked(*, bus_id: str) -> NoReturn:
    booking_metrics.record_reservation(bus_id=bus_id, result='locked')
    raise ForbiddenError(f'Bus {bus_id} is locked until bus {PRIMARY_BUS_ID} is full')
