"""
Key String Generator

Helper functions for generating Redis keys used by the seat map store.
"""

from tourbus.platform.config.core_setting import settings


def _make_key(key: str) -> str:
    """Add prefix to key for test isolation"""
    return f'{settings.REDIS_KEY_PREFIX}{key}'


def make_seat_map_key(*, tour_id: str, bus_id: str) -> str:
    """Hash of seat_id -> JSON seat state for one bus"""
    return _make_key(f'tour:{tour_id}:bus:{bus_id}:seats')
