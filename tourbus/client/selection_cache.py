"""
Selection Cache

Key/value store shared by every session on one device. Listeners are told
about each write so other sessions on the same device can follow along.
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import orjson

from tourbus.platform.logging.loguru_io import Logger


CacheListener = Callable[[str, Optional[str]], None]


def selection_key(tour_id: str, bus_id: str) -> str:
    return f'seat_selection:{tour_id}:{bus_id}'


class SelectionCache(ABC):
    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def add_listener(self, listener: CacheListener) -> Callable[[], None]:
        """Returns a callable that removes the listener"""
        pass

    def load_selection(self, tour_id: str, bus_id: str) -> List[str]:
        raw = self.get(selection_key(tour_id, bus_id))
        if not raw:
            return []
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            Logger.base.warning(
                f'⚠️ [CACHE] Ignoring unreadable selection for tour {tour_id} bus {bus_id}'
            )
            return []
        seats = data.get('selectedSeats') if isinstance(data, dict) else None
        return [s for s in seats if isinstance(s, str)] if isinstance(seats, list) else []

    def save_selection(self, tour_id: str, bus_id: str, seats: List[str]) -> None:
        payload = orjson.dumps({'selectedSeats': list(seats)}).decode()
        self.set(selection_key(tour_id, bus_id), payload)


class InMemorySelectionCache(SelectionCache):
    def __init__(self) -> None:
        self._values: Dict[str, str] = {}
        self._listeners: List[CacheListener] = []

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._notify(key, value)

    def remove(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._notify(key, None)

    def add_listener(self, listener: CacheListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove_listener

    def _notify(self, key: str, value: Optional[str]) -> None:
        for listener in list(self._listeners):
            listener(key, value)
