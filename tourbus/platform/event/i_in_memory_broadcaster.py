"""
In-memory Event Broadcaster Interface

Pub/sub used to push seat map and booking status changes to SSE endpoints
within the same process.
"""

from typing import Protocol

from anyio.streams.memory import MemoryObjectReceiveStream


class IInMemoryEventBroadcaster(Protocol):
    async def subscribe(self, *, channel: str) -> MemoryObjectReceiveStream[dict]:
        """
        Subscribe to a channel

        Returns:
            MemoryObjectReceiveStream that will receive event dictionaries
        """
        ...

    async def broadcast(self, *, channel: str, event_data: dict) -> None:
        """
        Broadcast event to all subscribers of a channel

        Note:
            - Silently ignores if no subscribers exist
            - Drops event if subscriber stream is full (prevents blocking)
        """
        ...

    async def unsubscribe(self, *, channel: str, stream: MemoryObjectReceiveStream[dict]) -> None:
        ...


def seat_map_channel(*, tour_id: str, bus_id: str) -> str:
    return f'seat_map:{tour_id}:{bus_id}'


def booking_status_channel(*, booking_id: str) -> str:
    return f'booking_status:{booking_id}'
