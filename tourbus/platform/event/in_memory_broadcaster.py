"""
In-memory Event Broadcaster Implementation

Fan-out of seat map and booking status changes from use cases to SSE
endpoints within the same process.
"""

from typing import Dict, List

from anyio import WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from tourbus.platform.logging.loguru_io import Logger


class InMemoryEventBroadcasterImpl:
    """
    In-memory pub/sub keyed by channel name

    - Each channel has a list of subscriber stream tuples
    - Stream max buffer: 10 events; a full stream drops the event (slow consumer)
    - Empty subscriber lists are removed on unsubscribe
    """

    def __init__(self, *, max_buffer_size: int = 10) -> None:
        self._max_buffer_size = max_buffer_size
        self._subscribers: Dict[
            str, List[tuple[MemoryObjectSendStream[dict], MemoryObjectReceiveStream[dict]]]
        ] = {}

    async def subscribe(self, *, channel: str) -> MemoryObjectReceiveStream[dict]:
        send_stream, receive_stream = create_memory_object_stream[dict](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.setdefault(channel, []).append((send_stream, receive_stream))

        Logger.base.debug(
            f'📡 [BROADCASTER] Subscribed to {channel} '
            f'(total subscribers: {len(self._subscribers[channel])})'
        )
        return receive_stream

    async def broadcast(self, *, channel: str, event_data: dict) -> None:
        """Non-blocking; silently ignores channels without subscribers"""
        subscribers = self._subscribers.get(channel)
        if not subscribers:
            return

        delivered = 0
        dropped = 0
        for send_stream, _ in subscribers:
            try:
                send_stream.send_nowait(event_data)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(f'⚠️ [BROADCASTER] Stream full for {channel}, dropping event')

        Logger.base.debug(
            f'📡 [BROADCASTER] Broadcast to {channel}: delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(self, *, channel: str, stream: MemoryObjectReceiveStream[dict]) -> None:
        """Safe to call with an unknown channel or stream"""
        subscribers = self._subscribers.get(channel)
        if subscribers is None:
            return

        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                break

        if not subscribers:
            del self._subscribers[channel]

    def subscriber_count(self, *, channel: str) -> int:
        return len(self._subscribers.get(channel, []))
