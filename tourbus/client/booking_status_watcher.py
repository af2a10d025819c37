"""
Booking Status Watcher

Polls a submitted booking until it leaves `pending` and reports the final
status exactly once. The countdown it exposes is display only.
"""

from datetime import datetime
from typing import Callable, Optional

import anyio

from tourbus.client.countdown import format_time_left
from tourbus.client.errors import TransientApiError
from tourbus.client.models import BookingStatusInfo
from tourbus.client.seat_api_client import SeatApiClient, Sleep
from tourbus.platform.logging.loguru_io import Logger


class BookingStatusWatcher:
    def __init__(
        self,
        *,
        api: SeatApiClient,
        booking_id: str,
        on_terminal: Callable[[BookingStatusInfo], None],
        interval_seconds: float = 10.0,
        sleep: Sleep = anyio.sleep,
    ) -> None:
        self.api = api
        self.booking_id = booking_id
        self.on_terminal = on_terminal
        self.interval_seconds = interval_seconds
        self.sleep = sleep
        self.last_status: Optional[BookingStatusInfo] = None
        self._notified = False

    async def check_once(self) -> BookingStatusInfo:
        status = await self.api.get_booking_status(booking_id=self.booking_id)
        self.last_status = status
        if status.is_terminal and not self._notified:
            self._notified = True
            Logger.base.info(f'🔔 [WATCHER] Booking {self.booking_id} is {status.status}')
            self.on_terminal(status)
        return status

    async def watch(self) -> BookingStatusInfo:
        """Returns the terminal status"""
        while True:
            try:
                status = await self.check_once()
            except TransientApiError as e:
                Logger.base.warning(f'⚠️ [WATCHER] Status poll failed: {e}')
            else:
                if status.is_terminal:
                    return status
            await self.sleep(self.interval_seconds)

    def time_left(self, now: datetime) -> Optional[str]:
        if self.last_status is None:
            return None
        return format_time_left(self.last_status.expires_at, now)
