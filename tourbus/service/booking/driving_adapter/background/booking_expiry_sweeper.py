"""
Booking Expiry Sweeper

Runs in the lifespan task group and expires overdue pending bookings, so their
seats are released even when nobody polls the booking.
"""

from typing import List

import anyio

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.command.expire_pending_bookings_use_case import (
    ExpirePendingBookingsUseCase,
)


class BookingExpirySweeper:
    def __init__(
        self,
        *,
        use_case: ExpirePendingBookingsUseCase,
        interval_seconds: float,
    ) -> None:
        self.use_case = use_case
        self.interval_seconds = interval_seconds

    async def run_once(self) -> List[str]:
        return await self.use_case.expire_overdue()

    async def run_forever(self) -> None:
        Logger.base.info(f'🧹 [SWEEPER] Started (every {self.interval_seconds}s)')
        while True:
            try:
                await self.run_once()
            except Exception as e:
                # keep sweeping; the next round retries the same bookings
                Logger.base.error(f'❌ [SWEEPER] Sweep failed: {type(e).__name__}: {e}')
            await anyio.sleep(self.interval_seconds)
