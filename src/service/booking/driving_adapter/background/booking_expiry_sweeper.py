"""
Periodically cancels bookings left pending past their TTL so abandoned
checkouts release their seats.
"""

import anyio

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.cancel_expired_bookings_use_case import (
    CancelExpiredBookingsUseCase,
)


class BookingExpirySweeper:
    def __init__(self, *, use_case: CancelExpiredBookingsUseCase, interval_seconds: float) -> None:
        self.use_case = use_case
        self.interval_seconds = interval_seconds

    async def sweep_once(self) -> int:
        try:
            cancelled = await self.use_case.execute()
        except Exception as e:
            # A failed sweep is retried on the next tick
            Logger.base.error(f'❌ [EXPIRY-SWEEPER] Sweep failed: {type(e).__name__}: {e}')
            return 0
        return len(cancelled)

    async def run(self) -> None:
        Logger.base.info(f'⏰ [EXPIRY-SWEEPER] Started, interval={self.interval_seconds}s')
        while True:
            await self.sweep_once()
            await anyio.sleep(self.interval_seconds)
