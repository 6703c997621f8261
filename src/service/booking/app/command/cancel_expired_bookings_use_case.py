from datetime import datetime, timedelta, timezone
from typing import List, Optional

from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore


class CancelExpiredBookingsUseCase:
    """
    Release seats of bookings abandoned at checkout.

    A booking still pending ``ttl`` after creation is cancelled unless a
    checkout session was opened for it, since that payment may still settle.
    Bookings paid in the meantime are left alone by the store's conditional
    update.
    """

    def __init__(
        self,
        *,
        booking_record_store: IBookingRecordStore,
        booking_metrics: BookingMetrics,
        ttl: timedelta,
    ) -> None:
        self.booking_record_store = booking_record_store
        self.booking_metrics = booking_metrics
        self.ttl = ttl

    @Logger.io
    async def execute(self, *, now: Optional[datetime] = None) -> List[UUID]:
        cutoff = (now or datetime.now(timezone.utc)) - self.ttl
        cancelled = await self.booking_record_store.cancel_expired(older_than=cutoff)
        self.booking_metrics.record_booking_cancelled(reason='expired', count=len(cancelled))
        if cancelled:
            Logger.base.info(
                f'⏰ [EXPIRE] Cancelled {len(cancelled)} bookings pending since before {cutoff}'
            )
        return cancelled
