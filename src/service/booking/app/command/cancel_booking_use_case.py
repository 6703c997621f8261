from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.domain.entity.booking_entity import Booking, PaymentStatus
from src.service.booking.domain.entity.user_entity import CurrentUser


class CancelBookingUseCase:
    """
    Cancel a pending booking and release its seats.

    Cancelling twice is a no-op; a paid booking cannot be cancelled.
    """

    def __init__(
        self, *, booking_record_store: IBookingRecordStore, booking_metrics: BookingMetrics
    ) -> None:
        self.booking_record_store = booking_record_store
        self.booking_metrics = booking_metrics

    @classmethod
    @inject
    def depends(
        cls,
        booking_record_store: IBookingRecordStore = Depends(
            Provide[Container.booking_record_store]
        ),
        booking_metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
    ) -> Self:
        return cls(booking_record_store=booking_record_store, booking_metrics=booking_metrics)

    @Logger.io
    async def cancel(self, *, booking_id: UUID, user: Optional[CurrentUser]) -> Booking:
        user = CurrentUser.require(user)
        before = await self.booking_record_store.get_owned(booking_id=booking_id, caller_id=user.id)
        before.validate_can_be_cancelled()

        booking = await self.booking_record_store.mark_cancelled(
            booking_id=booking_id, caller_id=user.id
        )
        if before.payment_status == PaymentStatus.PENDING:
            self.booking_metrics.record_booking_cancelled(reason='user')
            Logger.base.info(f'🚫 [CANCEL] Booking {booking_id} cancelled by user {user.id}')
        return booking
