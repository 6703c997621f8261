from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.user_entity import CurrentUser


class GetBookingUseCase:
    def __init__(self, booking_record_store: IBookingRecordStore) -> None:
        self.booking_record_store = booking_record_store

    @classmethod
    @inject
    def depends(
        cls,
        booking_record_store: IBookingRecordStore = Depends(
            Provide[Container.booking_record_store]
        ),
    ) -> Self:
        return cls(booking_record_store=booking_record_store)

    @Logger.io
    async def get_booking(self, *, booking_id: UUID, user: Optional[CurrentUser]) -> Booking:
        user = CurrentUser.require(user)
        return await self.booking_record_store.get_owned(booking_id=booking_id, caller_id=user.id)
