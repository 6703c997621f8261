from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.user_entity import CurrentUser


class ListBookingsUseCase:
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
    async def list_user_bookings(self, *, user: Optional[CurrentUser]) -> List[Booking]:
        """Booking history of the signed-in user, newest first"""
        user = CurrentUser.require(user)
        bookings = await self.booking_record_store.list_by_user(user_id=user.id)
        Logger.base.info(f'📋 [MY-BOOKINGS] Found {len(bookings)} bookings for user {user.id}')
        return bookings
