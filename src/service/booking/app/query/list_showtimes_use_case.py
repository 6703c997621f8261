from datetime import date
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.app.interface.i_showtime_provider import IShowtimeProvider
from src.service.booking.domain.booking_flow import booking_window
from src.service.booking.domain.entity.theater_entity import Showtime, TheaterShowtimes
from src.service.booking.domain.seat_map import SeatMap


class ListShowtimesUseCase:
    """Theaters, showtimes and live seat maps for the booking screens"""

    def __init__(
        self,
        *,
        showtime_provider: IShowtimeProvider,
        catalog: ICatalog,
        booking_record_store: IBookingRecordStore,
    ) -> None:
        self.showtime_provider = showtime_provider
        self.catalog = catalog
        self.booking_record_store = booking_record_store

    @classmethod
    @inject
    def depends(
        cls,
        showtime_provider: IShowtimeProvider = Depends(Provide[Container.showtime_provider]),
        catalog: ICatalog = Depends(Provide[Container.catalog]),
        booking_record_store: IBookingRecordStore = Depends(
            Provide[Container.booking_record_store]
        ),
    ) -> Self:
        return cls(
            showtime_provider=showtime_provider,
            catalog=catalog,
            booking_record_store=booking_record_store,
        )

    @Logger.io
    async def list_dates(self, *, today: date) -> List[date]:
        return await self.showtime_provider.get_available_dates(today=today)

    @Logger.io
    async def list_theaters_with_showtimes(
        self, *, movie_id: str, show_date: date, today: date
    ) -> List[TheaterShowtimes]:
        if show_date not in booking_window(today):
            raise ValidationError('Show date is outside the booking window')
        if await self.catalog.get_movie(movie_id=movie_id) is None:
            raise NotFoundError('Movie not found')
        return await self.showtime_provider.get_theaters_with_showtimes(
            movie_id=movie_id, show_date=show_date
        )

    @Logger.io
    async def get_seat_map(self, *, showtime_id: str) -> tuple[Showtime, SeatMap]:
        showtime = await self.showtime_provider.get_showtime(showtime_id=showtime_id)
        if showtime is None:
            raise NotFoundError('Showtime not found')
        held = await self.booking_record_store.list_held_seats(showtime_id=showtime_id)
        return showtime, SeatMap.for_showtime(showtime, held=held)
