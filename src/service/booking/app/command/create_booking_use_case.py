from datetime import datetime, timezone
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    NotFoundError,
    SeatUnavailableError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.app.interface.i_showtime_provider import IShowtimeProvider
from src.service.booking.domain.booking_flow import booking_window
from src.service.booking.domain.entity.booking_entity import (
    Booking,
    compute_total_price,
    resolve_show_timestamp,
)
from src.service.booking.domain.entity.user_entity import CurrentUser
from src.service.booking.domain.seat_map import SeatMap


class CreateBookingUseCase:
    """
    Create a pending booking for a set of seats of one showtime.

    Price, seat count and show timestamp are always derived here from the
    catalog and the showtime; the client only chooses seats.

    Flow:
    1. Resolve movie and showtime
    2. Check every seat against the seat map (filled + already held)
    3. Persist the pending booking with its seat holds
    """

    def __init__(
        self,
        *,
        booking_record_store: IBookingRecordStore,
        catalog: ICatalog,
        showtime_provider: IShowtimeProvider,
        booking_metrics: BookingMetrics,
    ) -> None:
        self.booking_record_store = booking_record_store
        self.catalog = catalog
        self.showtime_provider = showtime_provider
        self.booking_metrics = booking_metrics
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_record_store: IBookingRecordStore = Depends(
            Provide[Container.booking_record_store]
        ),
        catalog: ICatalog = Depends(Provide[Container.catalog]),
        showtime_provider: IShowtimeProvider = Depends(Provide[Container.showtime_provider]),
        booking_metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
    ) -> Self:
        return cls(
            booking_record_store=booking_record_store,
            catalog=catalog,
            showtime_provider=showtime_provider,
            booking_metrics=booking_metrics,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        user: Optional[CurrentUser],
        movie_id: str,
        showtime_id: str,
        seat_numbers: List[int],
        now: Optional[datetime] = None,
    ) -> Booking:
        """
        Raises:
            AuthenticationError: no signed-in user
            ValidationError: empty/oversized selection, seat outside the hall,
                showtime of another movie, show date outside the booking window
            NotFoundError: unknown movie or showtime
            SeatUnavailableError: a seat is already sold or held
        """
        user = CurrentUser.require(user)
        if not seat_numbers:
            raise ValidationError('At least one seat must be selected')
        if len(seat_numbers) > settings.MAX_SEATS_PER_BOOKING:
            raise ValidationError(
                f'At most {settings.MAX_SEATS_PER_BOOKING} seats can be booked at once'
            )

        booking_id = uuid_utils.uuid7()
        with self.tracer.start_as_current_span(
            'use_case.create_booking',
            attributes={
                'booking.id': str(booking_id),
                'showtime.id': showtime_id,
                'booking.seats': len(seat_numbers),
            },
        ):
            movie = await self.catalog.get_movie(movie_id=movie_id)
            if movie is None:
                raise NotFoundError('Movie not found')

            showtime = await self.showtime_provider.get_showtime(showtime_id=showtime_id)
            if showtime is None:
                raise NotFoundError('Showtime not found')
            if showtime.movie_id != movie.id:
                raise ValidationError('Showtime does not belong to this movie')
            now = now or datetime.now(timezone.utc)
            if showtime.show_date not in booking_window(now.date()):
                raise ValidationError('Show date is outside the booking window')

            held = await self.booking_record_store.list_held_seats(showtime_id=showtime_id)
            seat_map = SeatMap.for_showtime(showtime, held=held)

            outside = [n for n in seat_numbers if not 1 <= n <= seat_map.total_seats]
            if outside:
                raise ValidationError(f'Seats outside the hall: {sorted(outside)}')
            taken = [n for n in seat_numbers if n in seat_map.unavailable]
            if taken:
                raise SeatUnavailableError(
                    f'Seats already taken: {", ".join(seat_map.labels(taken))}'
                )

            booking = Booking.create(
                id=booking_id,
                user_id=user.id,
                movie_id=movie.id,
                showtime_id=showtime.id,
                show_time=resolve_show_timestamp(
                    show_date=showtime.show_date,
                    show_time=showtime.show_time,
                    now=now,
                ),
                seats=len(seat_numbers),
                total_price=compute_total_price(
                    base_price=movie.price,
                    price_modifier=showtime.price_modifier,
                    seats=len(seat_numbers),
                ),
                seat_numbers=list(seat_numbers),
            )
            booking = await self.booking_record_store.create(booking=booking)

            self.booking_metrics.record_booking_created(movie_id=movie.id, seats=booking.seats)
            Logger.base.info(
                f'📝 [CREATE-BOOKING] {booking.id} for user {user.id}: '
                f'{", ".join(seat_map.labels(booking.seat_numbers))} @ {booking.total_price}'
            )
            return booking
