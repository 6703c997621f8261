from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.query.list_showtimes_use_case import ListShowtimesUseCase
from src.service.booking.domain.booking_flow import utc_today
from src.service.booking.domain.entity.theater_entity import (
    Showtime,
    TheaterShowtimes,
    format_show_time,
)
from src.service.booking.domain.seat_map import SEATS_PER_ROW
from src.service.booking.driving_adapter.http_controller.schema.showtime_schema import (
    SeatMapResponse,
    ShowtimeResponse,
    TheaterResponse,
    TheaterShowtimesResponse,
)


router = APIRouter()


def _showtime_response(showtime: Showtime) -> ShowtimeResponse:
    return ShowtimeResponse(
        id=showtime.id,
        movie_id=showtime.movie_id,
        theater_id=showtime.theater_id,
        show_time=showtime.time_label,
        show_time_label=format_show_time(showtime.time_label),
        show_date=showtime.show_date,
        screen_number=showtime.screen_number,
        available_seats=showtime.available_seats,
        price_modifier=showtime.price_modifier,
    )


def _theater_showtimes_response(entry: TheaterShowtimes) -> TheaterShowtimesResponse:
    theater = entry.theater
    return TheaterShowtimesResponse(
        theater=TheaterResponse(
            id=theater.id,
            name=theater.name,
            location=theater.location,
            city=theater.city,
            total_screens=theater.total_screens,
            amenities=sorted(theater.amenities),
        ),
        showtimes=[_showtime_response(showtime) for showtime in entry.showtimes],
    )


@router.get('/dates', response_model=List[date])
@Logger.io
async def list_available_dates(
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> List[date]:
    return await use_case.list_dates(today=utc_today())


@router.get('', response_model=List[TheaterShowtimesResponse])
@Logger.io
async def list_theaters_with_showtimes(
    movie_id: str,
    show_date: Optional[date] = None,
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> List[TheaterShowtimesResponse]:
    today = utc_today()
    entries = await use_case.list_theaters_with_showtimes(
        movie_id=movie_id, show_date=show_date or today, today=today
    )
    return [_theater_showtimes_response(entry) for entry in entries]


@router.get('/{showtime_id}/seat_map')
@Logger.io
async def get_seat_map(
    showtime_id: str,
    use_case: ListShowtimesUseCase = Depends(ListShowtimesUseCase.depends),
) -> SeatMapResponse:
    showtime, seat_map = await use_case.get_seat_map(showtime_id=showtime_id)
    return SeatMapResponse(
        showtime_id=showtime.id,
        total_seats=seat_map.total_seats,
        seats_per_row=SEATS_PER_ROW,
        rows=seat_map.rows,
        filled=sorted(seat_map.filled),
        held=sorted(seat_map.held),
    )
