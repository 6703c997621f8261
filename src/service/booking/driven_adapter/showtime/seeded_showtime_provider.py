"""
Seeded Showtime Provider

Generates theaters' screenings for a movie and date from a seed derived from
(movie_id, theater_id, date), so the same request always yields the same
showtime set, screen numbers and seat counts. A showtime id encodes those
inputs, which lets any showtime be regenerated from its id alone.
"""

from datetime import date, datetime, time
import random
from typing import Callable, Iterable, List, Optional
import zlib

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_showtime_provider import IShowtimeProvider
from src.service.booking.domain.booking_flow import booking_window
from src.service.booking.domain.entity.theater_entity import Showtime, Theater, TheaterShowtimes


SHOW_TIME_SLOTS: tuple[str, ...] = ('10:00', '13:00', '16:00', '19:00', '22:00')
MIN_SLOTS_PER_THEATER = 3
MAX_SLOTS_PER_THEATER = 5
MIN_AVAILABLE_SEATS = 50
MAX_AVAILABLE_SEATS = 100  # exclusive
IMAX_PRICE_MODIFIER = 1.5
STANDARD_PRICE_MODIFIER = 1.0

DEFAULT_THEATERS: tuple[Theater, ...] = (
    Theater(
        id='1',
        name='PVR Cinemas',
        location='Phoenix Mall, Lower Parel',
        city='Mumbai',
        total_screens=8,
        amenities={'IMAX', 'Dolby Atmos', 'Recliner Seats', 'Food Court'},
    ),
    Theater(
        id='2',
        name='INOX Megaplex',
        location='Inorbit Mall, Malad',
        city='Mumbai',
        total_screens=6,
        amenities={'4DX', 'Dolby Atmos', 'VIP Lounge'},
    ),
    Theater(
        id='3',
        name='Cinépolis',
        location='Viviana Mall, Thane',
        city='Mumbai',
        total_screens=10,
        amenities={'IMAX', 'VIP Seats', 'Online Food Ordering'},
    ),
    Theater(
        id='4',
        name='Carnival Cinemas',
        location='Imax Wadala',
        city='Mumbai',
        total_screens=5,
        amenities={'IMAX', 'Premium Seats'},
    ),
    Theater(
        id='5',
        name='MovieMax',
        location='Sion',
        city='Mumbai',
        total_screens=4,
        amenities={'Dolby Sound', 'Comfortable Seating'},
    ),
)


def make_showtime_id(movie_id: str, theater_id: str, show_date: date, index: int) -> str:
    return f'{movie_id}:{theater_id}:{show_date:%Y%m%d}:{index}'


def parse_showtime_id(showtime_id: str) -> Optional[tuple[str, str, date, int]]:
    """Inverse of make_showtime_id; None for anything it did not produce"""
    parts = showtime_id.rsplit(':', 3)
    if len(parts) != 4:
        return None
    movie_id, theater_id, date_part, index_part = parts
    try:
        show_date = datetime.strptime(date_part, '%Y%m%d').date()
        index = int(index_part)
    except ValueError:
        return None
    if not movie_id or not theater_id:
        return None
    return movie_id, theater_id, show_date, index


def showtime_seed(movie_id: str, theater_id: str, show_date: date) -> int:
    return zlib.crc32(f'{movie_id}:{theater_id}:{show_date:%Y%m%d}'.encode())


class SeededShowtimeProvider(IShowtimeProvider):
    def __init__(
        self,
        theaters: Iterable[Theater] = DEFAULT_THEATERS,
        *,
        random_factory: Callable[[int], random.Random] = random.Random,
    ) -> None:
        self._theaters = {theater.id: theater for theater in theaters}
        self._random_factory = random_factory

    def _generate(self, movie_id: str, theater: Theater, show_date: date) -> List[Showtime]:
        rng = self._random_factory(showtime_seed(movie_id, theater.id, show_date))
        slot_count = rng.randint(MIN_SLOTS_PER_THEATER, MAX_SLOTS_PER_THEATER)
        slots = sorted(rng.sample(SHOW_TIME_SLOTS, slot_count))
        price_modifier = IMAX_PRICE_MODIFIER if theater.has_imax else STANDARD_PRICE_MODIFIER

        return [
            Showtime(
                id=make_showtime_id(movie_id, theater.id, show_date, index),
                movie_id=movie_id,
                theater_id=theater.id,
                show_time=time.fromisoformat(slot),
                show_date=show_date,
                screen_number=rng.randint(1, theater.total_screens),
                available_seats=rng.randrange(MIN_AVAILABLE_SEATS, MAX_AVAILABLE_SEATS),
                price_modifier=price_modifier,
            )
            for index, slot in enumerate(slots)
        ]

    @Logger.io
    async def get_theaters_with_showtimes(
        self, *, movie_id: str, show_date: date
    ) -> List[TheaterShowtimes]:
        return [
            TheaterShowtimes(
                theater=theater,
                showtimes=tuple(self._generate(movie_id, theater, show_date)),
            )
            for theater in self._theaters.values()
        ]

    @Logger.io
    async def get_available_dates(self, *, today: date) -> List[date]:
        return booking_window(today)

    @Logger.io
    async def get_showtime(self, *, showtime_id: str) -> Optional[Showtime]:
        parsed = parse_showtime_id(showtime_id)
        if parsed is None:
            return None
        movie_id, theater_id, show_date, index = parsed
        theater = self._theaters.get(theater_id)
        if theater is None:
            return None
        showtimes = self._generate(movie_id, theater, show_date)
        return showtimes[index] if 0 <= index < len(showtimes) else None
