from datetime import date, time
from typing import FrozenSet

import attrs


@attrs.define(frozen=True)
class Theater:
    id: str
    name: str
    location: str
    city: str
    total_screens: int
    amenities: FrozenSet[str] = attrs.field(factory=frozenset, converter=frozenset)

    @property
    def has_imax(self) -> bool:
        return 'IMAX' in self.amenities


@attrs.define(frozen=True)
class Showtime:
    """A single screening of a movie at a theater, screen, date and time."""

    id: str
    movie_id: str
    theater_id: str
    show_time: time
    show_date: date
    screen_number: int
    available_seats: int
    price_modifier: float = 1.0

    @property
    def time_label(self) -> str:
        return self.show_time.strftime('%H:%M')


@attrs.define(frozen=True)
class TheaterShowtimes:
    theater: Theater
    showtimes: tuple[Showtime, ...]


def format_show_time(value: str) -> str:
    """'19:00' -> '7:00 PM', '00:30' -> '12:30 AM'"""
    hours, minutes = value.split(':')
    hour = int(hours)
    period = 'PM' if hour >= 12 else 'AM'
    return f'{hour % 12 or 12}:{minutes} {period}'
