from datetime import date
from typing import List

from pydantic import BaseModel


class TheaterResponse(BaseModel):
    id: str
    name: str
    location: str
    city: str
    total_screens: int
    amenities: List[str]


class ShowtimeResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'id': '1:1:20250110:3',
                'movie_id': '1',
                'theater_id': '1',
                'show_time': '19:00',
                'show_time_label': '7:00 PM',
                'show_date': '2025-01-10',
                'screen_number': 4,
                'available_seats': 72,
                'price_modifier': 1.5,
            }
        },
    }

    id: str
    movie_id: str
    theater_id: str
    show_time: str
    show_time_label: str
    show_date: date
    screen_number: int
    available_seats: int
    price_modifier: float


class TheaterShowtimesResponse(BaseModel):
    theater: TheaterResponse
    showtimes: List[ShowtimeResponse]


class SeatMapResponse(BaseModel):
    showtime_id: str
    total_seats: int
    seats_per_row: int
    rows: int
    filled: List[int]
    held: List[int]
