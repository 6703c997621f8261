from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from src.service.booking.domain.entity.theater_entity import Showtime, TheaterShowtimes


class IShowtimeProvider(ABC):
    """Theaters and screenings for a movie; reproducible for the same inputs"""

    @abstractmethod
    async def get_theaters_with_showtimes(
        self, *, movie_id: str, show_date: date
    ) -> List[TheaterShowtimes]:
        pass

    @abstractmethod
    async def get_available_dates(self, *, today: date) -> List[date]:
        pass

    @abstractmethod
    async def get_showtime(self, *, showtime_id: str) -> Optional[Showtime]:
        pass
