from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.booking.domain.entity.movie_entity import Movie


class ICatalog(ABC):
    """Read-only movie catalog"""

    @abstractmethod
    async def list_movies(self) -> List[Movie]:
        pass

    @abstractmethod
    async def list_featured_movies(self) -> List[Movie]:
        pass

    @abstractmethod
    async def get_movie(self, *, movie_id: str) -> Optional[Movie]:
        pass
