"""In-process movie catalog backed by a fixed list"""

from typing import Iterable, List, Optional

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.domain.entity.movie_entity import Movie


_POSTER = 'https://images.unsplash.com/photo-{}?w=400&h=600&fit=crop'
_BACKDROP = 'https://images.unsplash.com/photo-{}?w=1920&h=800&fit=crop'

DEFAULT_MOVIES: tuple[Movie, ...] = (
    Movie(
        id='1',
        title='Pushpa 2: The Rule',
        price=200,
        genre=['Action', 'Drama'],
        rating=8.5,
        duration='2h 45m',
        language='Telugu',
        description='The epic saga continues as Pushpa rises to become the ultimate smuggling kingpin.',
        poster_url=_POSTER.format('1536440136628-849c177e76a1'),
        backdrop_url=_BACKDROP.format('1489599849927-2ee91cede3ba'),
        is_featured=True,
    ),
    Movie(
        id='2',
        title='Kalki 2898 AD',
        price=250,
        genre=['Sci-Fi', 'Action'],
        rating=8.2,
        duration='3h 00m',
        language='Telugu',
        description='A futuristic epic set in a dystopian world where hope arrives in an unexpected form.',
        poster_url=_POSTER.format('1534809027769-b00d750a6bac'),
        backdrop_url=_BACKDROP.format('1518173946687-a4c05d5c1c63'),
        is_featured=True,
    ),
    Movie(
        id='3',
        title='Singham Again',
        price=150,
        genre=['Action', 'Thriller'],
        rating=7.8,
        duration='2h 30m',
        language='Hindi',
        poster_url=_POSTER.format('1626814026160-2237a95fc5a0'),
    ),
    Movie(
        id='4',
        title='Bhool Bhulaiyaa 3',
        price=150,
        genre=['Horror', 'Comedy'],
        rating=7.5,
        duration='2h 35m',
        language='Hindi',
        poster_url=_POSTER.format('1509347528160-9a9e33742cdb'),
    ),
    Movie(
        id='5',
        title='The Dark Night',
        price=200,
        genre=['Action', 'Crime'],
        rating=9.0,
        duration='2h 32m',
        language='English',
        poster_url=_POSTER.format('1478720568477-152d9b164e26'),
    ),
    Movie(
        id='6',
        title='Inception',
        price=200,
        genre=['Sci-Fi', 'Thriller'],
        rating=8.8,
        duration='2h 28m',
        language='English',
        poster_url=_POSTER.format('1440404653325-ab127d49abc1'),
    ),
)


class StaticCatalog(ICatalog):
    def __init__(self, movies: Iterable[Movie] = DEFAULT_MOVIES) -> None:
        self._movies = {movie.id: movie for movie in movies}

    @Logger.io
    async def list_movies(self) -> List[Movie]:
        return list(self._movies.values())

    @Logger.io
    async def list_featured_movies(self) -> List[Movie]:
        return [movie for movie in self._movies.values() if movie.is_featured]

    @Logger.io
    async def get_movie(self, *, movie_id: str) -> Optional[Movie]:
        return self._movies.get(movie_id)
