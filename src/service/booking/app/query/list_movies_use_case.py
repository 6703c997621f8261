from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.domain.entity.movie_entity import Movie


class ListMoviesUseCase:
    def __init__(self, catalog: ICatalog) -> None:
        self.catalog = catalog

    @classmethod
    @inject
    def depends(cls, catalog: ICatalog = Depends(Provide[Container.catalog])) -> Self:
        return cls(catalog=catalog)

    @Logger.io
    async def list_movies(self) -> List[Movie]:
        return await self.catalog.list_movies()

    @Logger.io
    async def list_featured(self) -> List[Movie]:
        return await self.catalog.list_featured_movies()

    @Logger.io
    async def get_movie(self, *, movie_id: str) -> Movie:
        movie = await self.catalog.get_movie(movie_id=movie_id)
        if movie is None:
            raise NotFoundError('Movie not found')
        return movie
