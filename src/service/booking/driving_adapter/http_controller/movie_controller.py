from typing import List

from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.query.list_movies_use_case import ListMoviesUseCase
from src.service.booking.driving_adapter.http_controller.schema.movie_schema import MovieResponse


router = APIRouter()


@router.get('', response_model=List[MovieResponse])
@Logger.io
async def list_movies(
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> List[MovieResponse]:
    return [MovieResponse.model_validate(movie) for movie in await use_case.list_movies()]


@router.get('/featured', response_model=List[MovieResponse])
@Logger.io
async def list_featured_movies(
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> List[MovieResponse]:
    return [MovieResponse.model_validate(movie) for movie in await use_case.list_featured()]


@router.get('/{movie_id}')
@Logger.io
async def get_movie(
    movie_id: str,
    use_case: ListMoviesUseCase = Depends(ListMoviesUseCase.depends),
) -> MovieResponse:
    return MovieResponse.model_validate(await use_case.get_movie(movie_id=movie_id))
