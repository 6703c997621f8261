from typing import List, Optional

from pydantic import BaseModel


class MovieResponse(BaseModel):
    model_config = {
        'from_attributes': True,
        'json_schema_extra': {
            'example': {
                'id': '1',
                'title': 'Pushpa 2: The Rule',
                'price': 200,
                'genre': ['Action', 'Drama'],
                'rating': 8.5,
                'duration': '2h 45m',
                'language': 'Telugu',
                'is_featured': True,
            }
        },
    }

    id: str
    title: str
    price: int
    genre: List[str]
    rating: float
    duration: str
    language: str
    description: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    is_featured: bool = False
