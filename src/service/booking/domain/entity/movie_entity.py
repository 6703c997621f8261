from typing import List, Optional

import attrs


def _validate_positive_price(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value <= 0:
        raise ValueError(f'Movie {attribute.name} must be positive')


@attrs.define(frozen=True)
class Movie:
    id: str
    title: str
    price: int = attrs.field(validator=_validate_positive_price)
    genre: List[str] = attrs.field(factory=list)
    rating: float = 0.0
    duration: str = ''
    language: str = ''
    description: Optional[str] = None
    poster_url: Optional[str] = None
    backdrop_url: Optional[str] = None
    is_featured: bool = False
