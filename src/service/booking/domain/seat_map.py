"""
Seat Map

Pure seat-occupancy logic for one showtime: which seats are filled, how a
selection evolves when a seat is clicked, and how seats are labelled.
Nothing here touches infrastructure and nothing here raises; invalid
selections are no-ops visible in the returned value.
"""

from typing import Callable, FrozenSet, Iterable, Protocol, Tuple

import attrs

from src.service.booking.domain.entity.theater_entity import Showtime


SEATS_PER_ROW = 8
ROW_LABELS = 'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
MIN_FILLED_SEATS = 30
FILLED_SEATS_SPREAD = 20

Selection = Tuple[int, ...]


class SeededRandom(Protocol):
    def next_float(self) -> float: ...


@attrs.define
class LinearCongruentialGenerator:
    """Explicitly seeded pseudo-random sequence in [0, 1)."""

    seed: int
    multiplier: int = 9301
    increment: int = 49297
    modulus: int = 233280

    def next_float(self) -> float:
        self.seed = (self.seed * self.multiplier + self.increment) % self.modulus
        return self.seed / self.modulus


RandomFactory = Callable[[int], SeededRandom]


def showtime_seed(showtime_id: str) -> int:
    return sum(ord(char) for char in showtime_id)


def filled_seat_count(showtime_id: str) -> int:
    return MIN_FILLED_SEATS + showtime_seed(showtime_id) % FILLED_SEATS_SPREAD


def compute_filled_seats(
    showtime_id: str,
    total_capacity: int,
    *,
    random_factory: RandomFactory = LinearCongruentialGenerator,
) -> FrozenSet[int]:
    """
    Deterministic set of already-sold seat numbers (1-based) for a showtime.

    The same showtime id and capacity always yield the same set.
    """
    if total_capacity < 1:
        return frozenset()

    seed = showtime_seed(showtime_id)
    target = min(filled_seat_count(showtime_id), total_capacity)
    rng = random_factory(seed)

    filled: set[int] = set()
    # LCG has full period, so the bound is never reached for realistic capacities
    max_draws = 233280 * 2
    draws = 0
    while len(filled) < target and draws < max_draws:
        filled.add(int(rng.next_float() * total_capacity) + 1)
        draws += 1
    return frozenset(filled)


def select_seat(
    selection: Iterable[int],
    seat_number: int,
    required_count: int,
    filled: FrozenSet[int] = frozenset(),
) -> Selection:
    """Toggle ``seat_number`` in ``selection``; filled seats and overflow are ignored."""
    current = tuple(selection)
    if seat_number in filled:
        return current
    if seat_number in current:
        return tuple(seat for seat in current if seat != seat_number)
    if len(current) >= required_count:
        return current
    return current + (seat_number,)


def format_seat_label(seat_number: int) -> str:
    row = (seat_number - 1) // SEATS_PER_ROW
    col = (seat_number - 1) % SEATS_PER_ROW + 1
    return f'{ROW_LABELS[row]}{col}'


def is_complete(selection: Iterable[int], required_count: int) -> bool:
    return len(tuple(selection)) == required_count


def remaining(selection: Iterable[int], required_count: int) -> int:
    return max(required_count - len(tuple(selection)), 0)


@attrs.define(frozen=True)
class SeatMap:
    """Derived occupancy view of one showtime (never persisted)."""

    showtime_id: str
    total_seats: int
    filled: FrozenSet[int]
    held: FrozenSet[int] = frozenset()

    @classmethod
    def for_showtime(
        cls,
        showtime: Showtime,
        *,
        held: Iterable[int] = (),
        random_factory: RandomFactory = LinearCongruentialGenerator,
    ) -> 'SeatMap':
        total_seats = showtime.available_seats + filled_seat_count(showtime.id)
        return cls(
            showtime_id=showtime.id,
            total_seats=total_seats,
            filled=compute_filled_seats(
                showtime.id, total_seats, random_factory=random_factory
            ),
            held=frozenset(held),
        )

    @property
    def unavailable(self) -> FrozenSet[int]:
        return self.filled | self.held

    @property
    def rows(self) -> int:
        return -(-self.total_seats // SEATS_PER_ROW)

    def is_available(self, seat_number: int) -> bool:
        return 1 <= seat_number <= self.total_seats and seat_number not in self.unavailable

    def available_seats(self) -> list[int]:
        return [n for n in range(1, self.total_seats + 1) if n not in self.unavailable]

    def select(self, selection: Iterable[int], seat_number: int, required_count: int) -> Selection:
        if not 1 <= seat_number <= self.total_seats:
            return tuple(selection)
        return select_seat(selection, seat_number, required_count, self.unavailable)

    def labels(self, seat_numbers: Iterable[int]) -> list[str]:
        return [format_seat_label(n) for n in sorted(seat_numbers)]
