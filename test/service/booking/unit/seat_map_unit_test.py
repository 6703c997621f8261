from datetime import date, time

import pytest

from src.service.booking.domain.entity.theater_entity import Showtime
from src.service.booking.domain.seat_map import (
    LinearCongruentialGenerator,
    SeatMap,
    compute_filled_seats,
    filled_seat_count,
    format_seat_label,
    is_complete,
    remaining,
    select_seat,
    showtime_seed,
)


def _showtime(showtime_id: str = '1:1:20250110:0', available_seats: int = 60) -> Showtime:
    return Showtime(
        id=showtime_id,
        movie_id='1',
        theater_id='1',
        show_time=time(19, 0),
        show_date=date(2025, 1, 10),
        screen_number=2,
        available_seats=available_seats,
        price_modifier=1.5,
    )


@pytest.mark.unit
class TestFilledSeats:
    def test_same_showtime_yields_same_filled_set(self) -> None:
        first = compute_filled_seats('st-42', 80)
        second = compute_filled_seats('st-42', 80)

        assert first == second

    def test_filled_count_is_between_30_and_49(self) -> None:
        for showtime_id in ('a', 'st-1', 'st-2', '1:1:20250110:0', 'zzzzzz'):
            assert 30 <= filled_seat_count(showtime_id) <= 49

    def test_filled_seats_are_within_capacity(self) -> None:
        filled = compute_filled_seats('st-7', 90)

        assert len(filled) == filled_seat_count('st-7')
        assert all(1 <= seat <= 90 for seat in filled)

    def test_filled_count_is_capped_by_capacity(self) -> None:
        """
        Given: a hall smaller than the filled-seat target
        When: filled seats are computed
        Then: every seat is filled and nothing outside the hall is
        """
        filled = compute_filled_seats('st-7', 10)

        assert filled == frozenset(range(1, 11))

    def test_zero_capacity_yields_no_filled_seats(self) -> None:
        assert compute_filled_seats('st-7', 0) == frozenset()

    def test_seed_is_sum_of_character_codes(self) -> None:
        assert showtime_seed('ab') == ord('a') + ord('b')

    def test_random_source_is_injectable(self) -> None:
        class AlwaysFirstSeat:
            def __init__(self, seed: int) -> None:
                self.calls = 0

            def next_float(self) -> float:
                self.calls += 1
                # Cycle through the first three seats only
                return ((self.calls - 1) % 3) / 100

        filled = compute_filled_seats('x', 100, random_factory=AlwaysFirstSeat)

        assert filled <= frozenset({1, 2, 3})

    def test_lcg_stays_in_unit_interval(self) -> None:
        rng = LinearCongruentialGenerator(seed=12345)

        values = [rng.next_float() for _ in range(1000)]

        assert all(0 <= value < 1 for value in values)


@pytest.mark.unit
class TestSelectSeat:
    def test_adds_free_seat(self) -> None:
        assert select_seat((), 5, 2) == (5,)

    def test_clicking_selected_seat_removes_it(self) -> None:
        assert select_seat((5, 6), 5, 2) == (6,)

    def test_filled_seat_is_ignored(self) -> None:
        assert select_seat((1,), 7, 3, frozenset({7})) == (1,)

    def test_selection_never_exceeds_required_count(self) -> None:
        selection = (1, 2)

        assert select_seat(selection, 3, 2) == (1, 2)

    def test_selection_preserves_click_order(self) -> None:
        selection: tuple[int, ...] = ()
        for seat in (9, 3, 5):
            selection = select_seat(selection, seat, 3)

        assert selection == (9, 3, 5)

    def test_completeness_and_remaining(self) -> None:
        assert is_complete((1, 2), 2)
        assert not is_complete((1,), 2)
        assert remaining((1,), 3) == 2
        assert remaining((1, 2, 3), 3) == 0


@pytest.mark.unit
class TestSeatLabels:
    @pytest.mark.parametrize(
        'seat_number,label',
        [(1, 'A1'), (8, 'A8'), (9, 'B1'), (16, 'B8'), (17, 'C1')],
    )
    def test_label(self, seat_number: int, label: str) -> None:
        assert format_seat_label(seat_number) == label


@pytest.mark.unit
class TestSeatMap:
    def test_total_seats_is_available_plus_filled(self) -> None:
        showtime = _showtime(available_seats=60)

        seat_map = SeatMap.for_showtime(showtime)

        assert seat_map.total_seats == 60 + filled_seat_count(showtime.id)
        assert len(seat_map.filled) == filled_seat_count(showtime.id)
        assert len(seat_map.available_seats()) == 60

    def test_rows_round_up(self) -> None:
        seat_map = SeatMap(showtime_id='s', total_seats=17, filled=frozenset())

        assert seat_map.rows == 3

    def test_held_seats_are_unavailable(self) -> None:
        seat_map = SeatMap.for_showtime(_showtime())
        free_seat = seat_map.available_seats()[0]

        held_map = SeatMap.for_showtime(_showtime(), held={free_seat})

        assert not held_map.is_available(free_seat)
        assert held_map.select((), free_seat, 1) == ()

    def test_seat_outside_hall_is_ignored(self) -> None:
        seat_map = SeatMap.for_showtime(_showtime())

        assert seat_map.select((), seat_map.total_seats + 1, 1) == ()
        assert seat_map.select((), 0, 1) == ()

    def test_labels_are_sorted(self) -> None:
        seat_map = SeatMap(showtime_id='s', total_seats=20, filled=frozenset())

        assert seat_map.labels([10, 1]) == ['A1', 'B2']
