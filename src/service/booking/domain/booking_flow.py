"""
Booking Flow

The user-facing booking steps as an explicit state value plus a pure
transition function:

    theaters -> seats -> details -> payment -> success
    (any) --Close--> closed

``transition(state, event)`` never mutates and never raises for user input;
a rejected event returns the unchanged state with a message explaining what
the user has to do next.
"""

from datetime import date, datetime, timedelta, timezone
from enum import StrEnum
from typing import Callable, FrozenSet, Optional

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import compute_total_price
from src.service.booking.domain.entity.theater_entity import Showtime
from src.service.booking.domain.seat_map import SeatMap, Selection, is_complete, remaining


DEFAULT_SEAT_COUNT = 1
MIN_SEAT_COUNT = 1
MAX_SEAT_COUNT = 10
BOOKING_WINDOW_DAYS = 7


class BookingStep(StrEnum):
    THEATERS = 'theaters'
    SEATS = 'seats'
    DETAILS = 'details'
    PAYMENT = 'payment'
    SUCCESS = 'success'
    CLOSED = 'closed'


@attrs.define(frozen=True)
class BookingFlowState:
    step: BookingStep
    movie_id: str
    base_price: int
    today: date
    selected_date: date
    theater_id: Optional[str] = None
    showtime: Optional[Showtime] = None
    seat_map: Optional[SeatMap] = None
    seat_count: int = DEFAULT_SEAT_COUNT
    selected_seats: Selection = ()
    total_price: Optional[int] = None
    booking_id: Optional[UUID] = None

    @property
    def seats_remaining(self) -> int:
        return remaining(self.selected_seats, self.seat_count)


# ---------------------------------------------------------------- events


@attrs.define(frozen=True)
class SelectDate:
    selected_date: date


@attrs.define(frozen=True)
class SelectShowtime:
    theater_id: str
    showtime: Optional[Showtime]
    held_seats: FrozenSet[int] = frozenset()


@attrs.define(frozen=True)
class ChangeSeatCount:
    seat_count: int


@attrs.define(frozen=True)
class ToggleSeat:
    seat_number: int


@attrs.define(frozen=True)
class ProceedToDetails:
    pass


@attrs.define(frozen=True)
class EnterPayment:
    user_id: Optional[str]
    booking_id: Optional[UUID] = None


@attrs.define(frozen=True)
class PaymentSettled:
    booking_id: UUID


@attrs.define(frozen=True)
class GoBack:
    pass


@attrs.define(frozen=True)
class Close:
    pass


BookingFlowEvent = (
    SelectDate
    | SelectShowtime
    | ChangeSeatCount
    | ToggleSeat
    | ProceedToDetails
    | EnterPayment
    | PaymentSettled
    | GoBack
    | Close
)


@attrs.define(frozen=True)
class FlowResult:
    state: BookingFlowState
    accepted: bool = True
    message: Optional[str] = None
    auth_required: bool = False


# ---------------------------------------------------------------- helpers


def start_flow(*, movie_id: str, base_price: int, today: date) -> BookingFlowState:
    return BookingFlowState(
        step=BookingStep.THEATERS,
        movie_id=movie_id,
        base_price=base_price,
        today=today,
        selected_date=today,
    )


def utc_today() -> date:
    """Today on the UTC clock that also stamps bookings"""
    return datetime.now(timezone.utc).date()


def booking_window(today: date) -> list[date]:
    return [today + timedelta(days=offset) for offset in range(BOOKING_WINDOW_DAYS)]


def clamp_seat_count(seat_count: int) -> int:
    return max(MIN_SEAT_COUNT, min(MAX_SEAT_COUNT, seat_count))


def _reject(state: BookingFlowState, message: str, *, auth_required: bool = False) -> FlowResult:
    return FlowResult(state=state, accepted=False, message=message, auth_required=auth_required)


def _seats_message(count: int) -> str:
    return f'Please select {count} more seat{"s" if count != 1 else ""}'


# ---------------------------------------------------------------- handlers


def _select_date(state: BookingFlowState, event: SelectDate) -> FlowResult:
    if event.selected_date not in booking_window(state.today):
        return _reject(state, f'Please select a date within the next {BOOKING_WINDOW_DAYS} days')
    # Showtimes are date-scoped, so any previous pick is invalid now
    return FlowResult(
        state=attrs.evolve(
            state, selected_date=event.selected_date, theater_id=None, showtime=None
        )
    )


def _select_showtime(state: BookingFlowState, event: SelectShowtime) -> FlowResult:
    if event.showtime is None:
        return _reject(state, 'Please select a show time')
    if event.showtime.show_date != state.selected_date:
        return _reject(state, 'Show time is not available on the selected date')
    return FlowResult(
        state=attrs.evolve(
            state,
            step=BookingStep.SEATS,
            theater_id=event.theater_id,
            showtime=event.showtime,
            seat_map=SeatMap.for_showtime(event.showtime, held=event.held_seats),
            selected_seats=(),
        )
    )


def _change_seat_count(state: BookingFlowState, event: ChangeSeatCount) -> FlowResult:
    seat_count = clamp_seat_count(event.seat_count)
    selected = state.selected_seats
    if len(selected) > seat_count:
        selected = ()
    return FlowResult(state=attrs.evolve(state, seat_count=seat_count, selected_seats=selected))


def _toggle_seat(state: BookingFlowState, event: ToggleSeat) -> FlowResult:
    assert state.seat_map is not None, 'seats step always carries a seat map'
    selected = state.seat_map.select(state.selected_seats, event.seat_number, state.seat_count)
    return FlowResult(state=attrs.evolve(state, selected_seats=selected))


def _proceed_to_details(state: BookingFlowState, event: ProceedToDetails) -> FlowResult:
    if not is_complete(state.selected_seats, state.seat_count):
        return _reject(state, _seats_message(state.seats_remaining))
    assert state.showtime is not None
    total_price = compute_total_price(
        base_price=state.base_price,
        price_modifier=state.showtime.price_modifier,
        seats=state.seat_count,
    )
    return FlowResult(
        state=attrs.evolve(state, step=BookingStep.DETAILS, total_price=total_price)
    )


def _enter_payment(state: BookingFlowState, event: EnterPayment) -> FlowResult:
    if not event.user_id:
        return _reject(state, 'Please sign in to book tickets', auth_required=True)
    if event.booking_id is None:
        return _reject(state, 'Booking failed. Please try again.')
    return FlowResult(
        state=attrs.evolve(state, step=BookingStep.PAYMENT, booking_id=event.booking_id)
    )


def _payment_settled(state: BookingFlowState, event: PaymentSettled) -> FlowResult:
    if state.booking_id is None or event.booking_id != state.booking_id:
        return _reject(state, 'Payment does not match this booking')
    return FlowResult(state=attrs.evolve(state, step=BookingStep.SUCCESS))


def _go_back(state: BookingFlowState, event: GoBack) -> FlowResult:
    if state.step == BookingStep.SEATS:
        return FlowResult(
            state=attrs.evolve(
                state,
                step=BookingStep.THEATERS,
                theater_id=None,
                showtime=None,
                seat_map=None,
                selected_seats=(),
            )
        )
    if state.step == BookingStep.DETAILS:
        return FlowResult(state=attrs.evolve(state, step=BookingStep.SEATS, total_price=None))
    if state.step == BookingStep.PAYMENT:
        return FlowResult(state=attrs.evolve(state, step=BookingStep.DETAILS, booking_id=None))
    return _reject(state, f'Cannot go back from {state.step}')


def _close(state: BookingFlowState, event: Close) -> FlowResult:
    reset = start_flow(movie_id=state.movie_id, base_price=state.base_price, today=state.today)
    return FlowResult(state=attrs.evolve(reset, step=BookingStep.CLOSED))


_Handler = Callable[[BookingFlowState, BookingFlowEvent], FlowResult]

# event type -> (steps in which it is accepted, handler); None means any step
_TRANSITIONS: dict[type, tuple[frozenset[BookingStep] | None, _Handler]] = {
    SelectDate: (frozenset({BookingStep.THEATERS}), _select_date),  # type: ignore[dict-item]
    SelectShowtime: (frozenset({BookingStep.THEATERS}), _select_showtime),  # type: ignore[dict-item]
    ChangeSeatCount: (
        frozenset({BookingStep.THEATERS, BookingStep.SEATS}),
        _change_seat_count,  # type: ignore[dict-item]
    ),
    ToggleSeat: (frozenset({BookingStep.SEATS}), _toggle_seat),  # type: ignore[dict-item]
    ProceedToDetails: (frozenset({BookingStep.SEATS}), _proceed_to_details),  # type: ignore[dict-item]
    EnterPayment: (frozenset({BookingStep.DETAILS}), _enter_payment),  # type: ignore[dict-item]
    PaymentSettled: (frozenset({BookingStep.PAYMENT}), _payment_settled),  # type: ignore[dict-item]
    GoBack: (None, _go_back),  # type: ignore[dict-item]
    Close: (None, _close),  # type: ignore[dict-item]
}


def transition(state: BookingFlowState, event: BookingFlowEvent) -> FlowResult:
    try:
        allowed_steps, handler = _TRANSITIONS[type(event)]
    except KeyError:
        raise TypeError(f'Unknown booking flow event: {type(event).__name__}') from None
    if allowed_steps is not None and state.step not in allowed_steps:
        return _reject(state, f'{type(event).__name__} is not available during {state.step}')
    return handler(state, event)
