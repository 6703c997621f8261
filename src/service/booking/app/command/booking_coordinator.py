"""
Booking Coordinator

Drives one user's booking flow end to end: the pure state machine decides
what is allowed, this class fetches the data each step needs and performs
the side effects (booking creation, checkout, confirmation) at the steps
that require them.

Failures raised by collaborators are turned into rejected FlowResults that
carry only the user-safe message; the raw cause has already been logged.
"""

from datetime import date
from typing import Optional

from src.platform.exception.exceptions import (
    AuthenticationError,
    CustomBaseError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.payment_confirmation_coordinator import (
    PaymentConfirmationCoordinator,
)
from src.service.booking.app.dto.payment_dto import PaymentSession
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.app.interface.i_showtime_provider import IShowtimeProvider
from src.service.booking.domain.booking_flow import (
    BookingFlowEvent,
    BookingFlowState,
    BookingStep,
    Close,
    EnterPayment,
    FlowResult,
    PaymentSettled,
    SelectShowtime,
    start_flow,
    transition,
)
from src.service.booking.domain.entity.user_entity import CurrentUser


def _failed(state: BookingFlowState, error: CustomBaseError) -> FlowResult:
    return FlowResult(
        state=state,
        accepted=False,
        message=error.safe_message,
        auth_required=isinstance(error, AuthenticationError),
    )


class BookingCoordinator:
    def __init__(
        self,
        *,
        catalog: ICatalog,
        showtime_provider: IShowtimeProvider,
        booking_record_store: IBookingRecordStore,
        create_booking_use_case: CreateBookingUseCase,
        payment_coordinator: PaymentConfirmationCoordinator,
    ) -> None:
        self.catalog = catalog
        self.showtime_provider = showtime_provider
        self.booking_record_store = booking_record_store
        self.create_booking_use_case = create_booking_use_case
        self.payment_coordinator = payment_coordinator

    @Logger.io
    async def start(self, *, movie_id: str, today: date) -> BookingFlowState:
        movie = await self.catalog.get_movie(movie_id=movie_id)
        if movie is None:
            raise NotFoundError('Movie not found')
        return start_flow(movie_id=movie.id, base_price=movie.price, today=today)

    def apply(self, state: BookingFlowState, event: BookingFlowEvent) -> FlowResult:
        return transition(state, event)

    @Logger.io
    async def select_showtime(
        self, state: BookingFlowState, *, theater_id: str, showtime_id: Optional[str]
    ) -> FlowResult:
        """Resolve the showtime and its currently held seats, then enter seat selection"""
        showtime = None
        held: frozenset[int] = frozenset()
        if showtime_id:
            showtime = await self.showtime_provider.get_showtime(showtime_id=showtime_id)
            if showtime is not None:
                held = await self.booking_record_store.list_held_seats(showtime_id=showtime.id)
        return transition(
            state, SelectShowtime(theater_id=theater_id, showtime=showtime, held_seats=held)
        )

    @Logger.io
    async def proceed_to_payment(
        self, state: BookingFlowState, *, user: Optional[CurrentUser]
    ) -> FlowResult:
        """details -> payment; the pending booking is created before the transition"""
        if state.step != BookingStep.DETAILS or user is None or state.showtime is None:
            return transition(state, EnterPayment(user_id=user.id if user else None))

        try:
            booking = await self.create_booking_use_case.create_booking(
                user=user,
                movie_id=state.movie_id,
                showtime_id=state.showtime.id,
                seat_numbers=list(state.selected_seats),
            )
        except CustomBaseError as e:
            return _failed(state, e)
        return transition(state, EnterPayment(user_id=user.id, booking_id=booking.id))

    @Logger.io
    async def checkout(
        self, state: BookingFlowState, *, user: Optional[CurrentUser]
    ) -> PaymentSession:
        if state.step != BookingStep.PAYMENT or state.booking_id is None:
            raise NotFoundError('No booking awaiting payment')
        return await self.payment_coordinator.initiate_payment(
            booking_id=state.booking_id, user=user
        )

    @Logger.io
    async def confirm(
        self, state: BookingFlowState, *, session_id: str, user: Optional[CurrentUser]
    ) -> FlowResult:
        if state.step != BookingStep.PAYMENT or state.booking_id is None:
            return FlowResult(state=state, accepted=False, message='No booking awaiting payment')

        try:
            acknowledgement = await self.payment_coordinator.confirm_payment(
                booking_id=state.booking_id, session_id=session_id, user=user
            )
        except CustomBaseError as e:
            return _failed(state, e)

        if not acknowledgement.success:
            return FlowResult(state=state, accepted=False, message=acknowledgement.message)
        return transition(state, PaymentSettled(booking_id=acknowledgement.booking_id))

    def close(self, state: BookingFlowState) -> FlowResult:
        return transition(state, Close())
