"""
End-to-end booking flow through BookingCoordinator

Real record store (SQLite), static catalog, seeded showtimes and the in-process
payment gateway: theaters -> seats -> details -> payment -> success.
"""

from datetime import date, datetime, timezone

import pytest

from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.command.booking_coordinator import BookingCoordinator
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.payment_confirmation_coordinator import (
    PaymentConfirmationCoordinator,
)
from src.service.booking.domain.booking_flow import (
    BookingFlowState,
    BookingStep,
    ChangeSeatCount,
    ProceedToDetails,
    ToggleSeat,
)
from src.service.booking.domain.entity.booking_entity import PaymentStatus
from src.service.booking.domain.entity.user_entity import CurrentUser
from src.service.booking.driven_adapter.catalog.static_catalog import StaticCatalog
from src.service.booking.driven_adapter.payment.mock_payment_gateway import MockPaymentGateway
from src.service.booking.driven_adapter.repo.booking_record_store_impl import (
    BookingRecordStoreImpl,
)
from src.service.booking.driven_adapter.showtime.seeded_showtime_provider import (
    SeededShowtimeProvider,
)
from test.util_constant import SINGHAM_MOVIE_ID, STANDARD_THEATER_ID


def _today() -> date:
    return datetime.now(timezone.utc).date()


class TestBookingCoordinatorFlow:
    @pytest.fixture
    def payment_gateway(self) -> MockPaymentGateway:
        return MockPaymentGateway(auto_settle=False)

    @pytest.fixture
    def coordinator(
        self,
        booking_record_store: BookingRecordStoreImpl,
        payment_gateway: MockPaymentGateway,
        booking_metrics: BookingMetrics,
    ) -> BookingCoordinator:
        catalog = StaticCatalog()
        showtime_provider = SeededShowtimeProvider()
        return BookingCoordinator(
            catalog=catalog,
            showtime_provider=showtime_provider,
            booking_record_store=booking_record_store,
            create_booking_use_case=CreateBookingUseCase(
                booking_record_store=booking_record_store,
                catalog=catalog,
                showtime_provider=showtime_provider,
                booking_metrics=booking_metrics,
            ),
            payment_coordinator=PaymentConfirmationCoordinator(
                booking_record_store=booking_record_store,
                payment_gateway=payment_gateway,
                catalog=catalog,
                booking_metrics=booking_metrics,
            ),
        )

    async def _at_details(self, coordinator: BookingCoordinator) -> BookingFlowState:
        state = await coordinator.start(movie_id=SINGHAM_MOVIE_ID, today=_today())
        state = coordinator.apply(state, ChangeSeatCount(seat_count=2)).state

        entries = await coordinator.showtime_provider.get_theaters_with_showtimes(
            movie_id=SINGHAM_MOVIE_ID, show_date=state.selected_date
        )
        entry = next(e for e in entries if e.theater.id == STANDARD_THEATER_ID)
        result = await coordinator.select_showtime(
            state, theater_id=STANDARD_THEATER_ID, showtime_id=entry.showtimes[0].id
        )
        assert result.accepted
        state = result.state

        assert state.seat_map is not None
        for seat in state.seat_map.available_seats()[:2]:
            state = coordinator.apply(state, ToggleSeat(seat_number=seat)).state
        result = coordinator.apply(state, ProceedToDetails())
        assert result.accepted
        return result.state

    @pytest.mark.integration
    async def test_full_booking_and_payment(
        self,
        coordinator: BookingCoordinator,
        booking_record_store: BookingRecordStoreImpl,
        payment_gateway: MockPaymentGateway,
        user: CurrentUser,
    ) -> None:
        """
        Given: 2 seats of Singham Again (150) at MovieMax (x1.0)
        When: the user books, checks out and the payment settles
        Then: one paid booking of 300 exists and the flow ends in success
        """
        state = await self._at_details(coordinator)
        assert state.total_price == 300

        paying = await coordinator.proceed_to_payment(state, user=user)
        assert paying.accepted
        assert paying.state.step == BookingStep.PAYMENT
        booking_id = paying.state.booking_id
        assert booking_id is not None

        session = await coordinator.checkout(paying.state, user=user)
        unsettled = await coordinator.confirm(
            paying.state, session_id=session.session_id, user=user
        )
        assert not unsettled.accepted
        assert unsettled.state.step == BookingStep.PAYMENT

        payment_gateway.settle(session.session_id)
        settled = await coordinator.confirm(paying.state, session_id=session.session_id, user=user)
        repeated = await coordinator.confirm(paying.state, session_id=session.session_id, user=user)

        assert settled.accepted
        assert settled.state.step == BookingStep.SUCCESS
        assert repeated.accepted
        stored = await booking_record_store.get(booking_id=booking_id)
        assert stored is not None
        assert stored.payment_status == PaymentStatus.PAID
        assert stored.total_price == 300
        assert stored.seat_numbers == sorted(state.selected_seats)
        assert len(await booking_record_store.list_by_user(user_id=user.id)) == 1

    @pytest.mark.integration
    async def test_anonymous_user_is_asked_to_sign_in(
        self, coordinator: BookingCoordinator, booking_record_store: BookingRecordStoreImpl
    ) -> None:
        state = await self._at_details(coordinator)

        result = await coordinator.proceed_to_payment(state, user=None)

        assert not result.accepted
        assert result.auth_required
        assert result.state.step == BookingStep.DETAILS
        assert await booking_record_store.list_held_seats(
            showtime_id=state.showtime.id  # type: ignore[union-attr]
        ) == frozenset()

    @pytest.mark.integration
    async def test_seats_taken_meanwhile_fail_with_safe_message(
        self,
        coordinator: BookingCoordinator,
        user: CurrentUser,
        another_user: CurrentUser,
    ) -> None:
        state = await self._at_details(coordinator)
        first = await coordinator.proceed_to_payment(state, user=another_user)
        assert first.accepted

        second = await coordinator.proceed_to_payment(state, user=user)

        assert not second.accepted
        assert second.message == (
            'Some of the selected seats are no longer available. Please choose other seats.'
        )
        assert second.state.step == BookingStep.DETAILS

    @pytest.mark.integration
    async def test_close_discards_selection(self, coordinator: BookingCoordinator) -> None:
        state = await self._at_details(coordinator)

        result = coordinator.close(state)

        assert result.state.step == BookingStep.CLOSED
        assert result.state.selected_seats == ()
        assert result.state.showtime is None
