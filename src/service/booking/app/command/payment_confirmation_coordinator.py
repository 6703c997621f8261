from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AuthenticationError,
    ExternalServiceError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import BookingMetrics
from src.service.booking.app.dto.payment_dto import PaymentAcknowledgement, PaymentSession
from src.service.booking.app.interface.i_booking_record_store import IBookingRecordStore
from src.service.booking.app.interface.i_catalog import ICatalog
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway
from src.service.booking.domain.entity.booking_entity import PaymentStatus
from src.service.booking.domain.entity.user_entity import CurrentUser


class PaymentConfirmationCoordinator:
    """
    Turns a settled checkout session into exactly one pending -> paid transition.

    Confirmation may arrive more than once (redirect reloads, retries, several
    tabs). Every attempt runs the same sequence:

    1. Authenticate the caller
    2. Load the booking and check ownership
    3. Ask the payment gateway whether the session is settled
    4. mark_paid (idempotent: an already paid booking is returned unchanged)
    5. Acknowledge with the booking id

    Nothing is written unless step 3 reports the session as settled.

    The session id is not compared with the one last attached to the booking:
    re-opening checkout replaces it, yet an earlier session may still settle.
    The gateway only reports a session as settled for the booking it was
    created for.
    """

    def __init__(
        self,
        *,
        booking_record_store: IBookingRecordStore,
        payment_gateway: IPaymentGateway,
        catalog: ICatalog,
        booking_metrics: BookingMetrics,
    ) -> None:
        self.booking_record_store = booking_record_store
        self.payment_gateway = payment_gateway
        self.catalog = catalog
        self.booking_metrics = booking_metrics
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        booking_record_store: IBookingRecordStore = Depends(
            Provide[Container.booking_record_store]
        ),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        catalog: ICatalog = Depends(Provide[Container.catalog]),
        booking_metrics: BookingMetrics = Depends(Provide[Container.booking_metrics]),
    ) -> Self:
        return cls(
            booking_record_store=booking_record_store,
            payment_gateway=payment_gateway,
            catalog=catalog,
            booking_metrics=booking_metrics,
        )

    @staticmethod
    def _authenticate(user: Optional[CurrentUser]) -> tuple[CurrentUser, str]:
        user = CurrentUser.require(user)
        if not user.credential:
            raise AuthenticationError('Missing credential')
        return user, user.credential

    @Logger.io
    async def initiate_payment(
        self, *, booking_id: UUID, user: Optional[CurrentUser]
    ) -> PaymentSession:
        """
        Open a hosted checkout session for a pending booking.

        Raises:
            AuthenticationError, NotFoundError, AuthorizationError
            ConflictError: booking is no longer pending
            ExternalServiceError: gateway failure
        """
        user, credential = self._authenticate(user)

        with self.tracer.start_as_current_span(
            'use_case.initiate_payment', attributes={'booking.id': str(booking_id)}
        ):
            booking = await self.booking_record_store.get_owned(
                booking_id=booking_id, caller_id=user.id
            )
            booking.validate_awaiting_payment()

            movie = await self.catalog.get_movie(movie_id=booking.movie_id)
            title = movie.title if movie else 'Movie'
            description = (
                f'{title} - Movie Ticket | {booking.seats} seat(s) | '
                f'{booking.show_time:%Y-%m-%d %H:%M}'
            )

            try:
                session = await self.payment_gateway.create_payment_session(
                    booking_id=booking.id,
                    amount=booking.total_price,
                    currency=settings.PAYMENT_CURRENCY,
                    description=description,
                    credential=credential,
                )
            except ExternalServiceError:
                self.booking_metrics.record_checkout_session(result='failed')
                raise

            await self.booking_record_store.attach_payment_session(
                booking_id=booking.id, caller_id=user.id, session_id=session.session_id
            )
            self.booking_metrics.record_checkout_session(result='created')
            Logger.base.info(
                f'💳 [CHECKOUT] Session {session.session_id} opened for booking {booking.id}'
            )
            return session

    @Logger.io
    async def confirm_payment(
        self, *, booking_id: UUID, session_id: str, user: Optional[CurrentUser]
    ) -> PaymentAcknowledgement:
        """
        Raises:
            AuthenticationError: caller not signed in
            NotFoundError, AuthorizationError: before any gateway call
            ValidationError: session id missing
            ConflictError: booking was cancelled
            ExternalServiceError: gateway failure (booking left untouched)
        """
        user, credential = self._authenticate(user)
        if not session_id:
            raise ValidationError('Missing session_id')

        with self.tracer.start_as_current_span(
            'use_case.confirm_payment',
            attributes={'booking.id': str(booking_id), 'payment.session_id': session_id},
        ) as span:
            booking = await self.booking_record_store.get_owned(
                booking_id=booking_id, caller_id=user.id
            )
            booking.validate_can_be_paid()

            try:
                verification = await self.payment_gateway.verify_session(
                    session_id=session_id, booking_id=booking.id, credential=credential
                )
            except ExternalServiceError:
                self.booking_metrics.record_payment_confirmation(result='failed')
                raise

            span.set_attribute('payment.status', verification.status)
            if not verification.settled:
                self.booking_metrics.record_payment_confirmation(result='unsettled')
                Logger.base.info(
                    f'⏳ [CONFIRM] Session {session_id} not settled ({verification.status}), '
                    f'booking {booking.id} stays {booking.payment_status}'
                )
                return PaymentAcknowledgement(
                    booking_id=booking.id,
                    success=False,
                    payment_status=booking.payment_status.value,
                    message='Payment not completed',
                )

            paid = await self.booking_record_store.mark_paid(
                booking_id=booking.id, caller_id=user.id
            )
            self.booking_metrics.record_payment_confirmation(result='paid')
            Logger.base.info(f'✅ [CONFIRM] Booking {paid.id} confirmed as paid')
            return PaymentAcknowledgement(
                booking_id=paid.id,
                success=True,
                payment_status=PaymentStatus.PAID.value,
            )
