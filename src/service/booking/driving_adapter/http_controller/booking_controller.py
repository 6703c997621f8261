from typing import List

from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.payment_confirmation_coordinator import (
    PaymentConfirmationCoordinator,
)
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.user_entity import CurrentUser
from src.service.booking.domain.seat_map import format_seat_label
from src.service.booking.driving_adapter.http_controller.auth.current_user import (
    get_current_user,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingResponse,
    CancelBookingResponse,
    CheckoutResponse,
    PaymentAcknowledgementResponse,
    VerifyPaymentRequest,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(booking: Booking) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        user_id=booking.user_id,
        movie_id=booking.movie_id,
        showtime_id=booking.showtime_id,
        show_time=booking.show_time,
        seats=booking.seats,
        seat_numbers=booking.seat_numbers,
        seat_labels=[format_seat_label(n) for n in booking.seat_numbers],
        total_price=booking.total_price,
        payment_status=booking.payment_status.value,
        booking_time=booking.booking_time,
    )


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('movie_id', request.movie_id)
        span.set_attribute('showtime_id', request.showtime_id)
        span.set_attribute('user_id', current_user.id)

        booking = await use_case.create_booking(
            user=current_user,
            movie_id=request.movie_id,
            showtime_id=request.showtime_id,
            seat_numbers=request.seat_numbers,
        )
        span.set_attribute('booking.id', str(booking.id))
        return _to_response(booking)


@router.get('/my_booking', response_model=List[BookingResponse])
@Logger.io
async def list_my_bookings(
    current_user: CurrentUser = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(user=current_user)
    return [_to_response(booking) for booking in bookings]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: UtilsUUID7,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.get_booking(booking_id=booking_id, user=current_user)
    return _to_response(booking)


@router.patch('/{booking_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: UtilsUUID7,
    current_user: CurrentUser = Depends(get_current_user),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> CancelBookingResponse:
    booking = await use_case.cancel(booking_id=booking_id, user=current_user)
    return CancelBookingResponse(
        id=booking.id,
        payment_status=booking.payment_status.value,
        released_seats=booking.seat_numbers,
    )


@router.post('/{booking_id}/checkout')
@Logger.io
async def checkout_booking(
    booking_id: UtilsUUID7,
    current_user: CurrentUser = Depends(get_current_user),
    coordinator: PaymentConfirmationCoordinator = Depends(PaymentConfirmationCoordinator.depends),
) -> CheckoutResponse:
    session = await coordinator.initiate_payment(booking_id=booking_id, user=current_user)
    return CheckoutResponse(session_id=session.session_id, url=session.session_url)


@router.post('/{booking_id}/verify')
@Logger.io
async def verify_payment(
    booking_id: UtilsUUID7,
    request: VerifyPaymentRequest,
    current_user: CurrentUser = Depends(get_current_user),
    coordinator: PaymentConfirmationCoordinator = Depends(PaymentConfirmationCoordinator.depends),
) -> PaymentAcknowledgementResponse:
    """Idempotent: repeated calls for a settled session all succeed, one state change"""
    acknowledgement = await coordinator.confirm_payment(
        booking_id=booking_id, session_id=request.session_id, user=current_user
    )
    return PaymentAcknowledgementResponse(
        booking_id=acknowledgement.booking_id,
        success=acknowledgement.success,
        payment_status=acknowledgement.payment_status,
        message=acknowledgement.message,
    )
