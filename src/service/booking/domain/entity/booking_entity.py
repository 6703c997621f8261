from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError, ValidationError
from src.platform.logging.loguru_io import Logger


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PAID = 'paid'
    CANCELLED = 'cancelled'


def compute_total_price(*, base_price: int | float, price_modifier: float, seats: int) -> int:
    """round(base price × modifier × seats), halves rounded up."""
    amount = Decimal(str(base_price)) * Decimal(str(price_modifier)) * seats
    return int(amount.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def resolve_show_timestamp(*, show_date: date, show_time: time, now: datetime) -> datetime:
    """
    Absolute screening timestamp for a calendar date + time of day.

    A time that has already passed on today's date rolls to the next day.
    """
    show_at = datetime.combine(show_date, show_time, tzinfo=now.tzinfo)
    if show_date == now.date() and show_at < now:
        show_at += timedelta(days=1)
    return show_at


@attrs.define
class Booking:
    id: UUID
    user_id: str
    movie_id: str
    showtime_id: str
    show_time: datetime
    seats: int
    total_price: int
    seat_numbers: List[int] = attrs.field(factory=list)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_session_id: Optional[str] = None
    booking_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: UUID,
        user_id: str,
        movie_id: str,
        showtime_id: str,
        show_time: datetime,
        seats: int,
        total_price: int,
        seat_numbers: List[int],
    ) -> 'Booking':
        if not user_id:
            raise ValidationError('user_id is required')
        if not movie_id:
            raise ValidationError('movie_id is required')
        if not showtime_id:
            raise ValidationError('showtime_id is required')
        if seats < 1:
            raise ValidationError('seats must be at least 1')
        if total_price <= 0:
            raise ValidationError('total_price must be positive')
        if len(seat_numbers) != seats:
            raise ValidationError('seats must match the number of selected seat numbers')
        if len(set(seat_numbers)) != len(seat_numbers):
            raise ValidationError('seat numbers must be unique')
        if any(seat_number < 1 for seat_number in seat_numbers):
            raise ValidationError('seat numbers must be positive')

        now = datetime.now(timezone.utc)
        return cls(
            id=id,
            user_id=user_id,
            movie_id=movie_id,
            showtime_id=showtime_id,
            show_time=show_time,
            seats=seats,
            total_price=total_price,
            seat_numbers=sorted(seat_numbers),
            payment_status=PaymentStatus.PENDING,
            booking_time=now,
            created_at=now,
            updated_at=now,
        )

    def validate_can_be_paid(self) -> None:
        """
        Raises:
            ConflictError: booking was cancelled
        """
        if self.payment_status == PaymentStatus.CANCELLED:
            raise ConflictError('Cannot pay for cancelled booking')

    def validate_can_be_cancelled(self) -> None:
        if self.payment_status == PaymentStatus.PAID:
            raise ConflictError('Cannot cancel paid booking')

    def validate_awaiting_payment(self) -> None:
        if self.payment_status != PaymentStatus.PENDING:
            raise ConflictError(f'Booking already has status: {self.payment_status}')

