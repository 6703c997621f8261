"""Application layer DTOs"""

from src.service.booking.app.dto.payment_dto import (
    PaymentAcknowledgement,
    PaymentSession,
    SessionVerification,
)

__all__ = [
    'PaymentAcknowledgement',
    'PaymentSession',
    'SessionVerification',
]
