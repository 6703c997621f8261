from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.booking.app.dto.payment_dto import PaymentSession, SessionVerification


class IPaymentGateway(ABC):
    """External checkout provider. Card handling never reaches this service."""

    @abstractmethod
    async def create_payment_session(
        self,
        *,
        booking_id: UUID,
        amount: int,
        currency: str,
        description: str,
        credential: str,
    ) -> PaymentSession:
        """
        Raises:
            ExternalServiceError: provider unreachable or returned an error
        """
        pass

    @abstractmethod
    async def verify_session(
        self, *, session_id: str, booking_id: UUID, credential: str
    ) -> SessionVerification:
        """
        Raises:
            ExternalServiceError: provider unreachable or returned an error
        """
        pass
