"""
In-process payment gateway for local runs and tests.

Sessions settle immediately when ``auto_settle`` is on, otherwise only after
``settle(session_id)`` is called.
"""

from typing import Dict

import attrs
import uuid_utils
from uuid_utils import UUID

from src.platform.exception.exceptions import ExternalServiceError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.payment_dto import PaymentSession, SessionVerification
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway


SESSION_PREFIX = 'PAY_MOCK_'


@attrs.define
class _MockSession:
    booking_id: UUID
    amount: int
    currency: str
    settled: bool = False


class MockPaymentGateway(IPaymentGateway):
    def __init__(self, *, auto_settle: bool = True, base_url: str = 'http://localhost') -> None:
        self.auto_settle = auto_settle
        self.base_url = base_url.rstrip('/')
        self._sessions: Dict[str, _MockSession] = {}

    @Logger.io
    async def create_payment_session(
        self,
        *,
        booking_id: UUID,
        amount: int,
        currency: str,
        description: str,
        credential: str,
    ) -> PaymentSession:
        if not credential:
            raise ExternalServiceError('Missing authorization')
        if amount <= 0:
            raise ExternalServiceError('Invalid request parameters')

        session_id = f'{SESSION_PREFIX}{uuid_utils.uuid7().hex}'
        self._sessions[session_id] = _MockSession(
            booking_id=booking_id, amount=amount, currency=currency, settled=self.auto_settle
        )
        Logger.base.info(f'💳 [MOCK-PAYMENT] Session {session_id} for booking {booking_id}')
        return PaymentSession(
            session_id=session_id,
            session_url=f'{self.base_url}/checkout/{session_id}?booking_id={booking_id}',
        )

    @Logger.io
    async def verify_session(
        self, *, session_id: str, booking_id: UUID, credential: str
    ) -> SessionVerification:
        if not credential:
            raise ExternalServiceError('Missing authorization')
        session = self._sessions.get(session_id)
        if session is None:
            return SessionVerification(settled=False, status='unknown_session')
        if str(session.booking_id) != str(booking_id):
            return SessionVerification(settled=False, status='booking_mismatch')
        return SessionVerification(
            settled=session.settled, status='paid' if session.settled else 'unpaid'
        )

    def settle(self, session_id: str) -> None:
        """Simulate the user completing the hosted checkout"""
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        session.settled = True
