"""Payment DTOs exchanged between the coordinator and the payment gateway"""

from typing import Optional

import attrs
from uuid_utils import UUID


@attrs.define(frozen=True)
class PaymentSession:
    session_id: str
    session_url: str


@attrs.define(frozen=True)
class SessionVerification:
    settled: bool
    status: str = 'unknown'


@attrs.define(frozen=True)
class PaymentAcknowledgement:
    """
    Outcome of a confirmation attempt.

    ``success`` is False when the provider has not settled the session yet;
    the booking then stays pending and the confirmation may be retried.
    """

    booking_id: UUID
    success: bool
    payment_status: str
    message: Optional[str] = None
