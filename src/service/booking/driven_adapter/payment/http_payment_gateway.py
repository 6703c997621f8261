"""
HTTP Payment Gateway

Talks to a hosted-checkout provider over JSON/HTTP:

    POST /v1/checkout/sessions           -> {"id": ..., "url": ...}
    GET  /v1/checkout/sessions/{id}      -> {"id": ..., "payment_status": ..., "metadata": {...}}

The caller's bearer credential is forwarded as-is. Transport failures, error
statuses and malformed bodies all surface as ExternalServiceError; the raw
cause is logged, never returned to the user.
"""

from decimal import Decimal
from typing import Any

import httpx
import orjson
from uuid_utils import UUID

from src.platform.exception.exceptions import ExternalServiceError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics
from src.platform.observability.tracing import inject_trace_context
from src.service.booking.app.dto.payment_dto import PaymentSession, SessionVerification
from src.service.booking.app.interface.i_payment_gateway import IPaymentGateway


SESSIONS_PATH = '/v1/checkout/sessions'
SETTLED_STATUS = 'paid'
MINOR_UNITS_PER_MAJOR = 100  # rupees -> paise


class HttpPaymentGateway(IPaymentGateway):
    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        )

    @staticmethod
    def _headers(credential: str) -> dict[str, str]:
        return inject_trace_context(
            headers={
                'Authorization': f'Bearer {credential}',
                'Content-Type': 'application/json',
            }
        )

    async def _request(self, method: str, path: str, *, credential: str, body: Any = None) -> dict:
        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    path,
                    headers=self._headers(credential),
                    content=orjson.dumps(body) if body is not None else None,
                )
        except httpx.HTTPError as e:
            Logger.base.error(f'❌ [PAYMENT] {method} {path} failed: {e!r}')
            raise ExternalServiceError('Payment provider unreachable') from e

        if response.status_code >= 400:
            Logger.base.error(
                f'❌ [PAYMENT] {method} {path} -> {response.status_code}: {response.text[:200]}'
            )
            raise ExternalServiceError(f'Payment provider returned {response.status_code}')

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise ExternalServiceError('Payment provider returned malformed JSON') from e
        if not isinstance(payload, dict):
            raise ExternalServiceError('Payment provider returned an unexpected body')
        return payload

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
        body = {
            'amount': int(Decimal(amount) * MINOR_UNITS_PER_MAJOR),
            'currency': currency,
            'description': description,
            'metadata': {'booking_id': str(booking_id)},
        }
        with metrics.payment_gateway_duration.labels(operation='create_session').time():
            payload = await self._request('POST', SESSIONS_PATH, credential=credential, body=body)

        session_id, session_url = payload.get('id'), payload.get('url')
        if not session_id or not session_url:
            raise ExternalServiceError('Payment provider response is missing the session')
        return PaymentSession(session_id=str(session_id), session_url=str(session_url))

    @Logger.io
    async def verify_session(
        self, *, session_id: str, booking_id: UUID, credential: str
    ) -> SessionVerification:
        with metrics.payment_gateway_duration.labels(operation='verify_session').time():
            payload = await self._request(
                'GET', f'{SESSIONS_PATH}/{session_id}', credential=credential
            )

        status = str(payload.get('payment_status') or 'unknown')
        metadata = payload.get('metadata')
        if not isinstance(metadata, dict):
            metadata = {}
        if metadata.get('booking_id') != str(booking_id):
            Logger.base.warning(
                f'⚠️ [PAYMENT] Session {session_id} belongs to booking {metadata.get("booking_id")}'
            )
            return SessionVerification(settled=False, status='booking_mismatch')
        return SessionVerification(settled=status == SETTLED_STATUS, status=status)
