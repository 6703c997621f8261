import httpx
import orjson
import pytest
import uuid_utils

from src.platform.exception.exceptions import ExternalServiceError
from src.service.booking.driven_adapter.payment.http_payment_gateway import HttpPaymentGateway
from src.service.booking.driven_adapter.payment.mock_payment_gateway import (
    SESSION_PREFIX,
    MockPaymentGateway,
)


BASE_URL = 'https://pay.test'


def _gateway(handler) -> HttpPaymentGateway:  # type: ignore[no-untyped-def]
    return HttpPaymentGateway(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestHttpPaymentGateway:
    @pytest.mark.unit
    async def test_create_session_sends_minor_units_and_bearer(self) -> None:
        booking_id = uuid_utils.uuid7()
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen['method'] = request.method
            seen['path'] = request.url.path
            seen['auth'] = request.headers['Authorization']
            seen['body'] = orjson.loads(request.content)
            return httpx.Response(200, json={'id': 'cs_1', 'url': 'https://pay.test/c/cs_1'})

        session = await _gateway(handler).create_payment_session(
            booking_id=booking_id,
            amount=300,
            currency='inr',
            description='Singham Again - Movie Ticket',
            credential='token-abc',
        )

        assert session.session_id == 'cs_1'
        assert session.session_url == 'https://pay.test/c/cs_1'
        assert seen['method'] == 'POST'
        assert seen['path'] == '/v1/checkout/sessions'
        assert seen['auth'] == 'Bearer token-abc'
        assert seen['body']['amount'] == 30000
        assert seen['body']['metadata'] == {'booking_id': str(booking_id)}

    @pytest.mark.unit
    async def test_verify_paid_session(self) -> None:
        booking_id = uuid_utils.uuid7()

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == '/v1/checkout/sessions/cs_1'
            return httpx.Response(
                200,
                json={
                    'id': 'cs_1',
                    'payment_status': 'paid',
                    'metadata': {'booking_id': str(booking_id)},
                },
            )

        verification = await _gateway(handler).verify_session(
            session_id='cs_1', booking_id=booking_id, credential='t'
        )

        assert verification.settled
        assert verification.status == 'paid'

    @pytest.mark.unit
    async def test_verify_unpaid_session(self) -> None:
        booking_id = uuid_utils.uuid7()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    'id': 'cs_1',
                    'payment_status': 'unpaid',
                    'metadata': {'booking_id': str(booking_id)},
                },
            )

        verification = await _gateway(handler).verify_session(
            session_id='cs_1', booking_id=booking_id, credential='t'
        )

        assert not verification.settled
        assert verification.status == 'unpaid'

    @pytest.mark.unit
    async def test_session_of_other_booking_is_not_settled(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                json={
                    'id': 'cs_1',
                    'payment_status': 'paid',
                    'metadata': {'booking_id': str(uuid_utils.uuid7())},
                },
            )

        verification = await _gateway(handler).verify_session(
            session_id='cs_1', booking_id=uuid_utils.uuid7(), credential='t'
        )

        assert not verification.settled
        assert verification.status == 'booking_mismatch'

    @pytest.mark.unit
    async def test_session_without_booking_metadata_is_not_settled(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={'id': 'cs_1', 'payment_status': 'paid'})

        verification = await _gateway(handler).verify_session(
            session_id='cs_1', booking_id=uuid_utils.uuid7(), credential='t'
        )

        assert not verification.settled
        assert verification.status == 'booking_mismatch'

    @pytest.mark.unit
    @pytest.mark.parametrize(
        'response',
        [
            httpx.Response(500, text='boom'),
            httpx.Response(401, json={'error': 'unauthorized'}),
            httpx.Response(200, content=b'not json'),
            httpx.Response(200, json=['unexpected']),
            httpx.Response(200, json={'id': 'cs_1'}),  # no url
        ],
    )
    async def test_bad_responses_become_external_service_errors(
        self, response: httpx.Response
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return response

        with pytest.raises(ExternalServiceError):
            await _gateway(handler).create_payment_session(
                booking_id=uuid_utils.uuid7(),
                amount=100,
                currency='inr',
                description='x',
                credential='t',
            )

    @pytest.mark.unit
    async def test_transport_error_becomes_external_service_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        with pytest.raises(ExternalServiceError):
            await _gateway(handler).verify_session(
                session_id='cs_1', booking_id=uuid_utils.uuid7(), credential='t'
            )


class TestMockPaymentGateway:
    @pytest.mark.unit
    async def test_auto_settled_session_verifies_as_paid(self) -> None:
        gateway = MockPaymentGateway(auto_settle=True)
        booking_id = uuid_utils.uuid7()

        session = await gateway.create_payment_session(
            booking_id=booking_id, amount=300, currency='inr', description='x', credential='t'
        )
        verification = await gateway.verify_session(
            session_id=session.session_id, booking_id=booking_id, credential='t'
        )

        assert session.session_id.startswith(SESSION_PREFIX)
        assert verification.settled

    @pytest.mark.unit
    async def test_manual_settlement(self) -> None:
        gateway = MockPaymentGateway(auto_settle=False)
        booking_id = uuid_utils.uuid7()
        session = await gateway.create_payment_session(
            booking_id=booking_id, amount=300, currency='inr', description='x', credential='t'
        )

        before = await gateway.verify_session(
            session_id=session.session_id, booking_id=booking_id, credential='t'
        )
        gateway.settle(session.session_id)
        after = await gateway.verify_session(
            session_id=session.session_id, booking_id=booking_id, credential='t'
        )

        assert not before.settled
        assert after.settled

    @pytest.mark.unit
    async def test_unknown_and_mismatched_sessions(self) -> None:
        gateway = MockPaymentGateway()
        booking_id = uuid_utils.uuid7()
        session = await gateway.create_payment_session(
            booking_id=booking_id, amount=300, currency='inr', description='x', credential='t'
        )

        unknown = await gateway.verify_session(
            session_id='PAY_MOCK_nope', booking_id=booking_id, credential='t'
        )
        mismatch = await gateway.verify_session(
            session_id=session.session_id, booking_id=uuid_utils.uuid7(), credential='t'
        )

        assert unknown.status == 'unknown_session'
        assert mismatch.status == 'booking_mismatch'
        assert not mismatch.settled

    @pytest.mark.unit
    async def test_missing_credential_is_rejected(self) -> None:
        with pytest.raises(ExternalServiceError):
            await MockPaymentGateway().create_payment_session(
                booking_id=uuid_utils.uuid7(),
                amount=300,
                currency='inr',
                description='x',
                credential='',
            )
