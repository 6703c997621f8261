"""
HTTP API tests through the ASGI app (mock payment gateway, in-memory SQLite).
"""

from datetime import timedelta

from fastapi.testclient import TestClient
import pytest

from src.service.booking.domain.booking_flow import utc_today
from src.service.booking.driven_adapter.showtime.seeded_showtime_provider import make_showtime_id
from test.http_util import auth_headers
from test.util_constant import SINGHAM_MOVIE_ID, STANDARD_THEATER_ID, UNKNOWN_MOVIE_ID


def _book_two_seats(client: TestClient, token: str) -> dict:
    theaters = client.get('/api/showtime', params={'movie_id': SINGHAM_MOVIE_ID}).json()
    entry = next(t for t in theaters if t['theater']['id'] == STANDARD_THEATER_ID)
    showtime_id = entry['showtimes'][0]['id']

    seat_map = client.get(f'/api/showtime/{showtime_id}/seat_map').json()
    taken = set(seat_map['filled']) | set(seat_map['held'])
    seats = [n for n in range(1, seat_map['total_seats'] + 1) if n not in taken][:2]

    response = client.post(
        '/api/booking',
        json={'movie_id': SINGHAM_MOVIE_ID, 'showtime_id': showtime_id, 'seat_numbers': seats},
        headers=auth_headers(token),
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestCatalogApi:
    def test_health(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_list_movies(self, client: TestClient) -> None:
        movies = client.get('/api/movie').json()
        featured = client.get('/api/movie/featured').json()

        assert len(movies) == 6
        assert {m['id'] for m in featured} == {'1', '2'}

    def test_unknown_movie_is_404_with_safe_message(self, client: TestClient) -> None:
        response = client.get(f'/api/movie/{UNKNOWN_MOVIE_ID}')

        assert response.status_code == 404
        assert response.json() == {'detail': 'The requested resource was not found.'}

    def test_available_dates(self, client: TestClient) -> None:
        dates = client.get('/api/showtime/dates').json()

        assert len(dates) == 7
        assert dates[0] == utc_today().isoformat()

    def test_showtimes_outside_window_are_rejected(self, client: TestClient) -> None:
        response = client.get(
            '/api/showtime',
            params={
                'movie_id': SINGHAM_MOVIE_ID,
                'show_date': (utc_today() + timedelta(days=10)).isoformat(),
            },
        )

        assert response.status_code == 400

    def test_showtime_labels(self, client: TestClient) -> None:
        theaters = client.get('/api/showtime', params={'movie_id': SINGHAM_MOVIE_ID}).json()

        showtime = theaters[0]['showtimes'][0]
        assert showtime['show_time_label'].endswith(('AM', 'PM'))


@pytest.mark.integration
class TestBookingApi:
    def test_create_booking_prices_server_side(self, client: TestClient, user_token: str) -> None:
        booking = _book_two_seats(client, user_token)

        assert booking['total_price'] == 300
        assert booking['seats'] == 2
        assert booking['payment_status'] == 'pending'
        assert len(booking['seat_labels']) == 2

    def test_booked_seats_show_as_held(self, client: TestClient, user_token: str) -> None:
        booking = _book_two_seats(client, user_token)

        seat_map = client.get(f'/api/showtime/{booking["showtime_id"]}/seat_map').json()

        assert set(booking['seat_numbers']) <= set(seat_map['held'])

    def test_double_booking_same_seats_conflicts(
        self, client: TestClient, user_token: str, another_user_token: str
    ) -> None:
        booking = _book_two_seats(client, user_token)

        response = client.post(
            '/api/booking',
            json={
                'movie_id': SINGHAM_MOVIE_ID,
                'showtime_id': booking['showtime_id'],
                'seat_numbers': booking['seat_numbers'],
            },
            headers=auth_headers(another_user_token),
        )

        assert response.status_code == 409
        assert response.json() == {
            'detail': 'Some of the selected seats are no longer available. Please choose other seats.'
        }

    def test_booking_requires_sign_in(self, client: TestClient) -> None:
        response = client.post(
            '/api/booking',
            json={'movie_id': SINGHAM_MOVIE_ID, 'showtime_id': '3:5:20250110:0', 'seat_numbers': [1]},
        )

        assert response.status_code == 401
        assert response.json() == {'detail': 'Sign in required. Please sign in to continue.'}

    def test_invalid_token_is_rejected(self, client: TestClient) -> None:
        response = client.get('/api/booking/my_booking', headers=auth_headers('not-a-jwt'))

        assert response.status_code == 401

    def test_invalid_body_is_400(self, client: TestClient, user_token: str) -> None:
        response = client.post(
            '/api/booking',
            json={'movie_id': SINGHAM_MOVIE_ID, 'showtime_id': 'x', 'seat_numbers': []},
            headers=auth_headers(user_token),
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'Please check your booking details and try again.'}

    @pytest.mark.parametrize('days_from_today', [-1, 8])
    def test_booking_outside_date_window_is_400(
        self, client: TestClient, user_token: str, days_from_today: int
    ) -> None:
        show_date = utc_today() + timedelta(days=days_from_today)
        showtime_id = make_showtime_id(SINGHAM_MOVIE_ID, STANDARD_THEATER_ID, show_date, 0)

        response = client.post(
            '/api/booking',
            json={'movie_id': SINGHAM_MOVIE_ID, 'showtime_id': showtime_id, 'seat_numbers': [1]},
            headers=auth_headers(user_token),
        )

        assert response.status_code == 400
        history = client.get('/api/booking/my_booking', headers=auth_headers(user_token))
        assert history.json() == []

    def test_checkout_verify_is_idempotent(self, client: TestClient, user_token: str) -> None:
        booking = _book_two_seats(client, user_token)
        headers = auth_headers(user_token)

        checkout = client.post(f'/api/booking/{booking["id"]}/checkout', headers=headers)
        assert checkout.status_code == 200, checkout.text
        session_id = checkout.json()['session_id']

        first = client.post(
            f'/api/booking/{booking["id"]}/verify', json={'session_id': session_id}, headers=headers
        )
        second = client.post(
            f'/api/booking/{booking["id"]}/verify', json={'session_id': session_id}, headers=headers
        )

        assert first.status_code == 200
        assert first.json() == second.json()
        assert first.json()['success'] is True
        assert first.json()['payment_status'] == 'paid'
        assert first.json()['booking_id'] == booking['id']

        fetched = client.get(f'/api/booking/{booking["id"]}', headers=headers).json()
        assert fetched['payment_status'] == 'paid'

        cancel = client.patch(f'/api/booking/{booking["id"]}', headers=headers)
        assert cancel.status_code == 409
        assert cancel.json() == {'detail': 'This booking can no longer be changed.'}

    def test_other_user_cannot_see_or_pay_booking(
        self, client: TestClient, user_token: str, another_user_token: str
    ) -> None:
        booking = _book_two_seats(client, user_token)
        headers = auth_headers(another_user_token)

        get_response = client.get(f'/api/booking/{booking["id"]}', headers=headers)
        verify_response = client.post(
            f'/api/booking/{booking["id"]}/verify', json={'session_id': 'PAY_MOCK_x'}, headers=headers
        )

        assert get_response.status_code == 403
        assert verify_response.status_code == 403

    def test_cancel_releases_seats(self, client: TestClient, user_token: str) -> None:
        booking = _book_two_seats(client, user_token)

        response = client.patch(f'/api/booking/{booking["id"]}', headers=auth_headers(user_token))

        assert response.status_code == 200
        assert response.json()['payment_status'] == 'cancelled'
        seat_map = client.get(f'/api/showtime/{booking["showtime_id"]}/seat_map').json()
        assert not set(booking['seat_numbers']) & set(seat_map['held'])

    def test_my_bookings_lists_only_own(
        self, client: TestClient, user_token: str, another_user_token: str
    ) -> None:
        _book_two_seats(client, user_token)

        mine = client.get('/api/booking/my_booking', headers=auth_headers(user_token)).json()
        theirs = client.get(
            '/api/booking/my_booking', headers=auth_headers(another_user_token)
        ).json()

        assert len(mine) == 1
        assert theirs == []

    def test_unknown_booking_is_404(self, client: TestClient, user_token: str) -> None:
        response = client.get(
            '/api/booking/01936d8f-5e73-7c4e-a9c5-123456789abc', headers=auth_headers(user_token)
        )

        assert response.status_code == 404
