"""
Integration tests for the booking HTTP API

Visitor endpoints (create, status, stream) and admin endpoints (list, get,
approve, reject) against the in-memory backends.
"""

from fastapi.testclient import TestClient
import orjson
import pytest
from sse_starlette.sse import AppStatus


TOUR = 'sundarbans-3d'


@pytest.fixture(autouse=True)
def reset_sse_app_status():
    # sse-starlette keeps a module-level exit event bound to the first event loop
    AppStatus.should_exit_event = None
    yield
    AppStatus.should_exit_event = None


def _seats(client: TestClient, bus_id: str = '1') -> dict:
    response = client.get(f'/api/tours/{TOUR}/seats', params={'busId': bus_id})
    return {s['id']: s for s in response.json()['seats']}


class TestCreateBooking:
    def test_creates_pending_booking(self, client: TestClient, booking_payload, clock):
        response = client.post('/api/bookings', json=booking_payload())

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'pending'
        assert body['id']
        assert body['expiresAt'].startswith('2026-03-01T09:30:00')

        seats = _seats(client)
        assert seats['A1']['reservedBy'] == 'visitor-a'
        assert seats['A2']['isAvailable'] is False

    def test_booking_after_selecting_the_same_seats(self, client: TestClient, booking_payload):
        client.post(
            f'/api/tours/{TOUR}/seats',
            json={'selectedSeats': ['A1', 'A2'], 'userId': 'visitor-a'},
        )

        response = client.post('/api/bookings', json=booking_payload())

        assert response.status_code == 201

    def test_seats_taken_by_someone_else(self, client: TestClient, booking_payload):
        client.post(
            f'/api/tours/{TOUR}/seats', json={'selectedSeats': ['A2'], 'userId': 'visitor-b'}
        )

        response = client.post('/api/bookings', json=booking_payload())

        assert response.status_code == 409
        assert response.json()['conflicts'] == ['A2']

    @pytest.mark.parametrize(
        'overrides',
        [
            {'selectedSeats': ['A1']},
            {'selectedSeats': ['A1', 'A1']},
            {'paymentReference': {}},
            {'paymentMethod': 'bkash'},
            {'fromLocation': ''},
            {'travelDate': None},
            {'customerInfo': {'name': 'R', 'email': 'nope', 'phone': '017'}},
            {'persons': 0, 'selectedSeats': []},
        ],
    )
    def test_invalid_requests_are_rejected(self, client: TestClient, booking_payload, overrides):
        response = client.post('/api/bookings', json=booking_payload(**overrides))

        assert response.status_code == 400
        assert _seats(client)['A1']['isAvailable'] is True

    def test_malformed_body_is_rejected(self, client: TestClient):
        response = client.post('/api/bookings', json={'tourId': TOUR})
        assert response.status_code == 400

    def test_payment_settings(self, client: TestClient):
        response = client.get('/api/payment-settings')

        assert response.status_code == 200
        assert response.json() == {'manualPayment': True, 'bkashPayment': False}


class TestBookingStatus:
    def test_status_is_pending_until_deadline(self, client: TestClient, booking_payload, clock):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']

        clock.advance(minutes=29)
        assert client.get(f'/api/bookings/{booking_id}/status').json()['status'] == 'pending'

        clock.advance(minutes=2)
        body = client.get(f'/api/bookings/{booking_id}/status').json()

        assert body['status'] == 'expired'
        assert _seats(client)['A1']['isAvailable'] is True

    def test_unknown_booking(self, client: TestClient):
        assert client.get('/api/bookings/nope/status').status_code == 404

    def test_stream_of_decided_booking_sends_final_status_and_closes(
        self, client: TestClient, booking_payload, admin_headers
    ):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']
        client.post(f'/api/admin/bookings/{booking_id}/reject', headers=admin_headers)

        response = client.get(f'/api/bookings/{booking_id}/stream')

        assert response.status_code == 200
        assert 'event: status_update' in response.text
        data_line = next(
            line for line in response.text.splitlines() if line.startswith('data:')
        )
        event = orjson.loads(data_line[len('data:') :].strip())
        assert event['bookingId'] == booking_id
        assert event['status'] == 'rejected'


class TestAdminBookings:
    def test_admin_endpoints_require_token(self, client: TestClient):
        assert client.get('/api/admin/bookings').status_code == 401
        assert client.post('/api/admin/bookings/x/approve').status_code == 401

    def test_approve_books_the_seats(self, client: TestClient, booking_payload, admin_headers):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']

        response = client.post(f'/api/admin/bookings/{booking_id}/approve', headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body['status'] == 'approved'
        assert body['decidedAt'] is not None
        seats = _seats(client)
        assert seats['A1']['bookedBy'] == 'visitor-a'
        assert seats['A1']['reservedBy'] is None
        assert client.get(f'/api/bookings/{booking_id}/status').json()['status'] == 'approved'

    def test_reject_releases_the_seats(self, client: TestClient, booking_payload, admin_headers):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']

        response = client.post(f'/api/admin/bookings/{booking_id}/reject', headers=admin_headers)

        assert response.status_code == 200
        assert response.json()['status'] == 'rejected'
        assert _seats(client)['A1']['isAvailable'] is True

    def test_second_decision_conflicts(self, client: TestClient, booking_payload, admin_headers):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']
        client.post(f'/api/admin/bookings/{booking_id}/approve', headers=admin_headers)

        response = client.post(f'/api/admin/bookings/{booking_id}/reject', headers=admin_headers)

        assert response.status_code == 409
        assert _seats(client)['A1']['bookedBy'] == 'visitor-a'

    def test_approving_an_overdue_booking_conflicts(
        self, client: TestClient, booking_payload, admin_headers, clock
    ):
        booking_id = client.post('/api/bookings', json=booking_payload()).json()['id']
        clock.advance(minutes=31)

        response = client.post(f'/api/admin/bookings/{booking_id}/approve', headers=admin_headers)

        assert response.status_code == 409
        detail = client.get(f'/api/admin/bookings/{booking_id}', headers=admin_headers).json()
        assert detail['status'] == 'expired'

    def test_unknown_booking_is_not_found(self, client: TestClient, admin_headers):
        response = client.post('/api/admin/bookings/nope/approve', headers=admin_headers)
        assert response.status_code == 404

    def test_list_is_newest_first_and_filterable(
        self, client: TestClient, booking_payload, admin_headers, clock
    ):
        first = client.post('/api/bookings', json=booking_payload()).json()['id']
        clock.advance(minutes=1)
        second = client.post(
            '/api/bookings',
            json=booking_payload(userId='visitor-b', selectedSeats=['B1', 'B2']),
        ).json()['id']
        client.post(f'/api/admin/bookings/{first}/approve', headers=admin_headers)

        listed = client.get('/api/admin/bookings', headers=admin_headers).json()
        assert [b['id'] for b in listed] == [second, first]

        pending = client.get(
            '/api/admin/bookings', params={'status': 'pending'}, headers=admin_headers
        ).json()
        assert [b['id'] for b in pending] == [second]
        assert pending[0]['customerInfo']['email'] == 'rahim@example.com'
        assert pending[0]['paymentReference']['transactionId'] == 'TX-1001'
