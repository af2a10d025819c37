"""
Integration tests for the seat map HTTP API

Runs the FastAPI app with in-memory backends and a fake clock.
"""

from fastapi.testclient import TestClient
import pytest

from tourbus.service.seating.domain.value_object.bus_layout import LAST_8_SEATS, SEAT_IDS


TOUR = 'sundarbans-3d'


def _select(client: TestClient, user_id: str, seats: list[str], bus_id: str = '1'):
    return client.post(
        f'/api/tours/{TOUR}/seats',
        json={'busId': bus_id, 'selectedSeats': seats, 'userId': user_id},
    )


class TestGetSeats:
    def test_new_tour_has_forty_available_seats(self, client: TestClient):
        response = client.get(f'/api/tours/{TOUR}/seats')

        assert response.status_code == 200
        seats = response.json()['seats']
        assert [s['id'] for s in seats] == list(SEAT_IDS)
        assert all(s['isAvailable'] for s in seats)
        assert seats[0] == {'id': 'A1', 'isAvailable': True, 'reservedBy': None, 'bookedBy': None}

    def test_unknown_bus_is_rejected(self, client: TestClient):
        response = client.get(f'/api/tours/{TOUR}/seats', params={'busId': '9'})
        assert response.status_code == 400


class TestReplaceSelection:
    def test_selection_shows_up_in_seat_map(self, client: TestClient):
        response = _select(client, 'alice', ['A1', 'A2'])

        assert response.status_code == 200
        seats = {s['id']: s for s in response.json()['seats']}
        assert seats['A1']['reservedBy'] == 'alice'
        assert seats['A1']['isAvailable'] is False

        seats = {s['id']: s for s in client.get(f'/api/tours/{TOUR}/seats').json()['seats']}
        assert seats['A2']['reservedBy'] == 'alice'

    def test_conflict_returns_409_with_conflicting_seats(self, client: TestClient):
        _select(client, 'alice', ['A1'])

        response = _select(client, 'bob', ['A1', 'B1'])

        assert response.status_code == 409
        body = response.json()
        assert body['conflicts'] == ['A1']
        assert 'A1' in body['detail']
        seats = {s['id']: s for s in client.get(f'/api/tours/{TOUR}/seats').json()['seats']}
        assert seats['B1']['isAvailable'] is True

    def test_unknown_seat_returns_400(self, client: TestClient):
        assert _select(client, 'alice', ['Q7']).status_code == 400

    def test_missing_user_returns_400(self, client: TestClient):
        response = client.post(f'/api/tours/{TOUR}/seats', json={'selectedSeats': ['A1']})
        assert response.status_code == 400

    def test_reservation_lapses_after_ttl(self, client: TestClient, clock):
        _select(client, 'alice', ['A1'])
        clock.advance(minutes=11)

        assert _select(client, 'bob', ['A1']).status_code == 200

    def test_locked_bus_returns_403(self, client: TestClient):
        response = _select(client, 'alice', ['A1'], bus_id='2')
        assert response.status_code == 403


class TestBusList:
    def test_secondary_buses_unlock_when_last_eight_remain(self, client: TestClient):
        buses = client.get(f'/api/tours/{TOUR}/buses').json()['buses']
        assert [b['busId'] for b in buses] == ['1', '2', '3', '4', '5']
        assert buses[0]['unlocked'] is True
        assert buses[1]['unlocked'] is False

        first_32 = [s for s in SEAT_IDS if s not in LAST_8_SEATS]
        assert _select(client, 'group', first_32).status_code == 200

        buses = client.get(f'/api/tours/{TOUR}/buses').json()['buses']
        assert buses[0]['availableCount'] == 8
        assert all(b['unlocked'] for b in buses)
        assert _select(client, 'alice', ['A1'], bus_id='2').status_code == 200


class TestTourSeatingAdmin:
    def test_requires_admin_token(self, client: TestClient):
        response = client.put(f'/api/admin/tours/{TOUR}/seating', json={'busCount': 2})
        assert response.status_code == 401

    def test_wrong_admin_token_is_rejected(self, client: TestClient):
        response = client.put(
            f'/api/admin/tours/{TOUR}/seating',
            json={'busCount': 2},
            headers={'X-Admin-Token': 'nope'},
        )
        assert response.status_code == 401

    def test_bus_count_limits_the_bus_list(self, client: TestClient, admin_headers):
        response = client.put(
            f'/api/admin/tours/{TOUR}/seating',
            json={'busCount': 2, 'pricePerPerson': 1500},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            'tourId': TOUR,
            'busCount': 2,
            'hasBusSeatSelection': True,
            'pricePerPerson': 1500,
        }
        buses = client.get(f'/api/tours/{TOUR}/buses').json()['buses']
        assert [b['busId'] for b in buses] == ['1', '2']
        assert client.get(f'/api/tours/{TOUR}/seats', params={'busId': '3'}).status_code == 400

    @pytest.mark.parametrize('bus_count', [0, 6])
    def test_bus_count_out_of_range(self, client: TestClient, admin_headers, bus_count):
        response = client.put(
            f'/api/admin/tours/{TOUR}/seating',
            json={'busCount': bus_count},
            headers=admin_headers,
        )
        assert response.status_code == 400


class TestPlatformEndpoints:
    def test_health(self, client: TestClient):
        response = client.get('/health')
        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_metrics_are_exposed(self, client: TestClient):
        _select(client, 'alice', ['A1'])
        response = client.get('/metrics')
        assert response.status_code == 200
        assert 'seat_reservation_requests_total' in response.text
