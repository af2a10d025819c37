"""
The production lifespan with in-process backends: the sweeper task starts with
the app and is cancelled on shutdown without leaving anything behind.
"""

from fastapi.testclient import TestClient

from tourbus.main import lifespan
from tourbus.platform.app_factory import create_app


class TestServiceLifespan:
    def test_starts_serves_and_shuts_down(self, app_container, booking_payload):
        app = create_app(lifespan=lifespan)

        with TestClient(app) as client:
            assert client.get('/health').status_code == 200
            response = client.post('/api/bookings', json=booking_payload())
            assert response.status_code == 201

        with TestClient(app) as client:
            # singletons survive a restart of the lifespan
            booking_id = response.json()['id']
            status = client.get(f'/api/bookings/{booking_id}/status')
            assert status.json()['status'] == 'pending'
