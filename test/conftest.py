"""
Test Configuration and Fixtures

This module provides:
- In-process backends (memory seat map store, memory booking repo) for every test
- A controllable clock injected through the DI container
- FastAPI TestClient and admin header fixtures

Architecture:
- Unit tests (test/**/unit/): build use cases directly with real in-memory adapters or mocks
- Integration tests: go through the HTTP app; Redis tests skip when no server is reachable
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once at import time
# =============================================================================
import os


def _early_setup_test_environment() -> None:
    os.environ['SEAT_STORE_BACKEND'] = 'memory'
    os.environ['BOOKING_STORE_BACKEND'] = 'memory'
    os.environ['ADMIN_TOKEN'] = 'test-admin-token'
    os.environ['DEBUG'] = 'false'
    os.environ.setdefault('REDIS_KEY_PREFIX', 'test_')


_early_setup_test_environment()

from collections.abc import Callable, Generator, Iterator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from tourbus.platform.app_factory import create_app  # noqa: E402
from tourbus.platform.config.di import Container, container  # noqa: E402


ADMIN_TOKEN = 'test-admin-token'
START_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, now: datetime = START_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@asynccontextmanager
async def _test_lifespan(_app: FastAPI):
    # no sweeper; tests drive expiry through the clock
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def app_container(clock: FakeClock) -> Iterator[Container]:
    """Fresh singletons per test, wired to the fake clock"""
    container.reset_singletons()
    container.clock.override(providers.Object(clock))
    yield container
    container.clock.reset_override()
    container.reset_singletons()


@pytest.fixture
def app(app_container: Container) -> FastAPI:
    return create_app(lifespan=_test_lifespan, title_suffix=' (test)')


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {'X-Admin-Token': ADMIN_TOKEN}


@pytest.fixture
def booking_payload() -> Callable[..., dict]:
    """Builds a valid booking request body; keyword overrides replace top-level fields"""

    def build(**overrides: object) -> dict:
        payload: dict = {
            'tourId': 'sundarbans-3d',
            'busId': '1',
            'userId': 'visitor-a',
            'selectedSeats': ['A1', 'A2'],
            'persons': 2,
            'customerInfo': {
                'name': 'Rahim',
                'email': 'rahim@example.com',
                'phone': '01700000000',
            },
            'paymentReference': {'transactionId': 'TX-1001'},
            'paymentMethod': 'manual',
            'fromLocation': 'Dhaka',
            'travelDate': '2026-04-01',
        }
        payload.update(overrides)
        return payload

    return build
