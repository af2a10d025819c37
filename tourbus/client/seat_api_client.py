"""
Seat API Client

Thin async HTTP client over the tour bus service. Transport failures and 5xx
answers are retried with exponential backoff; anything else is raised at once.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional

import anyio
import httpx
import orjson

from tourbus.client.errors import ApiError, SeatConflictError, TransientApiError
from tourbus.client.models import (
    BookingDraft,
    BookingStatusInfo,
    BusInfo,
    CreatedBooking,
    SeatInfo,
)
from tourbus.platform.logging.loguru_io import Logger


Sleep = Callable[[float], Awaitable[None]]


def _detail(response: httpx.Response) -> Any:
    try:
        return orjson.loads(response.content)
    except orjson.JSONDecodeError:
        return {'detail': response.text}


class SeatApiClient:
    def __init__(
        self,
        *,
        http_client: httpx.AsyncClient,
        max_attempts: int = 3,
        backoff_base_seconds: float = 0.5,
        sleep: Sleep = anyio.sleep,
    ) -> None:
        self.http_client = http_client
        self.max_attempts = max_attempts
        self.backoff_base_seconds = backoff_base_seconds
        self.sleep = sleep

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        last_error = ''
        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.http_client.request(method, url, **kwargs)
            except httpx.TransportError as e:
                last_error = f'{type(e).__name__}: {e}'
            else:
                if response.status_code < 500:
                    return self._handle(response)
                last_error = f'{response.status_code}: {response.text}'

            if attempt < self.max_attempts:
                delay = self.backoff_base_seconds * 2 ** (attempt - 1)
                Logger.base.warning(
                    f'⚠️ [CLIENT] {method} {url} failed ({last_error}), retry in {delay}s'
                )
                await self.sleep(delay)

        raise TransientApiError(
            f'{method} {url} failed after {self.max_attempts} attempts: {last_error}',
            attempts=self.max_attempts,
        )

    @staticmethod
    def _handle(response: httpx.Response) -> Any:
        if response.is_success:
            return orjson.loads(response.content) if response.content else None

        body = _detail(response)
        detail = str(body.get('detail', '')) if isinstance(body, dict) else str(body)
        if response.status_code == 409 and isinstance(body, dict) and 'conflicts' in body:
            raise SeatConflictError(conflicts=body['conflicts'], detail=detail)
        raise ApiError(response.status_code, detail)

    async def get_seats(self, *, tour_id: str, bus_id: str = '1') -> List[SeatInfo]:
        data = await self._request('GET', f'/api/tours/{tour_id}/seats', params={'busId': bus_id})
        return [SeatInfo.from_json(s) for s in data['seats']]

    async def replace_selection(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        selected_seats: List[str],
    ) -> List[SeatInfo]:
        data = await self._request(
            'POST',
            f'/api/tours/{tour_id}/seats',
            json={'busId': bus_id, 'selectedSeats': selected_seats, 'userId': user_id},
        )
        return [SeatInfo.from_json(s) for s in data['seats']]

    async def list_buses(self, *, tour_id: str) -> List[BusInfo]:
        data = await self._request('GET', f'/api/tours/{tour_id}/buses')
        return [
            BusInfo(bus_id=b['busId'], unlocked=b['unlocked'], available_count=b['availableCount'])
            for b in data['buses']
        ]

    async def create_booking(self, *, draft: BookingDraft, user_id: str) -> CreatedBooking:
        data = await self._request('POST', '/api/bookings', json=draft.to_json(user_id=user_id))
        return CreatedBooking(
            id=data['id'],
            status=data['status'],
            expires_at=datetime.fromisoformat(data['expiresAt']),
        )

    async def get_booking_status(self, *, booking_id: str) -> BookingStatusInfo:
        data = await self._request('GET', f'/api/bookings/{booking_id}/status')
        return BookingStatusInfo(
            status=data['status'], expires_at=datetime.fromisoformat(data['expiresAt'])
        )

    async def get_payment_settings(self) -> dict:
        return await self._request('GET', '/api/payment-settings')


def create_seat_api_client(
    base_url: str, *, timeout: Optional[float] = 10.0, **kwargs: Any
) -> SeatApiClient:
    return SeatApiClient(http_client=httpx.AsyncClient(base_url=base_url, timeout=timeout), **kwargs)
