from collections.abc import AsyncIterator

import anyio
from fastapi import APIRouter, Depends, status
import orjson
from sse_starlette.sse import EventSourceResponse

from tourbus.platform.config.di import container
from tourbus.platform.event.i_in_memory_broadcaster import booking_status_channel
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from tourbus.service.booking.app.query.get_booking_status_use_case import (
    GetBookingStatusUseCase,
)
from tourbus.service.booking.driven_adapter.broadcaster.booking_status_broadcaster_impl import (
    booking_status_event,
)
from tourbus.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingCreatedResponse,
    BookingStatusResponse,
)


router = APIRouter()


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingCreatedResponse:
    booking = await use_case.create_booking(
        tour_id=request.tour_id,
        bus_id=request.bus_id,
        user_id=request.user_id,
        selected_seats=request.selected_seats,
        persons=request.persons,
        customer_info=request.customer_info.to_value_object(),
        payment_reference=request.payment_reference.to_value_object(),
        payment_method=request.payment_method,
        from_location=request.from_location,
        to_location=request.to_location,
        travel_date=request.travel_date,
        notes=request.notes,
    )
    return BookingCreatedResponse(id=booking.id, status=booking.status, expires_at=booking.expires_at)


@router.get('/{booking_id}/status')
@Logger.io
async def get_booking_status(
    booking_id: str,
    use_case: GetBookingStatusUseCase = Depends(GetBookingStatusUseCase.depends),
) -> BookingStatusResponse:
    booking = await use_case.get_status(booking_id=booking_id)
    return BookingStatusResponse(status=booking.status, expires_at=booking.expires_at)


# ============================ SSE Endpoint ============================


@router.get('/{booking_id}/stream', status_code=status.HTTP_200_OK)
@Logger.io
async def stream_booking_status(
    booking_id: str,
    use_case: GetBookingStatusUseCase = Depends(GetBookingStatusUseCase.depends),
) -> EventSourceResponse:
    """
    SSE booking status updates

    Sends the current status first, then every change; closes once the
    booking reaches approved, rejected or expired.
    """
    broadcaster = container.event_broadcaster()
    channel = booking_status_channel(booking_id=booking_id)
    stream = await broadcaster.subscribe(channel=channel)
    try:
        booking = await use_case.get_status(booking_id=booking_id)
    except Exception:
        await broadcaster.unsubscribe(channel=channel, stream=stream)
        raise
    Logger.base.info(f'📡 [SSE] Client subscribed to {channel}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        try:
            event_data = booking_status_event(booking)
            yield {'event': 'status_update', 'data': orjson.dumps(event_data).decode()}
            if booking.status.is_terminal:
                return

            async for event_data in stream:
                yield {'event': 'status_update', 'data': orjson.dumps(event_data).decode()}
                if event_data.get('status') != 'pending':
                    Logger.base.info(
                        f'✅ [SSE] Booking {booking_id} reached final state: {event_data["status"]}'
                    )
                    break
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Client disconnected from {channel}')
            raise
        finally:
            await broadcaster.unsubscribe(channel=channel, stream=stream)

    return EventSourceResponse(event_generator())
