from collections.abc import AsyncIterator

import anyio
from fastapi import APIRouter, Depends, Query, status
import orjson
from sse_starlette.sse import EventSourceResponse

from tourbus.platform.config.di import container
from tourbus.platform.event.i_in_memory_broadcaster import seat_map_channel
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.command.replace_seat_selection_use_case import (
    ReplaceSeatSelectionUseCase,
)
from tourbus.service.seating.app.query.get_seat_map_use_case import GetSeatMapUseCase
from tourbus.service.seating.app.query.list_bus_status_use_case import ListBusStatusUseCase
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID
from tourbus.service.seating.driven_adapter.broadcaster.seat_map_broadcaster_impl import (
    seat_to_dict,
)
from tourbus.service.seating.driving_adapter.http_controller.schema.seat_schema import (
    BusListResponse,
    BusStatusResponse,
    SeatMapResponse,
    SeatSelectionRequest,
)


router = APIRouter()


@router.get('/{tour_id}/seats')
@Logger.io
async def get_seats(
    tour_id: str,
    bus_id: str = Query(default=PRIMARY_BUS_ID, alias='busId'),
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> SeatMapResponse:
    seats = await use_case.get_seats(tour_id=tour_id, bus_id=bus_id)
    return SeatMapResponse.from_seats(seats)


@router.post('/{tour_id}/seats', status_code=status.HTTP_200_OK)
@Logger.io
async def replace_seat_selection(
    tour_id: str,
    request: SeatSelectionRequest,
    use_case: ReplaceSeatSelectionUseCase = Depends(ReplaceSeatSelectionUseCase.depends),
) -> SeatMapResponse:
    # Conflicts surface as 409 {detail, conflicts} via SeatConflictError
    seats = await use_case.execute(
        tour_id=tour_id,
        bus_id=request.bus_id,
        user_id=request.user_id,
        selected_seats=request.selected_seats,
    )
    return SeatMapResponse.from_seats(seats)


@router.get('/{tour_id}/buses')
@Logger.io
async def list_buses(
    tour_id: str,
    use_case: ListBusStatusUseCase = Depends(ListBusStatusUseCase.depends),
) -> BusListResponse:
    statuses = await use_case.list_buses(tour_id=tour_id)
    return BusListResponse(buses=[BusStatusResponse.from_status(s) for s in statuses])


# ============================ SSE Endpoint ============================


@router.get('/{tour_id}/seats/stream', status_code=status.HTTP_200_OK)
@Logger.io
async def stream_seat_map(
    tour_id: str,
    bus_id: str = Query(default=PRIMARY_BUS_ID, alias='busId'),
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> EventSourceResponse:
    """
    SSE seat map updates for one bus

    Flow:
    1. Subscribe to the in-process channel before reading, so no commit is missed
    2. Send the current snapshot as the first `seat_map` event
    3. Send a `seat_map` event after every committed change
    """
    broadcaster = container.event_broadcaster()
    channel = seat_map_channel(tour_id=tour_id, bus_id=bus_id)
    stream = await broadcaster.subscribe(channel=channel)
    try:
        seats = await use_case.get_seats(tour_id=tour_id, bus_id=bus_id)
    except Exception:
        await broadcaster.unsubscribe(channel=channel, stream=stream)
        raise
    Logger.base.info(f'📡 [SSE] Client subscribed to {channel}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        initial = {'tourId': tour_id, 'busId': bus_id, 'seats': [seat_to_dict(s) for s in seats]}
        try:
            yield {'event': 'seat_map', 'data': orjson.dumps(initial).decode()}
            async for event_data in stream:
                yield {'event': 'seat_map', 'data': orjson.dumps(event_data).decode()}
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Client disconnected from {channel}')
            raise
        finally:
            await broadcaster.unsubscribe(channel=channel, stream=stream)

    return EventSourceResponse(event_generator())
