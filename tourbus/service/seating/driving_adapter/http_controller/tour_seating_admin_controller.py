from fastapi import APIRouter, Depends

from tourbus.platform.auth.admin_auth import require_admin
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.seating.app.command.configure_tour_seating_use_case import (
    ConfigureTourSeatingUseCase,
)
from tourbus.service.seating.driving_adapter.http_controller.schema.seat_schema import (
    TourSeatingRequest,
    TourSeatingResponse,
)


router = APIRouter(dependencies=[Depends(require_admin)])


@router.put('/{tour_id}/seating')
@Logger.io
async def configure_tour_seating(
    tour_id: str,
    request: TourSeatingRequest,
    use_case: ConfigureTourSeatingUseCase = Depends(ConfigureTourSeatingUseCase.depends),
) -> TourSeatingResponse:
    seating = await use_case.configure(
        tour_id=tour_id,
        bus_count=request.bus_count,
        has_bus_seat_selection=request.has_bus_seat_selection,
        price_per_person=request.price_per_person,
    )
    return TourSeatingResponse.from_entity(seating)
