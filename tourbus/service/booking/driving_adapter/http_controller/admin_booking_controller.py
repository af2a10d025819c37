from typing import List, Optional

from fastapi import APIRouter, Depends

from tourbus.platform.auth.admin_auth import require_admin
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.command.approve_booking_use_case import ApproveBookingUseCase
from tourbus.service.booking.app.command.reject_booking_use_case import RejectBookingUseCase
from tourbus.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from tourbus.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingDetailResponse,
)


router = APIRouter(dependencies=[Depends(require_admin)])


@router.get('')
@Logger.io
async def list_bookings(
    status: Optional[BookingStatus] = None,
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingDetailResponse]:
    bookings = await use_case.list_bookings(status=status)
    return [BookingDetailResponse.from_entity(b) for b in bookings]


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: str,
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingDetailResponse:
    booking = await use_case.get_booking(booking_id=booking_id)
    return BookingDetailResponse.from_entity(booking)


@router.post('/{booking_id}/approve')
@Logger.io
async def approve_booking(
    booking_id: str,
    use_case: ApproveBookingUseCase = Depends(ApproveBookingUseCase.depends),
) -> BookingDetailResponse:
    booking = await use_case.approve(booking_id=booking_id)
    return BookingDetailResponse.from_entity(booking)


@router.post('/{booking_id}/reject')
@Logger.io
async def reject_booking(
    booking_id: str,
    use_case: RejectBookingUseCase = Depends(RejectBookingUseCase.depends),
) -> BookingDetailResponse:
    booking = await use_case.reject(booking_id=booking_id)
    return BookingDetailResponse.from_entity(booking)
