from datetime import date, timedelta
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
import uuid_utils

from tourbus.platform.config.core_setting import settings
from tourbus.platform.config.di import Container
from tourbus.platform.exception.exceptions import DomainError, SeatConflictError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.platform.metrics.booking_metrics import booking_metrics
from tourbus.platform.types.clock import Clock
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.app.interface.i_booking_status_broadcaster import (
    IBookingStatusBroadcaster,
)
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.seating.app.command.bus_unlock_guard import ensure_bus_unlocked
from tourbus.service.seating.app.interface.i_seat_map_broadcaster import ISeatMapBroadcaster
from tourbus.service.seating.app.interface.i_seat_map_store import ISeatMapStore
from tourbus.service.seating.app.interface.i_tour_seating_repo import ITourSeatingRepo


def enabled_payment_methods() -> List[PaymentMethod]:
    methods = []
    if settings.MANUAL_PAYMENT_ENABLED:
        methods.append(PaymentMethod.MANUAL)
    if settings.BKASH_PAYMENT_ENABLED:
        methods.append(PaymentMethod.BKASH)
    return methods


class CreateBookingUseCase:
    """
    Create a pending booking

    Flow:
    1. Generate UUID7 booking id and validate the request (Fail Fast)
    2. Pin the selected seats to the booking in the seat map store
    3. Persist the booking as pending with its deadline
    4. Broadcast the seat map and return the booking

    The pinned seats stay held until `expires_at` plus a grace period, so the
    expiry sweeper always runs before the hold lapses.
    """

    def __init__(
        self,
        *,
        booking_repo: IBookingRepo,
        seat_map_store: ISeatMapStore,
        tour_seating_repo: ITourSeatingRepo,
        seat_map_broadcaster: ISeatMapBroadcaster,
        booking_status_broadcaster: IBookingStatusBroadcaster,
        clock: Clock,
    ) -> None:
        self.booking_repo = booking_repo
        self.seat_map_store = seat_map_store
        self.tour_seating_repo = tour_seating_repo
        self.seat_map_broadcaster = seat_map_broadcaster
        self.booking_status_broadcaster = booking_status_broadcaster
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        booking_repo: IBookingRepo = Depends(Provide[Container.booking_repo]),
        seat_map_store: ISeatMapStore = Depends(Provide[Container.seat_map_store]),
        tour_seating_repo: ITourSeatingRepo = Depends(Provide[Container.tour_seating_repo]),
        seat_map_broadcaster: ISeatMapBroadcaster = Depends(
            Provide[Container.seat_map_broadcaster]
        ),
        booking_status_broadcaster: IBookingStatusBroadcaster = Depends(
            Provide[Container.booking_status_broadcaster]
        ),
        clock: Clock = Depends(Provide[Container.clock]),
    ) -> Self:
        return cls(
            booking_repo=booking_repo,
            seat_map_store=seat_map_store,
            tour_seating_repo=tour_seating_repo,
            seat_map_broadcaster=seat_map_broadcaster,
            booking_status_broadcaster=booking_status_broadcaster,
            clock=clock,
        )

    @Logger.io
    async def create_booking(
        self,
        *,
        tour_id: str,
        bus_id: str,
        user_id: str,
        selected_seats: List[str],
        persons: int,
        customer_info: CustomerInfo,
        payment_reference: PaymentReference,
        payment_method: PaymentMethod,
        from_location: str,
        travel_date: Optional[date],
        to_location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Booking:
        seating = await self.tour_seating_repo.get_or_default(tour_id=tour_id)
        if not seating.has_bus(bus_id):
            raise DomainError(f'Unknown bus: {bus_id}')

        now = self.clock()
        booking = Booking.create(
            id=str(uuid_utils.uuid7()),
            tour_id=tour_id,
            bus_id=bus_id,
            user_id=user_id,
            selected_seats=selected_seats,
            persons=persons,
            customer_info=customer_info,
            payment_reference=payment_reference,
            payment_method=payment_method,
            from_location=from_location,
            to_location=to_location,
            travel_date=travel_date,
            notes=notes,
            amount=seating.amount_for(persons),
            requires_seat_selection=seating.has_bus_seat_selection,
            enabled_payment_methods=enabled_payment_methods(),
            now=now,
            expiry=timedelta(minutes=settings.BOOKING_EXPIRY_MINUTES),
        )
        Logger.base.info(f'📝 [CREATE-BOOKING] {booking.id} for tour={tour_id} bus={bus_id}')

        if booking.selected_seats:
            await ensure_bus_unlocked(
                seat_map_store=self.seat_map_store,
                tour_id=tour_id,
                bus_id=bus_id,
                user_id=user_id,
                seat_ids=booking.selected_seats,
                now=now,
            )
            result = await self.seat_map_store.hold_for_booking(
                tour_id=tour_id,
                bus_id=bus_id,
                user_id=user_id,
                seat_ids=booking.selected_seats,
                booking_id=booking.id,
                now=now,
                hold_until=booking.expires_at
                + timedelta(seconds=settings.BOOKING_HOLD_GRACE_SECONDS),
            )
            if not result.ok:
                raise SeatConflictError(seat_ids=result.conflicts)

        try:
            await self.booking_repo.create(booking=booking)
        except Exception:
            # nothing refers to the pinned seats without the record
            if booking.selected_seats:
                await self.seat_map_store.settle_booking(
                    tour_id=tour_id, bus_id=bus_id, booking_id=booking.id, outcome='release'
                )
            raise

        booking_metrics.record_transition(status=booking.status.value)
        if booking.selected_seats:
            seat_map = await self.seat_map_store.get_seat_map(
                tour_id=tour_id, bus_id=bus_id, now=now
            )
            await self.seat_map_broadcaster.publish_seat_map(
                tour_id=tour_id, bus_id=bus_id, seats=seat_map.snapshot(now=now)
            )
        await self.booking_status_broadcaster.publish_status(booking=booking)
        return booking
