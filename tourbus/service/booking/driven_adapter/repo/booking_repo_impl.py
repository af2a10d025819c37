from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.app.interface.i_booking_repo import IBookingRepo
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.booking.driven_adapter.model.booking_model import BookingModel


class BookingRepoImpl(IBookingRepo):
    def __init__(
        self, *, session_factory: Callable[..., AbstractAsyncContextManager[AsyncSession]]
    ) -> None:
        self.session_factory = session_factory

    @staticmethod
    def _to_entity(db_booking: BookingModel) -> Booking:
        return Booking(
            id=db_booking.id,
            tour_id=db_booking.tour_id,
            bus_id=db_booking.bus_id,
            user_id=db_booking.user_id,
            selected_seats=list(db_booking.selected_seats or []),
            persons=db_booking.persons,
            customer_info=CustomerInfo(
                name=db_booking.customer_name,
                email=db_booking.customer_email,
                phone=db_booking.customer_phone,
            ),
            payment_reference=PaymentReference(
                transaction_id=db_booking.transaction_id,
                payment_proof_file=db_booking.payment_proof_file,
            ),
            payment_method=PaymentMethod(db_booking.payment_method),
            from_location=db_booking.from_location,
            to_location=db_booking.to_location,
            travel_date=db_booking.travel_date,
            notes=db_booking.notes,
            amount=db_booking.amount,
            status=BookingStatus(db_booking.status),
            created_at=db_booking.created_at,
            updated_at=db_booking.updated_at,
            expires_at=db_booking.expires_at,
            decided_at=db_booking.decided_at,
        )

    @staticmethod
    def _to_model(booking: Booking) -> BookingModel:
        return BookingModel(
            id=booking.id,
            tour_id=booking.tour_id,
            bus_id=booking.bus_id,
            user_id=booking.user_id,
            selected_seats=booking.selected_seats,
            persons=booking.persons,
            customer_name=booking.customer_info.name,
            customer_email=booking.customer_info.email,
            customer_phone=booking.customer_info.phone,
            transaction_id=booking.payment_reference.transaction_id,
            payment_proof_file=booking.payment_reference.payment_proof_file,
            payment_method=booking.payment_method.value,
            from_location=booking.from_location,
            to_location=booking.to_location,
            travel_date=booking.travel_date,
            notes=booking.notes,
            amount=booking.amount,
            status=booking.status.value,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            expires_at=booking.expires_at,
            decided_at=booking.decided_at,
        )

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        async with self.session_factory() as session:
            session.add(self._to_model(booking))
            await session.commit()
        return booking

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Optional[Booking]:
        async with self.session_factory() as session:
            db_booking = await session.get(BookingModel, booking_id)
            return self._to_entity(db_booking) if db_booking else None

    @Logger.io
    async def list_bookings(self, *, status: Optional[BookingStatus] = None) -> List[Booking]:
        stmt = select(BookingModel).order_by(BookingModel.created_at.desc())
        if status is not None:
            stmt = stmt.where(BookingModel.status == status.value)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_overdue(self, *, now: datetime) -> List[Booking]:
        stmt = select(BookingModel).where(
            BookingModel.status == BookingStatus.PENDING.value,
            BookingModel.expires_at <= now,
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return [self._to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def transition_status(
        self,
        *,
        booking: Booking,
        expected: BookingStatus = BookingStatus.PENDING,
    ) -> bool:
        # single conditional UPDATE; the row lock makes concurrent deciders serialise
        stmt = (
            update(BookingModel)
            .where(BookingModel.id == booking.id, BookingModel.status == expected.value)
            .values(
                status=booking.status.value,
                decided_at=booking.decided_at,
                updated_at=booking.updated_at,
            )
        )
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount == 1  # type: ignore[attr-defined]
