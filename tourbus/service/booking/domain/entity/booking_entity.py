from datetime import date, datetime, timedelta
from typing import Collection, List, Optional

import attrs

from tourbus.platform.exception.exceptions import ConflictError, DomainError
from tourbus.platform.logging.loguru_io import Logger
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.seating.domain.value_object.bus_layout import normalize_seat_ids


@attrs.define
class Booking:
    id: str
    tour_id: str
    bus_id: str
    user_id: str
    selected_seats: List[str]
    persons: int
    customer_info: CustomerInfo
    payment_reference: PaymentReference
    payment_method: PaymentMethod
    from_location: str
    travel_date: date
    created_at: datetime
    expires_at: datetime
    to_location: Optional[str] = None
    notes: Optional[str] = None
    amount: int = 0
    status: BookingStatus = BookingStatus.PENDING
    updated_at: Optional[datetime] = None
    decided_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        id: str,
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
        amount: int = 0,
        requires_seat_selection: bool = True,
        enabled_payment_methods: Collection[PaymentMethod] = (PaymentMethod.MANUAL,),
        now: datetime,
        expiry: timedelta,
    ) -> 'Booking':
        if persons < 1:
            raise DomainError('persons must be at least 1')

        if requires_seat_selection:
            if len(set(s.strip().upper() for s in selected_seats)) != len(selected_seats):
                raise DomainError('Selected seats must be unique')
            seats = normalize_seat_ids(selected_seats)
            if len(seats) != persons:
                raise DomainError(f'Select exactly {persons} seat(s); got {len(seats)}')
        else:
            seats = []

        if not user_id.strip():
            raise DomainError('userId is required')
        if not payment_reference.is_present:
            raise DomainError('Provide a transaction id or a payment proof file')
        if payment_method not in enabled_payment_methods:
            raise DomainError(f'Payment method {payment_method} is not enabled')
        customer_info.validate()
        if not from_location.strip():
            raise DomainError('fromLocation is required')
        if travel_date is None:
            raise DomainError('travelDate is required')

        return cls(
            id=id,
            tour_id=tour_id,
            bus_id=bus_id,
            user_id=user_id,
            selected_seats=seats,
            persons=persons,
            customer_info=customer_info,
            payment_reference=payment_reference,
            payment_method=payment_method,
            from_location=from_location.strip(),
            to_location=to_location,
            travel_date=travel_date,
            notes=notes,
            amount=amount,
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
            expires_at=now + expiry,
        )

    def is_overdue(self, now: datetime) -> bool:
        return self.status is BookingStatus.PENDING and now >= self.expires_at

    def _decide(self, status: BookingStatus, now: datetime) -> 'Booking':
        if self.status.is_terminal:
            raise ConflictError(f'Booking {self.id} is already {self.status}')
        return attrs.evolve(self, status=status, decided_at=now, updated_at=now)

    @Logger.io
    def approve(self, *, now: datetime) -> 'Booking':
        if self.is_overdue(now):
            raise ConflictError(f'Booking {self.id} expired before it was approved')
        return self._decide(BookingStatus.APPROVED, now)

    @Logger.io
    def reject(self, *, now: datetime) -> 'Booking':
        return self._decide(BookingStatus.REJECTED, now)

    @Logger.io
    def expire(self, *, now: datetime) -> 'Booking':
        if self.status is BookingStatus.PENDING and now < self.expires_at:
            raise DomainError(f'Booking {self.id} is not past its deadline')
        return self._decide(BookingStatus.EXPIRED, now)
