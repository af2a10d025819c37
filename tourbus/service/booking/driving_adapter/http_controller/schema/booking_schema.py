from datetime import date, datetime
from typing import List, Optional

from tourbus.platform.types.camel_model import CamelModel
from tourbus.service.booking.domain.entity.booking_entity import Booking
from tourbus.service.booking.domain.enum.booking_status import BookingStatus
from tourbus.service.booking.domain.enum.payment_method import PaymentMethod
from tourbus.service.booking.domain.value_object.customer_info import CustomerInfo
from tourbus.service.booking.domain.value_object.payment_reference import PaymentReference
from tourbus.service.seating.domain.value_object.bus_layout import PRIMARY_BUS_ID


class CustomerInfoSchema(CamelModel):
    name: str
    email: str
    phone: str

    def to_value_object(self) -> CustomerInfo:
        return CustomerInfo(name=self.name, email=self.email, phone=self.phone)


class PaymentReferenceSchema(CamelModel):
    transaction_id: Optional[str] = None
    payment_proof_file: Optional[str] = None

    def to_value_object(self) -> PaymentReference:
        return PaymentReference(
            transaction_id=self.transaction_id, payment_proof_file=self.payment_proof_file
        )


class BookingCreateRequest(CamelModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'tourId': 'sundarbans-3d',
                'busId': '1',
                'userId': 'u-7f3a',
                'selectedSeats': ['A1', 'A2'],
                'persons': 2,
                'customerInfo': {'name': 'Rahim', 'email': 'rahim@example.com', 'phone': '017'},
                'paymentReference': {'transactionId': 'TX-1001'},
                'paymentMethod': 'manual',
                'fromLocation': 'Dhaka',
                'travelDate': '2026-12-01',
            }
        },
    }

    tour_id: str
    bus_id: str = PRIMARY_BUS_ID
    user_id: str
    selected_seats: List[str] = []
    persons: int
    customer_info: CustomerInfoSchema
    payment_reference: PaymentReferenceSchema = PaymentReferenceSchema()
    payment_method: PaymentMethod = PaymentMethod.MANUAL
    from_location: str = ''
    to_location: Optional[str] = None
    travel_date: Optional[date] = None
    notes: Optional[str] = None


class BookingCreatedResponse(CamelModel):
    id: str
    status: BookingStatus
    expires_at: datetime


class BookingStatusResponse(CamelModel):
    status: BookingStatus
    expires_at: datetime


class BookingDetailResponse(CamelModel):
    id: str
    tour_id: str
    bus_id: str
    user_id: str
    selected_seats: List[str]
    persons: int
    customer_info: CustomerInfoSchema
    payment_reference: PaymentReferenceSchema
    payment_method: PaymentMethod
    from_location: str
    to_location: Optional[str] = None
    travel_date: date
    notes: Optional[str] = None
    amount: int
    status: BookingStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    expires_at: datetime
    decided_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, booking: Booking) -> 'BookingDetailResponse':
        return cls(
            id=booking.id,
            tour_id=booking.tour_id,
            bus_id=booking.bus_id,
            user_id=booking.user_id,
            selected_seats=booking.selected_seats,
            persons=booking.persons,
            customer_info=CustomerInfoSchema(
                name=booking.customer_info.name,
                email=booking.customer_info.email,
                phone=booking.customer_info.phone,
            ),
            payment_reference=PaymentReferenceSchema(
                transaction_id=booking.payment_reference.transaction_id,
                payment_proof_file=booking.payment_reference.payment_proof_file,
            ),
            payment_method=booking.payment_method,
            from_location=booking.from_location,
            to_location=booking.to_location,
            travel_date=booking.travel_date,
            notes=booking.notes,
            amount=booking.amount,
            status=booking.status,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
            expires_at=booking.expires_at,
            decided_at=booking.decided_at,
        )


class PaymentSettingsResponse(CamelModel):
    manual_payment: bool
    bkash_payment: bool
