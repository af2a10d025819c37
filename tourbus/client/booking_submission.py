from typing import Collection

from tourbus.client.errors import BookingValidationError
from tourbus.client.models import BookingDraft, CreatedBooking
from tourbus.client.seat_api_client import SeatApiClient


def validate_draft(
    draft: BookingDraft,
    *,
    requires_seat_selection: bool = True,
    enabled_payment_methods: Collection[str] = ('manual',),
) -> None:
    """Mirror of the server's checks, so obviously bad drafts never leave the device"""
    if draft.persons < 1:
        raise BookingValidationError('persons must be at least 1')
    if requires_seat_selection:
        if len(set(draft.selected_seats)) != len(draft.selected_seats):
            raise BookingValidationError('Selected seats must be unique')
        if len(draft.selected_seats) != draft.persons:
            raise BookingValidationError(
                f'Select exactly {draft.persons} seat(s); got {len(draft.selected_seats)}'
            )
    if not (draft.transaction_id or draft.payment_proof_file):
        raise BookingValidationError('Provide a transaction id or a payment proof file')
    if draft.payment_method not in enabled_payment_methods:
        raise BookingValidationError(f'Payment method {draft.payment_method} is not enabled')
    if not draft.customer_name.strip() or not draft.customer_phone.strip():
        raise BookingValidationError('Customer name and phone are required')
    if '@' not in draft.customer_email:
        raise BookingValidationError('A valid customer email is required')
    if not draft.from_location.strip() or draft.travel_date is None:
        raise BookingValidationError('Pickup location and travel date are required')


async def submit_booking(
    api: SeatApiClient,
    *,
    draft: BookingDraft,
    user_id: str,
    requires_seat_selection: bool = True,
    enabled_payment_methods: Collection[str] = ('manual',),
) -> CreatedBooking:
    validate_draft(
        draft,
        requires_seat_selection=requires_seat_selection,
        enabled_payment_methods=enabled_payment_methods,
    )
    return await api.create_booking(draft=draft, user_id=user_id)
