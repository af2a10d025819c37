from tourbus.client.booking_status_watcher import BookingStatusWatcher
from tourbus.client.booking_submission import submit_booking, validate_draft
from tourbus.client.countdown import format_time_left
from tourbus.client.errors import (
    ApiError,
    BookingValidationError,
    ClientError,
    SeatConflictError,
    TransientApiError,
)
from tourbus.client.identity import get_or_create_identity
from tourbus.client.models import BookingDraft, SeatViewState
from tourbus.client.seat_api_client import SeatApiClient, create_seat_api_client
from tourbus.client.seat_selection_session import SeatSelectionSession
from tourbus.client.selection_cache import InMemorySelectionCache, SelectionCache


__all__ = [
    'ApiError',
    'BookingDraft',
    'BookingStatusWatcher',
    'BookingValidationError',
    'ClientError',
    'InMemorySelectionCache',
    'SeatApiClient',
    'SeatConflictError',
    'SeatSelectionSession',
    'SeatViewState',
    'SelectionCache',
    'TransientApiError',
    'create_seat_api_client',
    'format_time_left',
    'get_or_create_identity',
    'submit_booking',
    'validate_draft',
]
