from typing import List, Optional


class ClientError(Exception):
    """Base class for errors raised by the tour bus client"""


class ApiError(ClientError):
    """The server answered with a non-retryable error status"""

    def __init__(self, status_code: int, detail: str) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f'{status_code}: {detail}')


class SeatConflictError(ApiError):
    """Requested seats were taken by someone else; the map must be refreshed"""

    def __init__(self, conflicts: List[str], detail: Optional[str] = None) -> None:
        self.conflicts = list(conflicts)
        super().__init__(409, detail or f'Seats no longer available: {", ".join(self.conflicts)}')


class BookingValidationError(ClientError):
    """Raised locally before any request is sent"""


class TransientApiError(ClientError):
    """The server stayed unreachable (or kept failing with 5xx) after all retries"""

    def __init__(self, message: str, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(message)
