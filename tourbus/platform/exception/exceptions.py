class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_content(self) -> dict:
        return {'detail': self.message}


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class SeatConflictError(ConflictError):
    """A requested seat is booked or held by another identity."""

    def __init__(self, seat_ids: list[str], message: str | None = None) -> None:
        self.seat_ids = list(seat_ids)
        super().__init__(message or f'Seats no longer available: {", ".join(self.seat_ids)}')

    def to_content(self) -> dict:
        return {'detail': self.message, 'conflicts': self.seat_ids}


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)
