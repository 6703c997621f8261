from enum import StrEnum


class ErrorCategory(StrEnum):
    VALIDATION = 'validation'
    AUTHENTICATION = 'authentication'
    AUTHORIZATION = 'authorization'
    NOT_FOUND = 'not_found'
    CONFLICT = 'conflict'
    SEAT_UNAVAILABLE = 'seat_unavailable'
    EXTERNAL_SERVICE = 'external_service'
    INTERNAL = 'internal'


# The only texts an end user ever sees for a failure.
SAFE_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: 'Please check your booking details and try again.',
    ErrorCategory.AUTHENTICATION: 'Sign in required. Please sign in to continue.',
    ErrorCategory.AUTHORIZATION: 'You do not have permission to perform this action.',
    ErrorCategory.NOT_FOUND: 'The requested resource was not found.',
    ErrorCategory.CONFLICT: 'This booking can no longer be changed.',
    ErrorCategory.SEAT_UNAVAILABLE: (
        'Some of the selected seats are no longer available. Please choose other seats.'
    ),
    ErrorCategory.EXTERNAL_SERVICE: 'Payment failed. Please try again.',
    ErrorCategory.INTERNAL: 'An error occurred. Please try again or contact support.',
}


def safe_message(category: ErrorCategory) -> str:
    return SAFE_MESSAGES.get(category, SAFE_MESSAGES[ErrorCategory.INTERNAL])


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def safe_message(self) -> str:
        return safe_message(self.category)


class ValidationError(CustomBaseError):
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class AuthorizationError(CustomBaseError):
    category = ErrorCategory.AUTHORIZATION

    def __init__(self, message: str, status_code: int = 403) -> None:
        super().__init__(message, status_code)


class AuthenticationError(AuthorizationError):
    """Caller carries no (valid) identity."""

    category = ErrorCategory.AUTHENTICATION

    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class NotFoundError(CustomBaseError):
    category = ErrorCategory.NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    category = ErrorCategory.CONFLICT

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class SeatUnavailableError(ConflictError):
    """A requested seat is sold or held by another booking."""

    category = ErrorCategory.SEAT_UNAVAILABLE


class ExternalServiceError(CustomBaseError):
    category = ErrorCategory.EXTERNAL_SERVICE

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)
