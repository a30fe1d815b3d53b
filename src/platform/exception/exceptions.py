class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ValidationError(DomainError):
    """Input rejected locally, before any network call"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class SubmissionInProgressError(ConflictError):
    def __init__(self, message: str = 'A booking request is already in progress') -> None:
        super().__init__(message)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class TransportError(CustomBaseError):
    """Network failure, non-2xx response or unreadable body from the allocation service"""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message, status_code)


class PollTransientError(TransportError):
    """A single status query failed; the poller keeps going"""


class PersistenceError(CustomBaseError):
    """History / preference store failure - never blocks the booking flow"""

    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
