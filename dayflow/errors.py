"""
Error taxonomy for Dayflow.

AuthError         no/denied token; the user has to sign in
HttpError         any non-2xx (or transport failure, status 0); not retried
HttpUnauthorized  401; recovered by one invalidate + reacquire + retry
MalformedEvent    raised and caught inside normalization, never propagated
"""


class DayflowError(Exception):
    """Base class for all Dayflow errors."""

    pass


class AuthError(DayflowError):
    """Raised when no usable OAuth token can be obtained."""

    pass


class HttpError(DayflowError):
    """Raised when the calendar provider answers with a non-2xx status."""

    def __init__(self, status: int, message: str = ""):
        self.status = status
        super().__init__(message or f"Calendar API error: {status}")


class HttpUnauthorized(HttpError):
    """Raised on 401 so the caller can invalidate the token and retry once."""

    def __init__(self, message: str = "UNAUTHORIZED"):
        super().__init__(401, message)


class MalformedEvent(DayflowError):
    """Raised when a raw provider event cannot be normalized."""

    pass
