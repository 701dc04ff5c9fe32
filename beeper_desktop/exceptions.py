"""Custom exception classes for the Beeper Desktop SDK.

Every HTTP failure maps onto exactly one class below.  The mapping is a pure
function of the status code and the decoded error envelope
(:func:`classify_error`), and whether a failure is worth another attempt is a
static policy over the exception class (:func:`is_retryable_error`).
"""

from __future__ import annotations

from functools import lru_cache


class BeeperDesktopError(Exception):
    """Base exception for all Beeper Desktop SDK errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class APIError(BeeperDesktopError):
    """Exception raised when the API returns an error response."""

    def __init__(
        self,
        message: str,
        status: int,
        code: str | None = None,
        details: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"API error {self.status} ({self.code}): {self.message}"
        return f"API error {self.status}: {self.message}"


class BadRequestError(APIError):
    """Exception raised when the request is malformed (400)."""


class AuthenticationError(APIError):
    """Exception raised when authentication fails (401)."""


class PermissionDeniedError(APIError):
    """Exception raised when the token lacks permission (403)."""


class NotFoundError(APIError):
    """Exception raised when a resource is not found (404)."""


class ConflictError(APIError):
    """Exception raised when the request conflicts with current state (409)."""


class UnprocessableEntityError(APIError):
    """Exception raised when request validation fails (422)."""


class RateLimitError(APIError):
    """Exception raised when rate limit is exceeded (429)."""


class InternalServerError(APIError):
    """Exception raised when the server returns a 5xx error."""


class APIConnectionError(APIError):
    """Exception raised when no HTTP response could be obtained."""

    def __init__(self, message: str = "Connection error", cause: BaseException | None = None) -> None:
        super().__init__(message, status=0)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"connection error: {self.message} (caused by: {self.cause})"
        return f"connection error: {self.message}"


class APIConnectionTimeoutError(APIConnectionError):
    """Exception raised when a request exceeds its deadline."""


class ResponseDecodeError(BeeperDesktopError):
    """Exception raised when a successful response does not match the expected shape."""

    def __init__(self, message: str, status: int, body: bytes = b"") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class RequestSerializationError(BeeperDesktopError):
    """Exception raised when a request body cannot be encoded as JSON."""


class RequestCancelledError(BeeperDesktopError):
    """Exception raised when the caller's cancel event fires."""

    def __init__(self, message: str = "request cancelled") -> None:
        super().__init__(message)


class RetryExhaustedError(BeeperDesktopError):
    """Exception raised when every retry attempt failed with a transient error.

    Errors built with :meth:`from_last_error` are also instances of the last
    error's class and carry its ``status``, ``code`` and ``details``, so
    ``except RateLimitError`` still matches a rate limit that outlasted its
    retries.
    """

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        message = f"request failed after {attempts} attempts: {last_error}"
        Exception.__init__(self, message)
        self.message = message
        self.attempts = attempts
        self.last_error = last_error
        self.status = getattr(last_error, "status", 0)
        self.code = getattr(last_error, "code", None)
        self.details = getattr(last_error, "details", {})
        self.cause = getattr(last_error, "cause", None)

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_last_error(cls, attempts: int, last_error: BaseException) -> RetryExhaustedError:
        """Wrap *last_error*, keeping its kind when it is an :class:`APIError`."""
        if isinstance(last_error, APIError):
            return _exhausted_class(type(last_error))(attempts, last_error)
        return cls(attempts, last_error)


@lru_cache(maxsize=None)
def _exhausted_class(error_cls: type[APIError]) -> type[RetryExhaustedError]:
    return type(
        f"Exhausted{error_cls.__name__}",
        (RetryExhaustedError, error_cls),
        {"__module__": __name__},
    )


_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: UnprocessableEntityError,
    429: RateLimitError,
}

_RETRYABLE_ERRORS: tuple[type[BeeperDesktopError], ...] = (
    APIConnectionError,
    ConflictError,
    RateLimitError,
    InternalServerError,
)


def classify_error(
    status: int,
    message: str,
    code: str | None = None,
    details: dict[str, str] | None = None,
) -> APIError:
    """Map an HTTP error status and decoded error envelope to a typed exception.

    The mapping is:

    ====  ==================================
    Code  Exception
    ====  ==================================
    400   :class:`BadRequestError`
    401   :class:`AuthenticationError`
    403   :class:`PermissionDeniedError`
    404   :class:`NotFoundError`
    409   :class:`ConflictError`
    422   :class:`UnprocessableEntityError`
    429   :class:`RateLimitError`
    5xx   :class:`InternalServerError`
    other :class:`APIError`
    ====  ==================================

    Args:
        status: HTTP status code of the response (>= 400).
        message: Human-readable message from the ``error`` field, or the raw body.
        code: Optional machine-readable ``code`` field.
        details: Optional ``details`` mapping.

    Returns:
        The exception instance; the caller decides whether to raise it.
    """
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is None:
        error_cls = InternalServerError if status >= 500 else APIError
    return error_cls(message, status=status, code=code, details=details)


def is_retryable_error(exc: BaseException) -> bool:
    """Return ``True`` if *exc* is a transient failure worth another attempt.

    Connection failures, 409, 429 and 5xx are retryable.  A plain
    :class:`APIError` (a status with no dedicated class) is retryable only for
    408 or any status >= 500.  Everything else is not, including decode
    failures and errors that already exhausted their retries.
    """
    if isinstance(exc, RetryExhaustedError):
        return False
    if isinstance(exc, _RETRYABLE_ERRORS):
        return True
    if type(exc) is APIError:
        return exc.status == 408 or exc.status >= 500
    return False
