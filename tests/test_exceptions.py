"""Tests for error classification and the retryability policy."""

import httpx
import pytest

from beeper_desktop import (
    APIConnectionError,
    APIConnectionTimeoutError,
    APIError,
    AuthenticationError,
    BadRequestError,
    ConflictError,
    InternalServerError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    RequestCancelledError,
    ResponseDecodeError,
    RetryExhaustedError,
    UnprocessableEntityError,
    classify_error,
    is_retryable_error,
)


STATUS_TABLE = [
    (400, BadRequestError, False),
    (401, AuthenticationError, False),
    (403, PermissionDeniedError, False),
    (404, NotFoundError, False),
    (409, ConflictError, True),
    (422, UnprocessableEntityError, False),
    (429, RateLimitError, True),
    (500, InternalServerError, True),
    (502, InternalServerError, True),
    (503, InternalServerError, True),
]


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize("status,error_cls,retryable", STATUS_TABLE)
    def test_status_maps_to_exact_kind(self, status, error_cls, retryable):
        """Each known status produces exactly its own exception class."""
        error = classify_error(status, "boom")
        assert type(error) is error_cls
        assert error.status == status
        assert is_retryable_error(error) is retryable

    def test_fields_are_carried(self):
        """Message, code and details survive classification."""
        error = classify_error(404, "not found", "NOT_FOUND", {"chatID": "c-1"})
        assert error.message == "not found"
        assert error.code == "NOT_FOUND"
        assert error.details == {"chatID": "c-1"}

    def test_unknown_4xx_is_generic(self):
        """A 4xx without a dedicated class becomes a plain APIError."""
        error = classify_error(418, "teapot")
        assert type(error) is APIError
        assert error.details == {}

    def test_str_includes_code(self):
        assert str(classify_error(404, "not found", "NOT_FOUND")) == "API error 404 (NOT_FOUND): not found"
        assert str(classify_error(400, "bad")) == "API error 400: bad"


class TestIsRetryable:
    """Tests for is_retryable_error."""

    def test_generic_408_is_retryable(self):
        assert is_retryable_error(APIError("timeout", status=408)) is True

    def test_generic_4xx_is_not_retryable(self):
        assert is_retryable_error(APIError("teapot", status=418)) is False

    def test_generic_5xx_is_retryable(self):
        """A plain APIError built with a 5xx status is still retryable."""
        assert is_retryable_error(APIError("odd", status=599)) is True

    def test_connection_errors_are_retryable(self):
        cause = httpx.ConnectError("refused")
        assert is_retryable_error(APIConnectionError("request failed", cause=cause)) is True
        assert is_retryable_error(APIConnectionTimeoutError("slow", cause=cause)) is True

    @pytest.mark.parametrize(
        "error",
        [
            ResponseDecodeError("bad shape", status=200),
            RequestCancelledError(),
            RetryExhaustedError(3, RateLimitError("slow down", status=429)),
            RetryExhaustedError.from_last_error(3, RateLimitError("slow down", status=429)),
            ValueError("not ours"),
        ],
    )
    def test_other_errors_are_not_retryable(self, error):
        assert is_retryable_error(error) is False


class TestErrorShapes:
    """Tests for the extra fields of non-status errors."""

    def test_connection_error_has_zero_status_and_cause(self):
        cause = httpx.ConnectError("refused")
        error = APIConnectionError("request failed", cause=cause)
        assert error.status == 0
        assert error.cause is cause
        assert "caused by: refused" in str(error)

    def test_retry_exhausted_mentions_attempts(self):
        last = InternalServerError("down", status=503)
        error = RetryExhaustedError(3, last)
        assert "after 3 attempts" in str(error)
        assert error.last_error is last
        assert error.status == 503

    def test_exhausted_error_keeps_last_kind(self):
        last = RateLimitError("slow down", status=429, code="RATE_LIMITED")
        error = RetryExhaustedError.from_last_error(2, last)
        assert isinstance(error, RateLimitError)
        assert isinstance(error, RetryExhaustedError)
        assert error.code == "RATE_LIMITED"
        assert str(error) == "request failed after 2 attempts: API error 429 (RATE_LIMITED): slow down"

    def test_exhausted_connection_error_keeps_cause(self):
        cause = httpx.ConnectError("refused")
        error = RetryExhaustedError.from_last_error(3, APIConnectionTimeoutError("slow", cause=cause))
        assert isinstance(error, APIConnectionTimeoutError)
        assert error.status == 0
        assert error.cause is cause

    def test_exhausted_non_api_error_is_plain(self):
        error = RetryExhaustedError.from_last_error(1, ValueError("boom"))
        assert type(error) is RetryExhaustedError
        assert not isinstance(error, APIError)
        assert error.status == 0
