"""Tests for exception classes."""

from __future__ import annotations

import pytest

from cf_ddns.errors import (
    NetworkOperationError,
    ProviderRejectedError,
    RetryExhaustedError,
    StepFailedError,
    TransportError,
    UnexpectedStatusError,
    format_provider_errors,
)


class TestFormatProviderErrors:
    """Tests for format_provider_errors."""

    @pytest.mark.parametrize(
        ("errors", "expected"),
        [
            ([], "unknown error"),
            (["invalid content"], "invalid content"),
            (["a", "b"], "a; b"),
            (
                [{"code": 9005, "message": "Content for A record must be a valid IPv4 address."}],
                "[9005] Content for A record must be a valid IPv4 address.",
            ),
            ([{"message": "no code"}], "no code"),
            ([{"code": 1000}], "{'code': 1000}"),
        ],
    )
    def test_format(self, errors, expected):
        assert format_provider_errors(errors) == expected


class TestErrorMessages:
    """Tests for error messages and attributes."""

    def test_unexpected_status(self):
        error = UnexpectedStatusError(503, "https://api.ipify.org/?format=json")
        assert isinstance(error, NetworkOperationError)
        assert str(error) == "unexpected status code 503 from https://api.ipify.org/?format=json"

    def test_provider_rejected(self):
        error = ProviderRejectedError([])
        assert isinstance(error, NetworkOperationError)
        assert str(error) == "cloudflare API error: unknown error"

    def test_retry_exhausted(self):
        last = TransportError("connection refused")
        error = RetryExhaustedError("update DNS record", 5, last)
        assert error.attempts == 6
        assert error.last_error is last
        assert str(error) == "failed to update DNS record after 5 retries: connection refused"

    def test_step_failed(self):
        error = StepFailedError("updating A record", TransportError("down"))
        assert error.step == "updating A record"
        assert str(error) == "Error updating A record: down"
