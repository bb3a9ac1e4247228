"""
Tests for logging_config module.

This module tests the SensitiveFilter and SENSITIVE_PATTERNS to ensure
that API tokens are properly masked in log messages.
"""

import logging
import logging.handlers
from typing import TYPE_CHECKING

import pytest

from cf_ddns.config import LoggingConfig
from cf_ddns.logging_config import SENSITIVE_PATTERNS, SensitiveFilter, setup_logging

if TYPE_CHECKING:
    from collections.abc import Callable


def apply_patterns(msg: str) -> str:
    """Apply all sensitive patterns to a message."""
    result = msg
    for pattern, replacement in SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


class TestSensitivePatterns:
    """Tests for SENSITIVE_PATTERNS regex patterns."""

    @pytest.mark.parametrize(
        ("original", "expected"),
        [
            # Standard Bearer token - keep 6 chars
            (
                "Authorization: Bearer abc123xyz789token",
                "Authorization: Bearer abc123******",
            ),
            # Short token (less than 6 chars) - keep all available
            ("Authorization: Bearer xy", "Authorization: Bearer xy******"),
            # Case insensitive
            (
                "authorization: bearer ABC123XYZ",
                "authorization: bearer ABC123******",
            ),
            # Inside a headers dict repr
            (
                "{'Authorization': 'Bearer tok3n-value', 'Content-Type': 'application/json'}",
                "{'Authorization': 'Bearer tok3n-******', 'Content-Type': 'application/json'}",
            ),
        ],
    )
    def test_authorization_bearer(self, original: str, expected: str) -> None:
        """Test Authorization Bearer token masking."""
        assert apply_patterns(original) == expected

    @pytest.mark.parametrize(
        ("original", "expected"),
        [
            ('api_token="abcdefghijk"', 'api_token="abcdef******"'),
            ("api_token='abcdefghijk'", "api_token='abcdef******'"),
            ("api_token=abcdefghijk", "api_token=abcdef******"),
            ("api_token = abcdefghijk", "api_token = abcdef******"),
            ("CF_API_TOKEN=abcdefghijk", "CF_API_TOKEN=abcdef******"),
            ("api_token=abc", "api_token=abc******"),
        ],
    )
    def test_api_token_assignment(self, original: str, expected: str) -> None:
        """Test api_token= masking (keeps first 6 chars)."""
        assert apply_patterns(original) == expected

    @pytest.mark.parametrize(
        "original",
        [
            "Normal log message without sensitive data",
            "token_count=3",
            "Authorization: Basic abc123",
            "[cloudflare] Updating A record home.example.com to 203.0.113.7",
        ],
    )
    def test_non_matching_unchanged(self, original: str) -> None:
        """Test that non-matching strings are not modified."""
        assert apply_patterns(original) == original


class TestSensitiveFilter:
    """Tests for SensitiveFilter logging filter."""

    @pytest.fixture
    def log_filter(self) -> SensitiveFilter:
        """Create a SensitiveFilter instance."""
        return SensitiveFilter()

    @pytest.fixture
    def make_record(self) -> "Callable[..., logging.LogRecord]":
        """Create a factory for log records."""

        def _make_record(msg: str, args: tuple = ()) -> logging.LogRecord:
            return logging.LogRecord(
                name="test",
                level=logging.INFO,
                pathname="",
                lineno=0,
                msg=msg,
                args=args,
                exc_info=None,
            )

        return _make_record

    def test_filter_always_returns_true(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that filter always returns True (always logs)."""
        assert log_filter.filter(make_record("any message")) is True

    def test_filter_masks_bearer_token(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that Bearer tokens are masked in log records."""
        record = make_record("Authorization: Bearer token123456")
        log_filter.filter(record)
        assert record.msg == "Authorization: Bearer token1******"

    def test_filter_masks_tuple_args(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that tokens passed as positional args are masked."""
        record = make_record("Headers %s, attempt %d", ("Bearer mytoken123", 3))
        log_filter.filter(record)
        assert record.args == ()
        assert record.getMessage() == "Headers Bearer mytoke******, attempt 3"

    def test_filter_masks_mapping_args(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that tokens passed through a mapping argument are masked."""
        record = make_record(
            "Request with %(auth)s",
            ({"auth": "Bearer mytoken123"},),
        )
        log_filter.filter(record)
        assert record.getMessage() == "Request with Bearer mytoke******"

    def test_filter_keeps_percent_after_merge(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that a merged message containing % is not formatted again."""
        record = make_record("progress %s", ("100%",))
        log_filter.filter(record)
        assert record.getMessage() == "progress 100%"

    def test_filter_handles_empty_message(
        self,
        log_filter: SensitiveFilter,
        make_record: "Callable[..., logging.LogRecord]",
    ) -> None:
        """Test that empty messages are handled gracefully."""
        record = make_record("")
        assert log_filter.filter(record) is True
        assert record.msg == ""


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def _restore_logger(self):
        """Restore the package logger after each test."""
        logger = logging.getLogger("cf_ddns")
        saved = (logger.level, list(logger.handlers), logger.propagate)
        yield
        for handler in logger.handlers:
            handler.close()
        logger.setLevel(saved[0])
        logger.handlers[:] = saved[1]
        logger.propagate = saved[2]

    def test_console_only(self) -> None:
        setup_logging(LoggingConfig(level="DEBUG"))
        logger = logging.getLogger("cf_ddns")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False
        assert any(isinstance(f, SensitiveFilter) for f in logger.handlers[0].filters)

    def test_file_logging(self, tmp_path) -> None:
        log_path = tmp_path / "logs" / "cf-ddns.log"
        setup_logging(
            LoggingConfig(level="INFO", file_enabled=True, file_path=str(log_path)),
        )
        logger = logging.getLogger("cf_ddns")
        assert any(
            isinstance(h, logging.handlers.WatchedFileHandler) for h in logger.handlers
        )

        logging.getLogger("cf_ddns.cloudflare").info("sent Bearer abcdefghijkl")
        for handler in logger.handlers:
            handler.flush()

        content = log_path.read_text(encoding="utf-8")
        assert "sent Bearer abcdef******" in content
        assert "abcdefghijkl" not in content
