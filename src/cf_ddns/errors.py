"""
Exception classes for cf-ddns.

Network failures are split by kind, but every kind derived from
`NetworkOperationError` is retried the same way by `cf_ddns.retry`.
"""

from __future__ import annotations

from typing import Any


class CFDDNSError(Exception):
    """Base class for all cf-ddns errors."""


class NetworkOperationError(CFDDNSError):
    """
    A single network attempt failed.

    Any subclass raised from a retried action triggers another attempt
    until the retry budget is exhausted.
    """


class TransportError(NetworkOperationError):
    """Connection, DNS, TLS or read failure while talking to a remote host."""


class UnexpectedStatusError(NetworkOperationError):
    """
    A response was received with a status code other than the expected one.

    Attributes
    ----------
    status_code : int
        The HTTP status code received.
    url : str
        The requested URL.
    """

    def __init__(self, status_code: int, url: str) -> None:
        """
        Initialize UnexpectedStatusError.

        Parameters
        ----------
        status_code : int
            The HTTP status code received.
        url : str
            The requested URL.
        """
        self.status_code = status_code
        self.url = url
        super().__init__(f"unexpected status code {status_code} from {url}")


class DecodeError(NetworkOperationError):
    """The response body could not be parsed into the expected JSON shape."""


class ProviderRejectedError(NetworkOperationError):
    """
    The DNS provider answered with ``success: false``.

    Attributes
    ----------
    errors : list[Any]
        The error descriptors reported by the provider.
    """

    def __init__(self, errors: list[Any]) -> None:
        """
        Initialize ProviderRejectedError.

        Parameters
        ----------
        errors : list[Any]
            The error descriptors reported by the provider.
        """
        self.errors = errors
        super().__init__(f"cloudflare API error: {format_provider_errors(errors)}")


class RetryExhaustedError(CFDDNSError):
    """
    A retried operation failed on every attempt.

    Attributes
    ----------
    operation : str
        Human-readable name of the operation.
    attempts : int
        Total number of attempts made.
    last_error : NetworkOperationError
        The error raised by the final attempt.
    """

    def __init__(
        self,
        operation: str,
        retries: int,
        last_error: NetworkOperationError,
    ) -> None:
        """
        Initialize RetryExhaustedError.

        Parameters
        ----------
        operation : str
            Human-readable name of the operation.
        retries : int
            Number of retries made after the first attempt.
        last_error : NetworkOperationError
            The error raised by the final attempt.
        """
        self.operation = operation
        self.attempts = retries + 1
        self.last_error = last_error
        super().__init__(f"failed to {operation} after {retries} retries: {last_error}")


class StepFailedError(CFDDNSError):
    """
    A step of an update run failed and the run was aborted.

    Attributes
    ----------
    step : str
        Description of the failed step (e.g. "fetching IPv4").
    """

    def __init__(self, step: str, cause: Exception) -> None:
        """
        Initialize StepFailedError.

        Parameters
        ----------
        step : str
            Description of the failed step.
        cause : Exception
            The underlying error.
        """
        self.step = step
        super().__init__(f"Error {step}: {cause}")


def format_provider_errors(errors: list[Any]) -> str:
    """
    Render a provider error list as text.

    Cloudflare reports errors as objects with ``code`` and ``message``;
    anything else is rendered with `str`.

    Parameters
    ----------
    errors : list[Any]
        The error descriptors.

    Returns
    -------
    str
        The rendered errors, or "unknown error" when the list is empty.
    """
    if not errors:
        return "unknown error"

    parts: list[str] = []
    for error in errors:
        if isinstance(error, dict) and "message" in error:
            code = error.get("code")
            message = str(error["message"])
            parts.append(f"[{code}] {message}" if code is not None else message)
        else:
            parts.append(str(error))
    return "; ".join(parts)
