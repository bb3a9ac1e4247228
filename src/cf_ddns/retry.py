"""
Retry wrapper for network operations.

Both the IP lookup and the DNS record update run through `retry_operation`,
which retries every `NetworkOperationError` on a fixed exponential schedule.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TypeVar

from cf_ddns.errors import NetworkOperationError, RetryExhaustedError
from cf_ddns.models import DEFAULT_RETRY_POLICY

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from cf_ddns.models import RetryPolicy


T = TypeVar("T")

logger = logging.getLogger(__name__)


async def retry_operation(
    operation_name: str,
    action: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """
    Run a network action until it succeeds or the retry budget runs out.

    The action is awaited at most ``policy.max_retries + 1`` times. After
    the failed attempt ``i`` (zero-based) the next attempt waits
    ``policy.base_delay * 2**i`` seconds. Attempts never overlap.

    Parameters
    ----------
    operation_name : str
        Human-readable name used in the final error (e.g. "update DNS record").
    action : Callable[[], Awaitable[T]]
        Performs one network round trip. Raises a `NetworkOperationError`
        subclass on failure.
    policy : RetryPolicy, optional
        The backoff schedule.
    sleep : Callable[[float], Awaitable[object]], optional
        Awaitable delay function, `asyncio.sleep` by default.

    Returns
    -------
    T
        The result of the first successful attempt.

    Raises
    ------
    RetryExhaustedError
        If every attempt failed. The last error is chained as the cause.
    """
    last_error: NetworkOperationError | None = None

    for attempt in range(policy.total_attempts):
        try:
            return await action()
        except NetworkOperationError as e:
            last_error = e
            logger.debug("Attempt %d to %s failed: %s", attempt + 1, operation_name, e)

        if attempt < policy.max_retries:
            delay = policy.delay_for(attempt)
            logger.warning(
                "Retry attempt %d/%d in %g seconds... (%s)",
                attempt + 1,
                policy.max_retries,
                delay,
                last_error,
            )
            await sleep(delay)

    assert last_error is not None  # noqa: S101
    raise RetryExhaustedError(operation_name, policy.max_retries, last_error) from last_error
