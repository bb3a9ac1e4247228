"""
Public IP address discovery.

The address is looked up through the ipify echo service, which answers
``{"ip": "<address>"}``. The returned string is used verbatim.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError
from starlette import status as st_status

from cf_ddns.errors import DecodeError, TransportError, UnexpectedStatusError
from cf_ddns.models import DEFAULT_RETRY_POLICY, IPFamily, IPResponse
from cf_ddns.retry import retry_operation

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Final

    from cf_ddns.models import RetryPolicy


# Echo endpoints per address family. The IPv6 one is dual stack and only
# answers with an IPv6 address when reached over IPv6.
IP_ECHO_URLS: Final[dict[IPFamily, str]] = {
    IPFamily.IPV4: "https://api.ipify.org/?format=json",
    IPFamily.IPV6: "https://api64.ipify.org/?format=json",
}


logger = logging.getLogger(__name__)


async def fetch_ip_once(client: httpx.AsyncClient, url: str) -> str:
    """
    Query an IP echo endpoint once.

    Parameters
    ----------
    client : httpx.AsyncClient
        HTTP client.
    url : str
        The echo endpoint.

    Returns
    -------
    str
        The address reported by the service.

    Raises
    ------
    TransportError
        If the request could not be completed.
    UnexpectedStatusError
        If the status code is not 200.
    DecodeError
        If the body is not ``{"ip": "<non-empty string>"}``.
    """
    try:
        response = await client.get(url)
    except httpx.RequestError as e:
        raise TransportError(str(e) or type(e).__name__) from e

    logger.debug("GET %s -> %d", url, response.status_code)

    if response.status_code != st_status.HTTP_200_OK:
        raise UnexpectedStatusError(response.status_code, url)

    try:
        return IPResponse.model_validate_json(response.content).ip
    except ValidationError as e:
        msg = f"failed to decode IP response: {e}"
        raise DecodeError(msg) from e


async def get_public_ip(
    client: httpx.AsyncClient,
    family: IPFamily,
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> str:
    """
    Resolve the public address of the given family, with retries.

    Parameters
    ----------
    client : httpx.AsyncClient
        HTTP client.
    family : IPFamily
        Address family to resolve.
    policy : RetryPolicy, optional
        The backoff schedule.
    sleep : Callable[[float], Awaitable[object]], optional
        Awaitable delay function used between attempts.

    Returns
    -------
    str
        The public address, exactly as reported by the echo service.

    Raises
    ------
    RetryExhaustedError
        If every attempt failed.
    """
    url = IP_ECHO_URLS[family]
    logger.info("Looking up public %s address via %s", family, url)

    ip = await retry_operation(
        f"fetch IP from {url}",
        lambda: fetch_ip_once(client, url),
        policy=policy,
        sleep=sleep,
    )

    logger.info("Discovered %s address %s", family, ip)
    return ip

