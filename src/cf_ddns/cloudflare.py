"""
CloudFlare DNS record updater.

This module replaces an existing DNS record through the CloudFlare API v4.
Only API Token authentication is supported (not Global API Key).
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from cf_ddns.errors import DecodeError, ProviderRejectedError, TransportError
from cf_ddns.models import DEFAULT_RETRY_POLICY, ProviderResponse
from cf_ddns.retry import retry_operation

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Final

    from cf_ddns.models import DNSRecordSpec, RetryPolicy


# CloudFlare API base URL
CF_API_BASE: Final[str] = "https://api.cloudflare.com/client/v4"


logger = logging.getLogger(__name__)


def build_record_url(zone_id: str, record_id: str) -> str:
    """
    Build the URL of a DNS record.

    Parameters
    ----------
    zone_id : str
        The zone ID.
    record_id : str
        The DNS record ID.

    Returns
    -------
    str
        The record URL.
    """
    return f"{CF_API_BASE}/zones/{zone_id}/dns_records/{record_id}"


def build_headers(api_token: str) -> dict[str, str]:
    """
    Build request headers for the CloudFlare API.

    Parameters
    ----------
    api_token : str
        CloudFlare API Token.

    Returns
    -------
    dict[str, str]
        Request headers.
    """
    return {
        "Authorization": f"Bearer {api_token}",
        "Content-Type": "application/json",
    }


async def put_record_once(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str],
    record: DNSRecordSpec,
) -> ProviderResponse:
    """
    Send one PUT request replacing a DNS record.

    The HTTP status is only logged; CloudFlare reports failures through
    the ``success`` flag of the response body.

    Parameters
    ----------
    client : httpx.AsyncClient
        HTTP client.
    url : str
        The record URL.
    headers : dict[str, str]
        Request headers.
    record : DNSRecordSpec
        The record to store.

    Returns
    -------
    ProviderResponse
        The decoded response with ``success`` set.

    Raises
    ------
    TransportError
        If the request could not be completed.
    DecodeError
        If the body is not a CloudFlare response envelope.
    ProviderRejectedError
        If CloudFlare answered with ``success: false``.
    """
    try:
        response = await client.put(
            url,
            headers=headers,
            content=record.model_dump_json(),
        )
    except httpx.RequestError as e:
        raise TransportError(str(e) or type(e).__name__) from e

    logger.debug("[cloudflare] PUT %s -> %d", url, response.status_code)
    logger.debug("[cloudflare] Response: %s", response.text)

    try:
        data = ProviderResponse.model_validate_json(response.content)
    except ValidationError as e:
        msg = f"failed to decode Cloudflare response: {e}"
        raise DecodeError(msg) from e

    if not data.success:
        raise ProviderRejectedError(data.errors)

    return data


async def update_dns_record(
    client: httpx.AsyncClient,
    zone_id: str,
    record_id: str,
    api_token: str,
    record: DNSRecordSpec,
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> ProviderResponse:
    """
    Replace an existing DNS record in CloudFlare, with retries.

    The record is always sent, even if CloudFlare already holds the same
    content. The record ID must exist and match the record type.

    Parameters
    ----------
    client : httpx.AsyncClient
        HTTP client.
    zone_id : str
        The zone ID.
    record_id : str
        The DNS record ID.
    api_token : str
        CloudFlare API Token.
    record : DNSRecordSpec
        The record to store.
    policy : RetryPolicy, optional
        The backoff schedule.
    sleep : Callable[[float], Awaitable[object]], optional
        Awaitable delay function used between attempts.

    Returns
    -------
    ProviderResponse
        The successful CloudFlare response.

    Raises
    ------
    RetryExhaustedError
        If every attempt failed.
    """
    url = build_record_url(zone_id, record_id)
    headers = build_headers(api_token)

    logger.info(
        "[cloudflare] Updating %s record %s to %s",
        record.type,
        record.name,
        record.content,
    )

    response = await retry_operation(
        "update DNS record",
        lambda: put_record_once(client, url, headers, record),
        policy=policy,
        sleep=sleep,
    )

    logger.info("[cloudflare] %s record %s updated", record.type, record.name)
    return response
