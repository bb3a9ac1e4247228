"""
Update run for cf-ddns.

A run resolves the public IPv4 address, then the IPv6 address, then updates
the A record and finally the AAAA record. Steps run one after another and the
first failure aborts the run; records already updated are left in place.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, NamedTuple

import httpx

from cf_ddns.cloudflare import update_dns_record
from cf_ddns.errors import CFDDNSError, StepFailedError
from cf_ddns.models import DNSRecordSpec, IPFamily, RecordType
from cf_ddns.resolver import get_public_ip

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Final

    from cf_ddns.config import Config


# HTTP timeout in seconds, applied by httpx to connect and read
HTTP_TIMEOUT: Final[float] = 30.0


logger = logging.getLogger(__name__)


class UpdateSummary(NamedTuple):
    """Outcome of a completed run."""

    name: str
    ipv4: str
    ipv6: str


def build_record(config: Config, record_type: RecordType, content: str) -> DNSRecordSpec:
    """
    Build the record to send for one address.

    Parameters
    ----------
    config : Config
        Application configuration.
    record_type : RecordType
        A or AAAA.
    content : str
        The resolved address.

    Returns
    -------
    DNSRecordSpec
        The record.
    """
    return DNSRecordSpec(
        type=record_type,
        name=config.record.name,
        content=content,
        ttl=config.record.ttl,
        proxied=config.record.proxied,
        comment=config.record.comment,
    )


async def run_update(
    config: Config,
    *,
    client: httpx.AsyncClient | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    echo: Callable[[str], object] = print,
) -> UpdateSummary:
    """
    Resolve both addresses and update the A and AAAA records.

    Parameters
    ----------
    config : Config
        Application configuration with every required setting present.
    client : httpx.AsyncClient | None, optional
        HTTP client to use. A client is created (and closed) if None.
    sleep : Callable[[float], Awaitable[object]], optional
        Awaitable delay function used between retry attempts.
    echo : Callable[[str], object], optional
        Receives the console progress lines.

    Returns
    -------
    UpdateSummary
        The name and the two addresses written.

    Raises
    ------
    StepFailedError
        If any step fails. The original error is chained as the cause.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as own_client:
            return await run_update(config, client=own_client, sleep=sleep, echo=echo)

    cf = config.cloudflare
    addresses: dict[IPFamily, str] = {}

    for family in (IPFamily.IPV4, IPFamily.IPV6):
        echo(f"Fetching public {family} address...")
        try:
            addresses[family] = await get_public_ip(client, family, sleep=sleep)
        except CFDDNSError as e:
            raise StepFailedError(f"fetching {family}", e) from e
        echo(f"Got {family}: {addresses[family]}")

    echo("Updating Cloudflare DNS records...")
    record_ids = {
        IPFamily.IPV4: cf.record_id_v4,
        IPFamily.IPV6: cf.record_id_v6,
    }
    for family, record_id in record_ids.items():
        record = build_record(config, family.record_type, addresses[family])
        try:
            await update_dns_record(
                client,
                cf.zone_id,
                record_id,
                cf.api_token,
                record,
                sleep=sleep,
            )
        except CFDDNSError as e:
            raise StepFailedError(f"updating {record.type} record", e) from e
        echo(f"✓ {record.type} record updated successfully")

    return UpdateSummary(
        name=config.record.name,
        ipv4=addresses[IPFamily.IPV4],
        ipv6=addresses[IPFamily.IPV6],
    )
