"""
Data models for cf-ddns.

This module defines the address families, the DNS record sent to Cloudflare,
the response bodies read back from the network and the retry policy.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator


class IPFamily(StrEnum):
    """
    Address families that can be resolved.

    Attributes
    ----------
    IPV4 : str
        IPv4 address family.
    IPV6 : str
        IPv6 address family.
    """

    IPV4 = "IPv4"
    IPV6 = "IPv6"

    @property
    def record_type(self) -> RecordType:
        """Get the DNS record type that holds addresses of this family."""
        return RecordType.A if self is IPFamily.IPV4 else RecordType.AAAA


class RecordType(StrEnum):
    """
    Supported DNS record types.

    Attributes
    ----------
    A : str
        IPv4 address record.
    AAAA : str
        IPv6 address record.
    """

    A = "A"
    AAAA = "AAAA"


class DNSRecordSpec(BaseModel):
    """
    A DNS record as sent to the Cloudflare API.

    Attributes
    ----------
    type : RecordType
        The record type (A or AAAA).
    name : str
        The record name (e.g., "home.example.com").
    content : str
        The address, exactly as returned by the IP echo service.
    ttl : int
        Time to live in seconds; 1 means automatic.
    proxied : bool
        Whether traffic is proxied through Cloudflare.
    comment : str
        Record comment, may be empty.
    """

    model_config = ConfigDict(frozen=True)

    type: RecordType
    name: str = Field(..., min_length=1, description="DNS record name")
    content: str
    ttl: int = Field(default=1, ge=1, description="TTL in seconds, 1 for automatic")
    proxied: bool = True
    comment: str = ""


class IPResponse(BaseModel):
    """
    Response body of the IP echo service.

    Attributes
    ----------
    ip : str
        The caller's public address.
    """

    ip: str = Field(..., min_length=1)


class ProviderResponse(BaseModel):
    """
    Response envelope of the Cloudflare API.

    Attributes
    ----------
    success : bool
        Whether the provider accepted the request.
    errors : list[Any]
        Provider error descriptors.
    result : Any
        The provider payload (the stored record on success).
    """

    success: StrictBool = False
    errors: list[Any] = Field(default_factory=list)
    result: Any = None

    @field_validator("errors", mode="before")
    @classmethod
    def null_errors_as_empty(cls, value: Any) -> Any:  # noqa: ANN401
        """Read ``"errors": null`` as an empty list."""
        return [] if value is None else value


class RetryPolicy(BaseModel):
    """
    Fixed exponential backoff schedule.

    Attributes
    ----------
    max_retries : int
        Retries after the first attempt.
    base_delay : float
        Delay in seconds before the first retry; doubled for each retry after.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=5, ge=0)
    base_delay: float = Field(default=5.0, ge=0)

    @property
    def total_attempts(self) -> int:
        """Get the total number of attempts, including the first one."""
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """
        Get the delay to wait after a failed attempt.

        Parameters
        ----------
        attempt : int
            Zero-based index of the failed attempt.

        Returns
        -------
        float
            Delay in seconds.
        """
        return self.base_delay * 2**attempt


DEFAULT_RETRY_POLICY = RetryPolicy()
