"""Shared fixtures for cf-ddns tests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Any


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleep() -> RecordingSleep:
    """Create a recording sleep function."""
    return RecordingSleep()


@pytest.fixture
def run_with_handler() -> Callable[..., Any]:
    """
    Run an async function against an httpx client backed by a mock handler.

    The handler receives each `httpx.Request` and returns an `httpx.Response`
    or raises an `httpx.RequestError`.
    """

    def _run(
        handler: Callable[[httpx.Request], httpx.Response],
        func: Callable[[httpx.AsyncClient], Awaitable[Any]],
    ) -> Any:
        async def _main() -> Any:
            transport = httpx.MockTransport(handler)
            async with httpx.AsyncClient(transport=transport) as client:
                return await func(client)

        return asyncio.run(_main())

    return _run
