"""Tests for command serialization in the relay service."""
from __future__ import annotations

import asyncio

from src.browser.connection import BrowserConnection
from src.core.config import BrowserConfig, Settings
from src.relay.service import RelayService


async def _run_pair(service: RelayService) -> list[str]:
    order: list[str] = []

    async def command(name: str) -> None:
        async with service.exclusive():
            order.append(f"{name}:start")
            await asyncio.sleep(0.01)
            order.append(f"{name}:end")

    await asyncio.gather(command("a"), command("b"))
    return order


def test_commands_interleave_by_default(connection: BrowserConnection) -> None:
    service = RelayService(Settings(cdp_endpoint="http://127.0.0.1:9222"), connection=connection)

    order = asyncio.run(_run_pair(service))

    assert order == ["a:start", "b:start", "a:end", "b:end"]


def test_serialized_commands_run_one_at_a_time(connection: BrowserConnection) -> None:
    settings = Settings(cdp_endpoint="http://127.0.0.1:9222", serialize_commands=True)
    service = RelayService(settings, connection=connection)

    order = asyncio.run(_run_pair(service))

    assert order == ["a:start", "a:end", "b:start", "b:end"]


def test_service_builds_its_own_connection() -> None:
    settings = Settings(
        cdp_endpoint="http://127.0.0.1:9444", browser=BrowserConfig(connect_retries=3)
    )

    service = RelayService(settings)

    assert service.connection.cdp_endpoint == "http://127.0.0.1:9444"
    assert service.connection.max_retries == 3
    assert service.flows.selectors is settings.selectors
