from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import CDP_ENDPOINT, FakePlaywrightFactory, make_browser, make_page
from src.browser.connection import BrowserConnection
from src.core.config import FlowConfig, Settings


@pytest.fixture(autouse=True)
def no_cdp_probe(monkeypatch: pytest.MonkeyPatch) -> AsyncMock:
    probe = AsyncMock()
    monkeypatch.setattr(BrowserConnection, "_probe_endpoint", probe)
    return probe


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("CDP_ENDPOINT", "PORT", "HOST", "LOG_LEVEL", "SERIALIZE_COMMANDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def tabs() -> list[MagicMock]:
    return [
        make_page("https://direct.uber.com/", "Uber Direct"),
        make_page("https://example.com/", "Example Domain"),
    ]


@pytest.fixture
def browser(tabs: list[MagicMock]) -> MagicMock:
    return make_browser(tabs)


@pytest.fixture
def factory(browser: MagicMock) -> FakePlaywrightFactory:
    return FakePlaywrightFactory(browser)


@pytest.fixture
def connection(factory: FakePlaywrightFactory) -> BrowserConnection:
    return BrowserConnection(CDP_ENDPOINT, playwright_factory=factory)


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(
        cdp_endpoint=CDP_ENDPOINT,
        flows=FlowConfig(
            pickup_settle_seconds=0,
            dropoff_settle_seconds=0,
            phone_settle_seconds=0,
            meet_settle_seconds=0,
            confirmation_wait_seconds=0,
        ),
    )
