"""Fakes standing in for Playwright's async browser objects."""
from __future__ import annotations

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

CDP_ENDPOINT = "http://127.0.0.1:9222"
def make_page(url: str = "about:blank", title: str = "", closed: bool = False) -> MagicMock:
    page = MagicMock(name=f"page:{url}")
    page.url = url
    page.title = AsyncMock(return_value=title)
    page.is_closed = MagicMock(return_value=closed)

    def goto(target: str, **kwargs: object) -> None:
        # Chrome normalizes bare origins with a trailing slash.
        page.url = target if target.count("/") > 2 else f"{target}/"

    page.goto = AsyncMock(side_effect=goto)
    page.click = AsyncMock()
    page.fill = AsyncMock()
    page.keyboard.press = AsyncMock()
    page.screenshot = AsyncMock(return_value=b"\x89PNG\r\n\x1a\nfake")
    page.content = AsyncMock(return_value=f"<html><body>{title}</body></html>")
    page.evaluate = AsyncMock()
    page.wait_for_selector = AsyncMock()
    return page


def make_browser(pages: Optional[list[MagicMock]] = None, with_context: bool = True) -> MagicMock:
    browser = MagicMock(name="browser")
    browser.is_connected = MagicMock(return_value=True)

    context = MagicMock(name="context")
    context.pages = list(pages or [])
    created_page = make_page()
    context.new_page = AsyncMock(side_effect=lambda: context.pages.append(created_page) or created_page)

    browser.contexts = [context] if with_context else []
    browser.new_context = AsyncMock(side_effect=lambda: browser.contexts.append(context) or context)
    return browser


class FakePlaywrightFactory:
    """Mimics ``async_playwright`` and counts driver starts."""

    def __init__(self, browser: MagicMock) -> None:
        self.browser = browser
        self.playwright = MagicMock(name="playwright")
        self.playwright.chromium.connect_over_cdp = AsyncMock(return_value=browser)
        self.playwright.stop = AsyncMock()
        self.starts = 0

    def __call__(self) -> MagicMock:
        self.starts += 1
        handle = MagicMock()
        handle.start = AsyncMock(return_value=self.playwright)
        return handle
