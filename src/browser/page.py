"""Page wrapper over the active Playwright tab."""
import logging
from typing import Any

from playwright.async_api import Locator, Page as PlaywrightPage

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_TIMEOUT_MS: int = 30000


class Page:
    """Wrapper around Playwright Page with the actions the relay exposes."""

    def __init__(self, page: PlaywrightPage) -> None:
        """Initialize page wrapper.

        Args:
            page: Playwright Page instance.
        """
        self._page = page

    @property
    def url(self) -> str:
        """Get current page URL."""
        return self._page.url

    @property
    def raw(self) -> PlaywrightPage:
        """Access underlying Playwright page for advanced operations."""
        return self._page

    async def goto(
        self,
        url: str,
        wait_until: str = "domcontentloaded",
        timeout: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
    ) -> str:
        """Navigate and return the final URL once the DOM is loaded."""
        logger.info(f"Navigating to: {url}")
        await self._page.goto(url, wait_until=wait_until, timeout=timeout)
        return self._page.url

    async def click(self, selector: str, timeout: int) -> None:
        await self._page.click(selector, timeout=timeout)

    async def fill(self, selector: str, text: str) -> None:
        await self._page.fill(selector, text)

    async def press(self, key: str) -> None:
        """Press a key on the focused element."""
        await self._page.keyboard.press(key)

    def locator(self, selector: str) -> Locator:
        return self._page.locator(selector)

    async def wait_for_selector(self, selector: str, timeout: int) -> None:
        await self._page.wait_for_selector(selector, timeout=timeout)

    async def title(self) -> str:
        return await self._page.title()

    async def content(self) -> str:
        """Get page HTML content."""
        return await self._page.content()

    async def screenshot(self) -> bytes:
        """Take a PNG screenshot of the viewport."""
        return await self._page.screenshot(type="png")

    async def evaluate(self, expression: str) -> Any:
        return await self._page.evaluate(expression)

    async def snapshot(self) -> dict[str, str]:
        """Capture URL, title, and full HTML."""
        return {
            "url": self._page.url,
            "title": await self._page.title(),
            "html": await self._page.content(),
        }
