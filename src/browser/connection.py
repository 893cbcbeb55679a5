"""Chrome CDP connection management."""
import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Optional

import httpx
from playwright.async_api import Browser, BrowserContext, Page as PlaywrightPage
from playwright.async_api import Playwright, async_playwright

from ..core.errors import BrowserConnectionError, ConfigurationError
from .page import Page

logger = logging.getLogger(__name__)

MAX_RETRY_DELAY_SECONDS: float = 30.0

CONFIG_REMEDIATION = (
    "CDP_ENDPOINT required. Start Chrome with --remote-debugging-port=9222 "
    "then run with CDP_ENDPOINT=http://127.0.0.1:9222"
)
CONNECT_REMEDIATION = (
    "Start Chrome with: google-chrome --remote-debugging-port=9222 "
    "(or run main.py --launch-chrome)"
)


class ConnectionState(Enum):
    """Lifecycle of the browser connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class BrowserSession:
    """The live browser handle, its first context, and the active tab."""

    def __init__(self) -> None:
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[PlaywrightPage] = None

    @property
    def is_connected(self) -> bool:
        return self.browser is not None and self.browser.is_connected()

    def pages(self) -> list[PlaywrightPage]:
        """Tabs of the first context, or an empty list when not connected."""
        if not self.is_connected:
            return []
        contexts = self.browser.contexts
        return list(contexts[0].pages) if contexts else []

    def reset(self) -> None:
        self.browser = None
        self.context = None
        self.page = None


class BrowserConnection:
    """Owns the single CDP connection and reconnects lazily on demand."""

    def __init__(
        self,
        cdp_endpoint: Optional[str],
        max_retries: int = 1,
        retry_delay: float = 2.0,
        probe_timeout: float = 5.0,
        playwright_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        """Initialize browser connection settings.

        Args:
            cdp_endpoint: Chrome DevTools Protocol endpoint, e.g.
                ``http://127.0.0.1:9222``. May be None; the error is raised
                on first use, not here.
            max_retries: Maximum connection attempts per ensure call.
            retry_delay: Base delay between retries in seconds.
            probe_timeout: Timeout for the ``/json/version`` probe.
            playwright_factory: Callable returning an object whose
                ``start()`` coroutine yields a Playwright instance.
        """
        self.cdp_endpoint = cdp_endpoint
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay
        self.probe_timeout = probe_timeout
        self.session = BrowserSession()
        self._playwright_factory = playwright_factory
        self._playwright: Optional[Playwright] = None
        self._state = ConnectionState.DISCONNECTED
        self._lock = asyncio.Lock()

    @property
    def state(self) -> ConnectionState:
        """Current state, demoted to DISCONNECTED if the browser went away."""
        if self._state == ConnectionState.CONNECTED and not self.session.is_connected:
            logger.warning("Browser reported disconnected")
            self._state = ConnectionState.DISCONNECTED
        return self._state

    @property
    def is_connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED

    async def ensure_connected(self) -> BrowserSession:
        """Return a connected session, connecting first if needed.

        Concurrent callers share a single connect attempt.

        Raises:
            ConfigurationError: If no CDP endpoint is configured.
            BrowserConnectionError: If Chrome cannot be reached.
        """
        if self.is_connected:
            return self.session

        async with self._lock:
            if self.is_connected:
                return self.session
            if not self.cdp_endpoint:
                raise ConfigurationError(CONFIG_REMEDIATION)

            self._state = ConnectionState.CONNECTING
            try:
                await self._connect_with_retry()
            except BaseException:
                self._state = ConnectionState.DISCONNECTED
                raise
            self._state = ConnectionState.CONNECTED
            return self.session

    async def active_page(self) -> Page:
        """Connect if needed and return the active tab.

        Raises:
            BrowserConnectionError: If the active tab has been closed.
        """
        session = await self.ensure_connected()
        if session.page is None or session.page.is_closed():
            raise BrowserConnectionError(
                "Active tab is closed. Select another tab via /pages/select"
            )
        return Page(session.page)

    async def _connect_with_retry(self) -> None:
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                await self._connect()
                return
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Attempt {attempt + 1}/{self.max_retries}: "
                    f"connection to {self.cdp_endpoint} failed: {e}"
                )
                await self._cleanup()
                if attempt < self.max_retries - 1:
                    wait_time = min(
                        self.retry_delay * (2**attempt), MAX_RETRY_DELAY_SECONDS
                    )
                    await asyncio.sleep(wait_time)

        logger.error(f"Failed to connect to Chrome at {self.cdp_endpoint}")
        raise BrowserConnectionError(
            f"Could not connect to Chrome at {self.cdp_endpoint}. "
            f"{CONNECT_REMEDIATION} - {last_error}"
        )

    async def _connect(self) -> None:
        # Drop the driver left behind by a browser that went away.
        await self._cleanup()
        await self._probe_endpoint()

        self._playwright = await self._playwright_factory().start()
        browser = await self._playwright.chromium.connect_over_cdp(self.cdp_endpoint)

        contexts = browser.contexts
        context = contexts[0] if contexts else await browser.new_context()
        pages = context.pages
        page = pages[0] if pages else await context.new_page()

        self.session.browser = browser
        self.session.context = context
        self.session.page = page
        logger.info(f"Connected to Chrome at {self.cdp_endpoint} ({len(pages)} tabs)")

    async def _probe_endpoint(self) -> None:
        """Verify the CDP endpoint answers before handing it to Playwright."""
        if not self.cdp_endpoint.startswith(("http://", "https://")):
            return
        url = f"{self.cdp_endpoint.rstrip('/')}/json/version"
        async with httpx.AsyncClient(timeout=self.probe_timeout) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
        logger.debug(f"CDP ready: {data.get('Browser', 'unknown')}")

    async def _cleanup(self) -> None:
        """Clean up playwright resources."""
        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"Playwright stop failed: {e}")
        self._playwright = None
        self.session.reset()

    async def disconnect(self) -> None:
        """Release the connection. The browser itself keeps running."""
        if self._playwright:
            logger.info("Disconnecting from Chrome")
        await self._cleanup()
        self._state = ConnectionState.DISCONNECTED
