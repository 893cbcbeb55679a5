"""Wires the connection, tabs, commands, and flows into one relay instance."""
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..browser.connection import BrowserConnection
from ..browser.tabs import TabManager
from ..core.config import Settings
from .commands import CommandDispatcher
from .flows import FlowEngine

logger = logging.getLogger(__name__)


class RelayService:
    """One browser session shared by every inbound request."""

    def __init__(
        self,
        settings: Settings,
        connection: Optional[BrowserConnection] = None,
    ) -> None:
        self.settings = settings
        self.connection = connection or BrowserConnection(
            cdp_endpoint=settings.cdp_endpoint,
            max_retries=settings.browser.connect_retries,
            retry_delay=settings.browser.retry_delay,
            probe_timeout=settings.browser.probe_timeout,
        )
        self.tabs = TabManager(self.connection)
        self.commands = CommandDispatcher(self.connection, self.tabs, settings.browser)
        self.flows = FlowEngine(
            self.connection,
            selectors=settings.selectors,
            flows=settings.flows,
            browser=settings.browser,
        )
        self._command_lock: Optional[asyncio.Lock] = (
            asyncio.Lock() if settings.serialize_commands else None
        )
        logger.info(
            f"Relay configured: endpoint={settings.cdp_endpoint or '<unset>'}, "
            f"selectors={settings.selectors.version}, "
            f"serialized={settings.serialize_commands}"
        )

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold the command lock when commands are serialized, else no-op."""
        if self._command_lock is None:
            yield
            return
        async with self._command_lock:
            yield

    async def shutdown(self) -> None:
        await self.connection.disconnect()
