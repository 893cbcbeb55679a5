"""Single-action commands against the active tab."""
import json
import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ..browser.connection import BrowserConnection
from ..browser.tabs import TabManager
from ..core.config import BrowserConfig
from ..core.errors import CommandError, InvalidRequestError, RelayError

logger = logging.getLogger(__name__)

HEALTH_MESSAGE = "pantryrun relay running"


@contextmanager
def command_errors(name: str) -> Iterator[None]:
    """Convert browser failures raised inside the block into CommandError."""
    try:
        yield
    except RelayError:
        raise
    except Exception as e:
        logger.error(f"{name} failed: {e}")
        raise CommandError(str(e)) from e


def require(value: Optional[str], field: str) -> str:
    """Return ``value`` or raise the relay's missing-field error."""
    if not value:
        raise InvalidRequestError(f"Missing {field} in body")
    return value


class CommandDispatcher:
    """Stateless commands that each perform one browser interaction."""

    def __init__(
        self,
        connection: BrowserConnection,
        tabs: TabManager,
        config: Optional[BrowserConfig] = None,
    ) -> None:
        self._connection = connection
        self._tabs = tabs
        self._config = config or BrowserConfig()

    def health(self) -> dict[str, Any]:
        return {"ok": True, "message": HEALTH_MESSAGE}

    async def connection_status(self) -> dict[str, Any]:
        """Report whether a browser is attached and what the active tab shows."""
        try:
            if not self._connection.is_connected:
                return {"connected": False, "message": "No browser attached"}
            url = ""
            title = ""
            page = self._connection.session.page
            if page is not None and not page.is_closed():
                url = page.url
                title = await page.title()
            return {"connected": True, "url": url, "title": title}
        except Exception as e:
            return {"connected": False, "error": str(e)}

    async def navigate(self, url: Optional[str]) -> dict[str, Any]:
        target = require(url, "url")
        with command_errors("navigate"):
            page = await self._connection.active_page()
            final_url = await page.goto(
                target, timeout=self._config.navigation_timeout_ms
            )
        return {"ok": True, "url": final_url}

    async def click(self, selector: Optional[str]) -> dict[str, Any]:
        target = require(selector, "selector")
        with command_errors("click"):
            page = await self._connection.active_page()
            logger.info(f"Clicking {target}")
            await page.click(target, timeout=self._config.click_timeout_ms)
        return {"ok": True}

    async def type_text(self, selector: Optional[str], text: Optional[str] = None) -> dict[str, Any]:
        target = require(selector, "selector")
        with command_errors("type"):
            page = await self._connection.active_page()
            await page.fill(target, text if text is not None else "")
        return {"ok": True}

    async def screenshot(self) -> bytes:
        with command_errors("screenshot"):
            page = await self._connection.active_page()
            return await page.screenshot()

    async def content(self) -> str:
        with command_errors("content"):
            page = await self._connection.active_page()
            return await page.content()

    async def evaluate(self, expression: Optional[str]) -> dict[str, Any]:
        script = require(expression, "expression")
        with command_errors("evaluate"):
            page = await self._connection.active_page()
            result = await page.evaluate(script)
            try:
                json.dumps(result)
            except (TypeError, ValueError) as e:
                raise CommandError(f"Result is not JSON-serializable: {e}") from e
        return {"ok": True, "result": result}

    async def list_tabs(self) -> dict[str, Any]:
        with command_errors("pages"):
            await self._connection.ensure_connected()
            tabs = await self._tabs.list_tabs()
        return {"ok": True, "pages": [tab.to_dict() for tab in tabs]}

    async def select_tab(self, index: Any) -> dict[str, Any]:
        with command_errors("pages/select"):
            await self._connection.ensure_connected()
            url = self._tabs.select_tab(index)
        return {"ok": True, "url": url}
