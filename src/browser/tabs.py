"""Multi-tab management."""
import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

from ..core.errors import InvalidRequestError
from .connection import BrowserConnection

logger = logging.getLogger(__name__)


@dataclass
class TabInfo:
    """One tab of the controlled context."""

    index: int
    url: str
    title: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class TabManager:
    """Enumerates tabs and switches the active one."""

    def __init__(self, connection: BrowserConnection) -> None:
        """Initialize tab manager.

        Args:
            connection: Connection whose session holds the active tab.
        """
        self._connection = connection

    async def list_tabs(self) -> list[TabInfo]:
        """List tabs of the first context.

        Returns:
            Tabs in context order; empty when no browser is attached.
        """
        pages = self._connection.session.pages()
        titles = await asyncio.gather(*(p.title() for p in pages))
        return [
            TabInfo(index=i, url=p.url, title=title)
            for i, (p, title) in enumerate(zip(pages, titles))
        ]

    def select_tab(self, index: Any) -> str:
        """Make the tab at ``index`` the active one.

        Args:
            index: 0-based position in the tab list.

        Returns:
            URL of the newly active tab.

        Raises:
            InvalidRequestError: If the index is missing or out of range.
                The active tab is left unchanged.
        """
        pages = self._connection.session.pages()
        valid = (
            isinstance(index, int)
            and not isinstance(index, bool)
            and 0 <= index < len(pages)
        )
        if not valid:
            raise InvalidRequestError("Invalid index", max=len(pages) - 1)

        page = pages[index]
        self._connection.session.page = page
        logger.info(f"Active tab set to #{index}: {page.url}")
        return page.url
