"""Browser automation: CDP connection, page wrapper, and tab management."""
from .connection import BrowserConnection, BrowserSession, ConnectionState
from .launcher import ChromeLauncher
from .page import Page
from .tabs import TabInfo, TabManager

__all__ = [
    "BrowserConnection",
    "BrowserSession",
    "ConnectionState",
    "ChromeLauncher",
    "Page",
    "TabInfo",
    "TabManager",
]
