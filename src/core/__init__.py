"""Core utilities: configuration, errors, and logging."""
from .config import BrowserConfig, FlowConfig, SelectorTable, Settings
from .errors import (
    BrowserConnectionError,
    CommandError,
    ConfigurationError,
    InvalidRequestError,
    RelayError,
)
from .logging import setup_logging

__all__ = [
    "Settings",
    "BrowserConfig",
    "FlowConfig",
    "SelectorTable",
    "RelayError",
    "ConfigurationError",
    "BrowserConnectionError",
    "InvalidRequestError",
    "CommandError",
    "setup_logging",
]
