"""Browser relay: commands, scripted flows, and the HTTP surface."""
from .client import RelayClient, RelayClientError
from .commands import CommandDispatcher
from .flows import FlowEngine, normalize_phone
from .server import create_app
from .service import RelayService

__all__ = [
    "CommandDispatcher",
    "FlowEngine",
    "RelayClient",
    "RelayClientError",
    "RelayService",
    "create_app",
    "normalize_phone",
]
