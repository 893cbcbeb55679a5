"""Launch Chrome with remote debugging enabled."""
import logging
import shutil
import subprocess
import sys
import time
from typing import Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_CDP_PORT: int = 9222
CHROME_BINARIES: list[str] = [
    "google-chrome",
    "google-chrome-stable",
    "chromium",
    "chromium-browser",
    "chrome",
]
WINDOWS_CHROME_PATH = r"C:\Program Files\Google\Chrome\Application\chrome.exe"


class ChromeLauncher:
    """Starts a Chrome instance exposing a CDP endpoint."""

    def __init__(self, port: int = DEFAULT_CDP_PORT, platform: str = sys.platform) -> None:
        self.port = port
        self.platform = platform

    @property
    def endpoint(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def build_command(self) -> list[str]:
        """Build the platform-specific launch command.

        Raises:
            FileNotFoundError: If no Chrome binary can be found.
        """
        flag = f"--remote-debugging-port={self.port}"
        if self.platform == "darwin":
            # -n forces a new instance so the debug port is honoured.
            return ["open", "-n", "-a", "Google Chrome", "--args", flag]
        if self.platform.startswith("win"):
            return [WINDOWS_CHROME_PATH, flag]

        for name in CHROME_BINARIES:
            path = shutil.which(name)
            if path:
                return [path, flag]
        raise FileNotFoundError(
            f"No Chrome binary found on PATH (tried {', '.join(CHROME_BINARIES)})"
        )

    def launch(self) -> subprocess.Popen:
        """Spawn Chrome detached from the relay process."""
        command = self.build_command()
        logger.info(f"Launching Chrome with remote debugging on port {self.port}")
        return subprocess.Popen(
            command,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )

    def is_ready(self) -> bool:
        """Check whether the CDP endpoint answers."""
        try:
            response = httpx.get(f"{self.endpoint}/json/version", timeout=2.0)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.debug(f"CDP not ready: {e}")
            return False

    def wait_until_ready(self, timeout: float = 15.0, interval: float = 0.5) -> bool:
        """Poll the endpoint until it answers or ``timeout`` elapses.

        Returns:
            True if Chrome is accepting CDP connections.
        """
        deadline = time.monotonic() + timeout
        while True:
            if self.is_ready():
                logger.info(f"Chrome debug endpoint ready at {self.endpoint}")
                return True
            if time.monotonic() >= deadline:
                logger.error(f"Chrome did not open {self.endpoint} within {timeout:.0f}s")
                return False
            time.sleep(interval)

    def start(self, timeout: float = 15.0) -> Optional[str]:
        """Launch Chrome unless already running, then wait for the endpoint.

        Returns:
            The CDP endpoint, or None if Chrome never became ready.
        """
        if self.is_ready():
            logger.info(f"Chrome already listening on {self.endpoint}")
            return self.endpoint
        self.launch()
        return self.endpoint if self.wait_until_ready(timeout) else None
