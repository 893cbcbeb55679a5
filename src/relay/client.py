"""Client for the relay, used by the application's local proxy."""
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# phone-and-meet alone waits ~30s for the order to settle.
DEFAULT_TIMEOUT_SECONDS: float = 90.0


class RelayClientError(Exception):
    """A relay call failed. ``status_code`` is 502 when the relay was unreachable."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class RelayClient:
    """Forwards automation calls to a relay exposed at ``base_url``."""

    def __init__(
        self,
        base_url: Optional[str],
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _send(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> httpx.Response:
        if not self.base_url:
            raise RelayClientError(500, "Relay URL not configured")
        path = path.strip("/")
        if not path:
            raise RelayClientError(400, "Missing relay path")

        url = f"{self.base_url}/{path}"
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                if method.upper() == "GET":
                    response = client.request(method, url)
                else:
                    response = client.request(method, url, json=json or {})
        except httpx.HTTPError as e:
            logger.warning(f"Relay unreachable at {url}: {e}")
            raise RelayClientError(502, str(e) or "Request failed") from e

        if response.is_error:
            raise RelayClientError(response.status_code, _error_message(response))
        return response

    def request(self, method: str, path: str, json: Optional[dict[str, Any]] = None) -> Any:
        """Call a relay route and decode its body.

        Returns:
            Decoded JSON for JSON responses, the raw bytes for images,
            and text otherwise.
        """
        response = self._send(method, path, json)
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            return response.json()
        if content_type.startswith("image/") or "application/octet-stream" in content_type:
            return response.content
        return response.text

    def content(self) -> dict[str, str]:
        """Active page HTML wrapped as ``{"html": ...}``."""
        return {"html": self._send("GET", "content").text}

    def screenshot(self) -> bytes:
        return self._send("GET", "screenshot").content

    def navigate(self, url: str) -> dict[str, Any]:
        return self.request("POST", "navigate", {"url": url})

    def pickup_dropoff(self, pickup: Optional[str] = None, dropoff: Optional[str] = None) -> dict[str, Any]:
        body = {k: v for k, v in {"pickup": pickup, "dropoff": dropoff}.items() if v}
        return self.request("POST", "pickup-dropoff", body)

    def confirm_delivery(self) -> dict[str, Any]:
        return self.request("POST", "confirm-delivery", {})

    def phone_and_meet(self, phone: Optional[str] = None, recipient: Optional[str] = None) -> dict[str, Any]:
        body = {k: v for k, v in {"phone": phone, "recipient": recipient}.items() if v}
        return self.request("POST", "phone-and-meet", body)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("error"):
        return str(data["error"])
    return response.text or f"Request failed: {response.status_code}"
