"""Tests for the application-side relay client."""
from __future__ import annotations

import json

import httpx
import pytest

from src.relay.client import RelayClient, RelayClientError

RELAY_URL = "https://relay.example.ngrok.app/"


def make_client(handler) -> RelayClient:
    return RelayClient(RELAY_URL, transport=httpx.MockTransport(handler))


def test_content_is_wrapped_as_html_field() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/content"
        return httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"})

    assert make_client(handler).content() == {"html": "<html>ok</html>"}


def test_post_forwards_json_body() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["body"] = request.read()
        return httpx.Response(200, json={"ok": True, "selected": "Courier"})

    result = make_client(handler).confirm_delivery()

    assert result == {"ok": True, "selected": "Courier"}
    assert seen == {"method": "POST", "path": "/confirm-delivery", "body": b"{}"}


def test_optional_fields_are_omitted() -> None:
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.read()))
        return httpx.Response(200, json={"ok": True})

    make_client(handler).pickup_dropoff(pickup="A St")

    assert bodies == [{"pickup": "A St"}]


def test_screenshot_returns_bytes() -> None:
    png = b"\x89PNG\r\n\x1a\n"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=png, headers={"content-type": "image/png"})

    client = make_client(handler)

    assert client.screenshot() == png
    assert client.request("GET", "/screenshot") == png


def test_relay_error_keeps_status_and_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "Invalid index", "max": 1})

    with pytest.raises(RelayClientError) as exc_info:
        make_client(handler).request("POST", "pages/select", {"index": 5})

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid index"


def test_non_json_error_uses_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="ngrok tunnel offline")

    with pytest.raises(RelayClientError, match="ngrok tunnel offline"):
        make_client(handler).navigate("https://example.com")


def test_unreachable_relay_is_502() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RelayClientError) as exc_info:
        make_client(handler).phone_and_meet()

    assert exc_info.value.status_code == 502


def test_missing_base_url_is_500() -> None:
    with pytest.raises(RelayClientError) as exc_info:
        RelayClient(None).content()

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "Relay URL not configured"


def test_missing_path_is_400() -> None:
    with pytest.raises(RelayClientError) as exc_info:
        RelayClient(RELAY_URL).request("GET", "/")

    assert exc_info.value.status_code == 400
