"""HTTP surface of the browser relay."""
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from ..core.config import Settings
from ..core.errors import RelayError
from .models import (
    AddressRequest,
    ClickRequest,
    EvaluateRequest,
    NavigateRequest,
    PhoneAndMeetRequest,
    PickupDropoffRequest,
    SelectTabRequest,
    TypeRequest,
)
from .service import RelayService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[RelayService] = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Relay settings; read from the environment when omitted.
        service: Pre-built service, mainly for tests.
    """
    settings = settings or Settings()
    service = service or RelayService(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await service.shutdown()

    app = FastAPI(title="PantryRun Browser Relay", lifespan=lifespan)
    app.state.service = service
    commands = service.commands
    flows = service.flows

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc.message}")
        return JSONResponse(exc.to_payload(), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def body_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse({"error": f"Invalid request body: {exc.errors()}"}, status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"{request.method} {request.url.path} crashed")
        return JSONResponse({"error": str(exc)}, status_code=500)

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return commands.health()

    @app.get("/browser")
    async def browser_status() -> dict[str, Any]:
        return await commands.connection_status()

    @app.post("/navigate")
    async def navigate(body: Optional[NavigateRequest] = None) -> dict[str, Any]:
        body = body or NavigateRequest()
        async with service.exclusive():
            return await commands.navigate(body.url)

    @app.post("/click")
    async def click(body: Optional[ClickRequest] = None) -> dict[str, Any]:
        body = body or ClickRequest()
        async with service.exclusive():
            return await commands.click(body.selector)

    @app.post("/type")
    async def type_text(body: Optional[TypeRequest] = None) -> dict[str, Any]:
        body = body or TypeRequest()
        async with service.exclusive():
            return await commands.type_text(body.selector, body.text)

    @app.post("/pickup")
    async def pickup(body: Optional[AddressRequest] = None) -> dict[str, Any]:
        body = body or AddressRequest()
        async with service.exclusive():
            return await flows.pickup(body.address)

    @app.post("/dropoff")
    async def dropoff(body: Optional[AddressRequest] = None) -> dict[str, Any]:
        body = body or AddressRequest()
        async with service.exclusive():
            return await flows.dropoff(body.address)

    @app.post("/pickup-dropoff")
    async def pickup_dropoff(
        body: Optional[PickupDropoffRequest] = None,
    ) -> dict[str, Any]:
        body = body or PickupDropoffRequest()
        async with service.exclusive():
            return await flows.pickup_and_dropoff(body.pickup, body.dropoff)

    @app.post("/confirm-delivery")
    async def confirm_delivery() -> dict[str, Any]:
        async with service.exclusive():
            return await flows.confirm_delivery()

    @app.post("/phone-and-meet")
    async def phone_and_meet(
        body: Optional[PhoneAndMeetRequest] = None,
    ) -> dict[str, Any]:
        body = body or PhoneAndMeetRequest()
        async with service.exclusive():
            return await flows.phone_and_meet(body.phone, body.recipient)

    @app.get("/screenshot")
    async def screenshot() -> Response:
        async with service.exclusive():
            png = await commands.screenshot()
        return Response(content=png, media_type="image/png")

    @app.get("/content")
    async def content() -> Response:
        async with service.exclusive():
            html = await commands.content()
        return Response(content=html, media_type="text/html")

    @app.post("/evaluate")
    async def evaluate(body: Optional[EvaluateRequest] = None) -> dict[str, Any]:
        body = body or EvaluateRequest()
        async with service.exclusive():
            return await commands.evaluate(body.expression)

    @app.get("/pages")
    async def list_pages() -> dict[str, Any]:
        return await commands.list_tabs()

    @app.post("/pages/select")
    async def select_page(body: Optional[SelectTabRequest] = None) -> dict[str, Any]:
        body = body or SelectTabRequest()
        async with service.exclusive():
            return await commands.select_tab(body.index)

    return app
