"""Scripted delivery-site flows.

Each flow chains primitive actions with fixed settle delays so the site's
typeahead dropdowns and transitions finish before the next step. Flows do
not roll back: a failure leaves earlier steps applied.
"""
import asyncio
import logging
import re
from typing import Any, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..browser.connection import BrowserConnection
from ..browser.page import Page
from ..core.config import BrowserConfig, FlowConfig, SelectorTable
from .commands import command_errors

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
US_COUNTRY_CODE = "1"


def normalize_phone(value: Any) -> str:
    """Reduce a phone number to the national digits the site expects.

    ``+1 (571) 386-9946`` becomes ``5713869946``. The phone field has its own
    country selector, so a leading US country code is dropped.
    """
    digits = _NON_DIGITS.sub("", str(value))
    if len(digits) == 11 and digits.startswith(US_COUNTRY_CODE):
        return digits[1:]
    return digits


class FlowEngine:
    """Fixed multi-step sequences against the delivery site."""

    def __init__(
        self,
        connection: BrowserConnection,
        selectors: Optional[SelectorTable] = None,
        flows: Optional[FlowConfig] = None,
        browser: Optional[BrowserConfig] = None,
    ) -> None:
        self._connection = connection
        self.selectors = selectors or SelectorTable()
        self.flows = flows or FlowConfig()
        self.browser = browser or BrowserConfig()

    async def fill_address_and_enter(self, page: Page, selector: str, address: str) -> None:
        """Type an address and accept the site's first autocomplete entry."""
        await page.click(selector, timeout=self.browser.click_timeout_ms)
        await page.fill(selector, address)
        await page.press("Enter")

    async def pickup(self, address: Optional[str] = None) -> dict[str, Any]:
        address = address or self.flows.default_pickup
        with command_errors("pickup"):
            page = await self._connection.active_page()
            await self.fill_address_and_enter(page, self.selectors.pickup_input, address)
        return {"ok": True, "address": address}

    async def dropoff(self, address: Optional[str] = None) -> dict[str, Any]:
        address = address or self.flows.default_dropoff
        with command_errors("dropoff"):
            page = await self._connection.active_page()
            await self.fill_address_and_enter(page, self.selectors.dropoff_input, address)
        return {"ok": True, "address": address}

    async def pickup_and_dropoff(
        self, pickup: Optional[str] = None, dropoff: Optional[str] = None
    ) -> dict[str, Any]:
        """Enter both addresses and submit the route search."""
        pickup = pickup or self.flows.default_pickup
        dropoff = dropoff or self.flows.default_dropoff
        with command_errors("pickup-dropoff"):
            page = await self._connection.active_page()
            logger.info(f"Route: {pickup} -> {dropoff}")
            await self.fill_address_and_enter(page, self.selectors.pickup_input, pickup)
            await asyncio.sleep(self.flows.pickup_settle_seconds)
            await self.fill_address_and_enter(page, self.selectors.dropoff_input, dropoff)
            # Route computation
            await asyncio.sleep(self.flows.dropoff_settle_seconds)
            await page.click(
                self.selectors.search_button, timeout=self.browser.action_timeout_ms
            )
        return {"ok": True, "pickup": pickup, "dropoff": dropoff}

    async def confirm_delivery(self) -> dict[str, Any]:
        """Pick the Courier row in the product selector."""
        courier = self.selectors.courier_text
        with command_errors("confirm-delivery"):
            page = await self._connection.active_page()
            option = (
                page.locator(self.selectors.product_option)
                .filter(has_text=courier)
                .first
            )
            await option.click(timeout=self.browser.action_timeout_ms)
        return {"ok": True, "selected": courier}

    async def phone_and_meet(
        self, phone: Optional[str] = None, recipient: Optional[str] = None
    ) -> dict[str, Any]:
        """Enter both phone numbers, choose Meet at door, and request delivery.

        Returns the page as it stands once the order confirmation has
        settled.
        """
        digits = normalize_phone(phone or self.flows.default_phone)
        recipient_digits = normalize_phone(recipient or self.flows.default_recipient_phone)
        click_timeout = self.browser.click_timeout_ms

        with command_errors("phone-and-meet"):
            page = await self._connection.active_page()
            phone_inputs = page.locator(self.selectors.phone_input)

            for position, value in enumerate((digits, recipient_digits)):
                field = phone_inputs.nth(position)
                await field.click(timeout=click_timeout)
                await field.fill(value)
                await asyncio.sleep(self.flows.phone_settle_seconds)

            await page.click(self.selectors.meet_at_door, timeout=click_timeout)
            await asyncio.sleep(self.flows.meet_settle_seconds)
            await page.locator(self.selectors.request_delivery).first.click(
                timeout=self.browser.action_timeout_ms
            )
            logger.info("Delivery requested, waiting for confirmation")
            await self._await_confirmation(page)
            snapshot = await page.snapshot()

        return {
            "ok": True,
            "phone": digits,
            "recipient": recipient_digits,
            "page": snapshot,
        }

    async def _await_confirmation(self, page: Page) -> None:
        wait_seconds = self.flows.confirmation_wait_seconds
        marker = self.selectors.confirmation_marker
        if not marker:
            await asyncio.sleep(wait_seconds)
            return
        try:
            await page.wait_for_selector(marker, timeout=int(wait_seconds * 1000))
            logger.info("Confirmation marker appeared")
        except PlaywrightTimeoutError:
            logger.warning(
                f"No confirmation marker after {wait_seconds:.0f}s, capturing page anyway"
            )
