"""Request bodies accepted by the relay. Every field is optional so that
missing values reach the handlers and produce the relay's own errors."""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class RelayRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class NavigateRequest(RelayRequest):
    url: Optional[str] = None


class ClickRequest(RelayRequest):
    selector: Optional[str] = None


class TypeRequest(RelayRequest):
    selector: Optional[str] = None
    text: Optional[str] = None


class AddressRequest(RelayRequest):
    address: Optional[str] = None


class PickupDropoffRequest(RelayRequest):
    pickup: Optional[str] = None
    dropoff: Optional[str] = None


class PhoneAndMeetRequest(RelayRequest):
    phone: Optional[str] = None
    recipient: Optional[str] = None


class EvaluateRequest(RelayRequest):
    expression: Optional[str] = None


class SelectTabRequest(RelayRequest):
    # Range and type are checked by TabManager so bad values get the
    # {"error", "max"} body instead of a schema error.
    index: Any = None
