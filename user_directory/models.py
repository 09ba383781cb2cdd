#!/usr/bin/env python3
"""
Pydantic shapes for the RandomUser data and the request-count form.

Only the fields the page displays are modelled; everything else the API
sends is ignored. Records are frozen once parsed.
"""

from typing import Any, Dict, List, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import Variant
from .errors import FetchError

MIN_REQUEST_COUNT = 1
MAX_REQUEST_COUNT = 50
DEFAULT_REQUEST_COUNT = 10


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Name(_Record):
    first: str
    last: str


class Picture(_Record):
    large: str


class Street(_Record):
    number: int
    name: str


class Location(_Record):
    street: Street
    city: str
    state: str
    country: str
    postcode: str

    @field_validator("postcode", mode="before")
    @classmethod
    def _postcode_as_text(cls, value: Any) -> Any:
        # The API sends numeric postcodes for some nationalities.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class UserRecord(_Record):
    """A profile as the basic and modal pages use it."""

    name: Name
    picture: Picture
    gender: str


class ProfileRecord(UserRecord):
    """A profile as the extended page uses it (adds email and address)."""

    email: str
    location: Location


def record_model(variant: Variant) -> Type[UserRecord]:
    return ProfileRecord if variant.is_extended else UserRecord


def parse_results(payload: Any, variant: Variant = Variant.EXTENDED) -> List[UserRecord]:
    """
    Validate a decoded API body and return its records in API order.

    The body is treated as untrusted: anything other than an object with a
    ``results`` list of well-formed records raises FetchError.
    """
    if not isinstance(payload, dict):
        raise FetchError(f"expected a JSON object, got {type(payload).__name__}")
    if "results" not in payload:
        raise FetchError("response body has no 'results' field")
    results = payload["results"]
    if not isinstance(results, list):
        raise FetchError(f"'results' must be a list, got {type(results).__name__}")

    model = record_model(variant)
    # The extended page needs email and location, so it validates against the bigger model.
    try:
        return [model.model_validate(item) for item in results]
    except ValidationError as exc:
        raise FetchError(f"unexpected user record shape: {exc.error_count()} error(s)", cause=exc) from exc


# -----------------------------------------------------------------------------
# Request count form
# -----------------------------------------------------------------------------
class RequestCountError(ValueError):
    """A request count that failed validation; the message is shown inline."""


class RequestCount(BaseModel):
    count: int = Field(ge=MIN_REQUEST_COUNT, le=MAX_REQUEST_COUNT)

    @field_validator("count", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        # pydantic would otherwise read True as 1
        if isinstance(value, bool):
            raise ValueError("booleans are not counts")
        return value


_MESSAGES: Dict[str, str] = {
    "missing": "Number of users is required",
    "greater_than_equal": f"Number of users must be between {MIN_REQUEST_COUNT} and {MAX_REQUEST_COUNT}",
    "less_than_equal": f"Number of users must be between {MIN_REQUEST_COUNT} and {MAX_REQUEST_COUNT}",
}
_NOT_AN_INTEGER = "Number of users must be a whole number"


def validate_request_count(raw: Any) -> int:
    """Return ``raw`` as a RequestCount integer or raise RequestCountError."""
    data: Dict[str, Any] = {}
    # A blank form field counts as missing, so pydantic reports "missing" instead of "not an integer".
    if raw is not None and not (isinstance(raw, str) and not raw.strip()):
        data["count"] = raw.strip() if isinstance(raw, str) else raw
    try:
        return RequestCount.model_validate(data).count
    except ValidationError as exc:
        error_type = exc.errors()[0]["type"] # e.g. "missing", "int_parsing", "less_than_equal"
        raise RequestCountError(_MESSAGES.get(error_type, _NOT_AN_INTEGER)) from exc
