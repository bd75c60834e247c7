"""Dooray response envelope unwrapping.

Every Dooray API response is wrapped as::

    {"header": {"isSuccessful": true, "resultCode": 0, "resultMessage": ""},
     "result": ...,
     "totalCount": 42}          # list endpoints only

The functions here are pure: no I/O, no mutation of the input.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from .errors import DoorayAPIError

DEFAULT_FAILURE_MESSAGE = "API request failed"


class EnvelopeHeader(BaseModel):
    model_config = ConfigDict(extra="allow")

    is_successful: bool = Field(validation_alias=AliasChoices("isSuccessful", "success"))
    result_code: Optional[int] = Field(None, validation_alias=AliasChoices("resultCode", "code"))
    result_message: Optional[str] = Field(None, validation_alias=AliasChoices("resultMessage", "message"))


class Envelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    header: EnvelopeHeader
    result: Any = None
    total_count: Optional[int] = Field(None, validation_alias="totalCount")
    message: Optional[str] = None


@dataclass
class Page:
    """Unwrapped list response."""

    total_count: Optional[int]
    data: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"totalCount": self.total_count, "data": self.data}


def failure_message(body: Any) -> str:
    """Best message available in a (possibly malformed) response body."""
    if isinstance(body, dict):
        header = body.get("header")
        if isinstance(header, dict) and header.get("resultMessage"):
            return str(header["resultMessage"])
        if body.get("message"):
            return str(body["message"])
    return DEFAULT_FAILURE_MESSAGE


def _parse(response: Any, status_code: Optional[int]) -> Envelope:
    try:
        envelope = Envelope.model_validate(response)
    except ValidationError:
        raise DoorayAPIError("Malformed response envelope", status_code, response)

    if not envelope.header.is_successful:
        message = envelope.header.result_message or envelope.message or DEFAULT_FAILURE_MESSAGE
        raise DoorayAPIError(message, status_code, response)
    return envelope


def unwrap(response: Any, status_code: Optional[int] = None) -> Any:
    """Return ``result`` of a successful envelope.

    Raises:
        DoorayAPIError: if the header reports failure or the body is not an envelope.
    """
    return _parse(response, status_code).result


def unwrap_paginated(response: Any, status_code: Optional[int] = None) -> Page:
    """Return ``Page(totalCount, result)`` of a successful list envelope."""
    envelope = _parse(response, status_code)
    data = envelope.result if envelope.result is not None else []
    return Page(total_count=envelope.total_count, data=data)
