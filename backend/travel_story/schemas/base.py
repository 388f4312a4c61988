"""Shared Pydantic configuration for the JSON API."""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Last millisecond representable by datetime (9999-12-31T23:59:59.999Z).
MAX_EPOCH_MS = 253_402_300_799_999


class CamelModel(BaseModel):
    """Model serialized with camelCase keys, accepting either case on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ApiResponse(CamelModel):
    error: bool = False
    message: str | None = None
