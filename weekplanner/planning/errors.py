"""Canonical Planning Error Types.

This module defines the error types raised by the week planning engine.
Routine "no data" situations (unresolved locations, empty days, unavailable
transport modes) are modeled as values and never raised.

Standard error codes:
- MISSING_TIMESTAMP: Event has no start timestamp
- INVALID_TIMESTAMP: Event timestamp could not be parsed
- END_BEFORE_START: Event ends before it starts
- INVALID_PREFERENCE: Preference value is malformed (negative duration, bad HH:MM)
"""

from pydantic import BaseModel

MISSING_TIMESTAMP = "MISSING_TIMESTAMP"
INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
END_BEFORE_START = "END_BEFORE_START"
INVALID_PREFERENCE = "INVALID_PREFERENCE"


class InvalidInputDetail(BaseModel):
    """Structured description of a malformed input.

    Attributes:
        code: Error code (e.g., "END_BEFORE_START", "INVALID_TIMESTAMP")
        event_id: Offending event id, if the error concerns an event
        field: Offending field name (e.g., "end", "rushHours.morning.start")
        message: Human-readable description
    """

    code: str
    event_id: str | None = None
    field: str | None = None
    message: str


class InvalidInputError(ValueError):
    """Raised when event or preference input is malformed.

    Attributes:
        code: Error code
        detail: Structured detail with offending event id and field
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        event_id: str | None = None,
        field: str | None = None,
    ) -> None:
        self.code = code
        self.detail = InvalidInputDetail(code=code, event_id=event_id, field=field, message=message)
        super().__init__(f"{code}: {message}")
