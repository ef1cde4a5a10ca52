"""Exceptions raised by the ingestion and query services."""

from __future__ import annotations

from typing import Sequence


class BadRequest(ValueError):
    """Query parameters are malformed, missing or contradictory."""


class ValidationFailed(ValueError):
    """Base class for rejected ingestion payloads."""

    message = "invalid reading"

    def __init__(self, fields: Sequence[str], message: str | None = None) -> None:
        self.fields = list(fields)
        if message is not None:
            self.message = message
        super().__init__(f"{self.message}: {', '.join(self.fields)}")


class MissingField(ValidationFailed):
    message = "missing fields"


class InvalidType(ValidationFailed):
    message = "invalid field types"


class InvalidTimestamp(ValidationFailed):
    message = "timestamp invalid"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(["timestamp"], message)


class StoreFailure(RuntimeError):
    """The reading store is unreachable or rejected an operation."""
