from __future__ import annotations

from typing import Optional


class HalClientError(Exception):
    """Base error for hal_client failures."""


class NotFoundError(HalClientError, KeyError):
    """Requested property or relation does not exist in the document."""

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(message or f"No property or relation named {name!r}")
        self.name = name

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class InvalidRepresentationError(HalClientError):
    """Document violates the HAL shape contract at `pointer`."""

    def __init__(self, pointer: str, reason: str):
        super().__init__(f"{reason} at {pointer or '/'}")
        self.pointer = pointer
        self.reason = reason


class MissingTransportError(HalClientError):
    """A link target must be fetched but no HalClient is configured."""


__all__ = [
    "HalClientError",
    "NotFoundError",
    "InvalidRepresentationError",
    "MissingTransportError",
]
