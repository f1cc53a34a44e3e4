"""Domain errors shared by the dice engine and the HTTP layer."""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base class for errors the HTTP layer maps to a client response."""

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRoll(DomainError):
    """Raised when a dice expression cannot be parsed or evaluated."""

    code = "INVALID_ROLL"


class NotFound(DomainError):
    """Raised when a referenced record does not exist."""

    code = "NOT_FOUND"
