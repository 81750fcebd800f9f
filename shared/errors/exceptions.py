"""Error taxonomy shared by every service.

Each error carries a machine-readable code, a user-safe message and the HTTP
status it is surfaced with. Services raise these; the handlers registered in
``shared.errors.handlers`` turn them into ``{"message": ...}`` responses.
"""
from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    PRICE_MISMATCH = "PRICE_MISMATCH"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"


class ShopError(Exception):
    """Base error with code, message and HTTP status."""

    code = ErrorCode.VALIDATION_FAILED
    status_code = 400

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(ShopError):
    """Malformed or semantically invalid input."""


class PriceMismatchError(ValidationError):
    """Declared total does not match the total recomputed from the catalog."""

    code = ErrorCode.PRICE_MISMATCH


class NotFoundError(ShopError):
    """A referenced entity does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404


class AuthError(ShopError):
    """Missing, expired or invalid credentials."""

    code = ErrorCode.UNAUTHORIZED
    status_code = 401


class ConflictError(ShopError):
    """A uniqueness constraint was violated in the store."""

    code = ErrorCode.CONFLICT
    status_code = 400
