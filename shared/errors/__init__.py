from .exceptions import (
    AuthError,
    ConflictError,
    ErrorCode,
    NotFoundError,
    PriceMismatchError,
    ShopError,
    ValidationError,
)
from .handlers import register_exception_handlers

__all__ = [
    "AuthError",
    "ConflictError",
    "ErrorCode",
    "NotFoundError",
    "PriceMismatchError",
    "ShopError",
    "ValidationError",
    "register_exception_handlers",
]
