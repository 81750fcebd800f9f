import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _bounded_int(name: str, default: int, low: int, high: int) -> int:
    value = int(os.getenv(name, str(default)))
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")
    return value


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DB_ECHO = _flag("DB_ECHO", "false")

ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "360"))

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

RATE_LIMIT_ENABLED = _flag("RATE_LIMIT_ENABLED", "true")
ORDER_RATE_LIMIT = os.getenv("ORDER_RATE_LIMIT", "30/minute")
SIGNIN_RATE_LIMIT = os.getenv("SIGNIN_RATE_LIMIT", "10/minute")

# Aliases must leave room for a "-<attempt>" suffix and fit products.alias
ALIAS_MAX_LENGTH = _bounded_int("ALIAS_MAX_LENGTH", 120, low=16, high=255)
ALIAS_MAX_ATTEMPTS = _bounded_int("ALIAS_MAX_ATTEMPTS", 1000, low=1, high=100_000)

# Tracing is only wired up when an OTLP collector is configured
OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT", "")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")
