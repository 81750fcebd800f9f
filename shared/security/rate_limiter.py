from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from shared.config.settings import RATE_LIMIT_ENABLED
from .jwt_handler import verify_access_token


def user_id_or_ip(request: Request) -> str:
    """Rate-limit key: the signed-in admin's id, else the client address.

    Order submission and sign-in are anonymous, so in practice both are
    limited per client address.
    """
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme == "Bearer" and token:
        payload = verify_access_token(token)
        if payload and payload.get("id") is not None:
            return f"user:{payload['id']}"
    return f"ip:{get_remote_address(request)}"


# Limits are declared per route; tests switch the limiter off via RATE_LIMIT_ENABLED
limiter = Limiter(key_func=user_id_or_ip, enabled=RATE_LIMIT_ENABLED)
