from .jwt_handler import create_access_token, verify_access_token, is_token_expired
from .dependencies import get_current_user
from .rate_limiter import limiter, user_id_or_ip

__all__ = [
    "create_access_token",
    "verify_access_token",
    "is_token_expired",
    "get_current_user",
    "limiter",
    "user_id_or_ip"
]
