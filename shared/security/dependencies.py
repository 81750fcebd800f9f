from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from shared.errors import AuthError
from .jwt_handler import is_token_expired, verify_access_token

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/user/signin", auto_error=False)


async def get_current_user(request: Request, token: str = Depends(oauth2_scheme)) -> dict:
    """Dependency to validate the JWT and return its ``{id, username}`` claims.

    Only ADMIN accounts can obtain a token, so a valid token is the elevated role.
    """
    if not token:
        raise AuthError("Please provide a valid Authorization header")

    if is_token_expired(token):
        raise AuthError("The token has expired")

    payload = verify_access_token(token)
    if payload is None or payload.get("id") is None:
        raise AuthError("Token is not valid")

    # Store in request state for downstream use (like rate limiting)
    request.state.user_id = payload["id"]
    return {"id": payload["id"], "username": payload.get("username")}
