import os
from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt

from shared.config.settings import ACCESS_TOKEN_EXPIRE_MINUTES

SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not SECRET_KEY:
    raise ValueError("FATAL ERROR: JWT_SECRET_KEY is not set in the environment!")

ALGORITHM = "HS256"


def create_access_token(data: dict, expires_delta: timedelta = None) -> tuple[str, int]:
    """Creates a JWT access token with a UTC expiration.

    Returns the token together with its expiry as a unix timestamp.
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    exp = int(expire.timestamp())
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM), exp


def verify_access_token(token: str) -> dict | None:
    """Decodes and verifies the JWT. Returns payload if valid, None if invalid/expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def is_token_expired(token: str) -> bool:
    try:
        jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        return True
    except JWTError:
        return False
    return False
