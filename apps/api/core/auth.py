from datetime import datetime, timedelta, timezone

import jwt

from .config import settings

ALGORITHM = "HS256"


def create_token(user_id: int, name: str | None = None, picture: str | None = None) -> str:
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    if name is not None:
        payload["name"] = name
    if picture is not None:
        payload["picture"] = picture
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> int:
    """Decode and validate a JWT token. Returns the user_id (int). Raises jwt.PyJWTError on failure."""
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise jwt.InvalidTokenError("Token subject is not a user id") from e
