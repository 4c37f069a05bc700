from __future__ import annotations

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .auth import decode_token
from .hasura import HasuraClient

bearer_scheme = HTTPBearer(auto_error=False)

# Clients sign the user out when they see this code on a 401.
INVALID_TOKEN_CODE = "invalid_token"


def api_error(status_code: int, code: str, message: str) -> HTTPException:
    """HTTPException whose body is ``{"detail": {"code": ..., "message": ...}}``."""
    return HTTPException(status_code=status_code, detail={"code": code, "message": message})


def get_hasura(request: Request) -> HasuraClient:
    hasura = getattr(request.app.state, "hasura", None)
    if hasura is None:
        raise api_error(
            status.HTTP_503_SERVICE_UNAVAILABLE, "upstream_unavailable", "Hasura client not ready"
        )
    return hasura


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int:
    if credentials is None:
        raise api_error(status.HTTP_401_UNAUTHORIZED, "not_authenticated", "Not authenticated")
    try:
        return decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise api_error(status.HTTP_401_UNAUTHORIZED, INVALID_TOKEN_CODE, "Invalid token")


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> int | None:
    if credentials is None:
        return None
    try:
        return decode_token(credentials.credentials)
    except jwt.PyJWTError:
        return None
