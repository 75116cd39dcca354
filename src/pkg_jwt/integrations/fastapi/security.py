from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Plug into dependencies to get the bearer scheme in OpenAPI
bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_COOKIE_NAME = "access_token"


def _bearer_value(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, value = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return value.strip() or None


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    cookie_name: str = DEFAULT_COOKIE_NAME,
) -> str:
    """
    Find the compact JWT of a request, in order of preference:

      1. credentials resolved by `bearer_scheme`
      2. the raw `Authorization: Bearer <token>` header
      3. the `cookie_name` cookie

    Raises HTTPException(401) if no token is found.
    """
    if credentials is not None and credentials.credentials.strip():
        return credentials.credentials.strip()

    token = _bearer_value(request.headers.get("Authorization"))
    if token:
        return token

    token = request.cookies.get(cookie_name)
    if token:
        return token

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
