from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials

from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request
from ...domain.entities import DecodedToken
from ...domain.exceptions import JWTError, TokenExpiredError
from ...domain.ports import TokenDecoder


@dataclass(slots=True)
class FastAPIJWT:
    """
    FastAPI integration for pkg_jwt.

    Both dependencies are generators: the DecodedToken is released once
    the request is done, so handlers must copy out what they keep.

        jwt_auth = FastAPIJWT(decoder=JWTDecoder(key, options=options))

        @app.get("/me")
        def me(token: DecodedToken = Depends(jwt_auth.get_token)):
            return {"sub": token.claims["sub"]}
    """

    decoder: TokenDecoder
    cookie_name: str = DEFAULT_COOKIE_NAME

    def _decode(self, token: str) -> DecodedToken[Any]:
        try:
            return self.decoder.decode(token)
        except TokenExpiredError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired",
            ) from exc
        except JWTError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
            ) from exc

    # ------------------------------------------------------------------ #
    # Dependencies
    # ------------------------------------------------------------------ #

    async def get_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AsyncIterator[DecodedToken[Any]]:
        """Dependency: require a valid token."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        decoded = self._decode(token)
        with decoded:
            yield decoded

    async def get_optional_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> AsyncIterator[DecodedToken[Any] | None]:
        """Dependency: None when the token is missing or rejected."""
        try:
            token = extract_token_from_request(request, credentials, self.cookie_name)
            decoded = self._decode(token)
        except HTTPException:
            yield None
            return

        with decoded:
            yield decoded
