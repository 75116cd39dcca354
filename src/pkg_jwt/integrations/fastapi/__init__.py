from __future__ import annotations

from typing import Any, Type

from .deps import FastAPIJWT
from .security import bearer_scheme, extract_token_from_request
from ...adapters.jwks.key_provider import JWKSKeyProvider
from ...application.use_cases.decode_token import JWTDecoder
from ...domain.value_objects import ValidationOptions


def create_fastapi_jwt_from_jwks(
    *,
    jwks_uri: str,
    options: ValidationOptions | None = None,
    claims_type: Type[Any] = dict,
    cache_ttl_seconds: int = 300,
) -> FastAPIJWT:
    """
    High-level helper for FastAPI apps whose tokens are signed by keys
    published as a JWK Set:

    - builds a JWKSKeyProvider and a JWTDecoder on top of it
    - wraps them in FastAPIJWT, exposing:

        jwt_auth.get_token
        jwt_auth.get_optional_token
    """
    decoder = JWTDecoder(
        key_provider=JWKSKeyProvider(jwks_uri, cache_ttl_seconds=cache_ttl_seconds),
        claims_type=claims_type,
        options=options,
    )
    return FastAPIJWT(decoder=decoder)


__all__ = [
    "FastAPIJWT",
    "bearer_scheme",
    "create_fastapi_jwt_from_jwks",
    "extract_token_from_request",
]
