from __future__ import annotations

from typing import Any, Protocol

from .entities import DecodedToken, Header
from .value_objects import DecodingKey


class TokenDecoder(Protocol):
    """
    Port for decoding a compact token into a DecodedToken.

    Implementations live in the application layer (JWTDecoder).
    """

    def decode(self, token: str) -> DecodedToken[Any]:
        """
        Decode, verify and validate the given token.

        Should:
          - verify signature
          - check expiry and the other configured claims
        Raises:
          - TokenDecodeError subclasses for structural problems
          - TokenVerificationError subclasses for signature problems
          - ClaimValidationError subclasses for policy violations
        """
        ...


class KeyProvider(Protocol):
    """
    Port for resolving the decoding key of a token from its (unverified)
    header, e.g. by `kid`.

    Implementations live in the adapters layer (e.g. JWKS).
    """

    def get_key(self, header: Header) -> DecodingKey:
        """Raises InvalidDecodingKeyError when no usable key matches."""
        ...
