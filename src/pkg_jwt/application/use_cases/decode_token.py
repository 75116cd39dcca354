from __future__ import annotations

from typing import Any, Optional, Tuple, Type, TypeVar

import structlog

from ..codec import b64url_decode, json_decode
from .validate_claims import ClaimValidator
from .verify_signature import verify_signature
from ...domain.entities import DecodedToken, Header, RegisteredClaims
from ...domain.exceptions import JWTError, MalformedTokenError
from ...domain.ports import KeyProvider, TokenDecoder
from ...domain.value_objects import DecodingKey, ValidationOptions

logger = structlog.get_logger(__name__)

C = TypeVar("C")


def _split(token: str | bytes) -> Tuple[str, str, str]:
    """
    Return (message, header_segment, signature_segment).

    `message` is `header.payload` exactly as received; it is what the
    signature covers.
    """
    if isinstance(token, bytes):
        try:
            token = token.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedTokenError("Token is not ASCII") from exc

    if not isinstance(token, str) or token.count(".") != 2:
        raise MalformedTokenError("Token must consist of three dot-separated segments")
    if not token.isascii():
        raise MalformedTokenError("Token is not ASCII")

    message, _, signature_segment = token.rpartition(".")
    header_segment = message[: message.index(".")]
    return message, header_segment, signature_segment


def _payload_segment(message: str) -> str:
    return message[message.index(".") + 1:]


def decode_header(token: str | bytes) -> Header:
    """
    Decode the header WITHOUT verifying anything.

    Meant for picking a key (e.g. by `kid`) before calling `decode`.
    """
    _, header_segment, _ = _split(token)
    return json_decode(Header, b64url_decode(header_segment))


def decode(
    claims_type: Type[C],
    token: str | bytes,
    key: DecodingKey,
    options: ValidationOptions | None = None,
) -> DecodedToken[C]:
    """
    Decode, verify and validate a compact JWT.

    Steps:
      1. structural check (exactly two dots), before any decoding
      2. header -> Header, signature segment -> bytes
      3. signature check for header.alg with the caller's key
      4. payload -> RegisteredClaims, checked against `options`
      5. payload -> `claims_type` (dict or a dataclass)

    Returns:
        DecodedToken; the caller must release it (see DecodedToken).

    Raises:
        TokenDecodeError, TokenVerificationError or ClaimValidationError
        subclasses, see pkg_jwt.domain.exceptions.
    """
    options = options or ValidationOptions()

    try:
        message, header_segment, signature_segment = _split(token)

        header = json_decode(Header, b64url_decode(header_segment))
        signature = b64url_decode(signature_segment)

        verify_signature(header.alg, key, message.encode("utf-8"), signature, options)

        payload_segment = _payload_segment(message)
        registered = json_decode(RegisteredClaims, b64url_decode(payload_segment))
        ClaimValidator(options).validate(registered)

        claims = json_decode(claims_type, b64url_decode(payload_segment))
    except JWTError as exc:
        logger.info("jwt_rejected", reason=type(exc).__name__)
        raise

    logger.debug("jwt_decoded", alg=header.alg.value, kid=header.kid)
    return DecodedToken(header, claims)


class JWTDecoder(TokenDecoder):
    """
    TokenDecoder port implementation bound to one key source and policy.

    Give either a fixed `key` or a `key_provider` that resolves the key
    from the unverified header (e.g. JWKSKeyProvider).
    """

    def __init__(
        self,
        key: Optional[DecodingKey] = None,
        *,
        key_provider: Optional[KeyProvider] = None,
        claims_type: Type[Any] = dict,
        options: Optional[ValidationOptions] = None,
    ) -> None:
        if (key is None) == (key_provider is None):
            raise ValueError("Pass exactly one of key or key_provider")

        self._key = key
        self._key_provider = key_provider
        self._claims_type = claims_type
        self._options = options or ValidationOptions()

    @property
    def options(self) -> ValidationOptions:
        return self._options

    def decode(self, token: str | bytes) -> DecodedToken[Any]:
        key = self._key
        if key is None:
            key = self._key_provider.get_key(decode_header(token))  # type: ignore[union-attr]
        return decode(self._claims_type, token, key, self._options)
