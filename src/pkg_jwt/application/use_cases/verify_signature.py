from __future__ import annotations

from typing import Callable, Dict

import structlog
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.utils import raw_to_der_signature

from ...domain.constants import Algorithm
from ...domain.exceptions import (
    InvalidDecodingKeyError,
    InvalidSignatureError,
    UnsupportedAlgorithmError,
)
from ...domain.value_objects import (
    DecodingKey,
    Ed25519Key,
    Es256Key,
    Es384Key,
    SecretKey,
    ValidationOptions,
)

logger = structlog.get_logger(__name__)

Verifier = Callable[[DecodingKey, bytes, bytes], None]

ED25519_SIGNATURE_LENGTH = 64


def _key_mismatch(algorithm: Algorithm, key: DecodingKey) -> InvalidDecodingKeyError:
    return InvalidDecodingKeyError(
        f"{type(key).__name__} cannot verify {algorithm.value} tokens"
    )


# ---------------------------------------------------------------------- #
# Per-family verifiers
# ---------------------------------------------------------------------- #


def _hmac_verifier(algorithm: Algorithm, digest: hashes.HashAlgorithm) -> Verifier:
    def verify(key: DecodingKey, message: bytes, signature: bytes) -> None:
        if not isinstance(key, SecretKey):
            raise _key_mismatch(algorithm, key)

        mac = hmac.HMAC(key.secret, digest)
        mac.update(message)
        expected = mac.finalize()

        if len(signature) != len(expected) or not constant_time.bytes_eq(expected, signature):
            raise InvalidSignatureError("Signature verification failed")

    return verify


def _ecdsa_verifier(
    algorithm: Algorithm,
    key_type: type,
    curve: ec.EllipticCurve,
    digest: hashes.HashAlgorithm,
) -> Verifier:
    # raw r || s, each coordinate padded to the curve size
    signature_length = 2 * ((curve.key_size + 7) // 8)

    def verify(key: DecodingKey, message: bytes, signature: bytes) -> None:
        if not isinstance(key, key_type):
            raise _key_mismatch(algorithm, key)
        if len(signature) != signature_length:
            raise InvalidSignatureError("Signature verification failed")

        try:
            key.public_key.verify(
                raw_to_der_signature(signature, curve),
                message,
                ec.ECDSA(digest),
            )
        except (InvalidSignature, ValueError):
            raise InvalidSignatureError("Signature verification failed") from None

    return verify


def _verify_eddsa(key: DecodingKey, message: bytes, signature: bytes) -> None:
    if not isinstance(key, Ed25519Key):
        raise _key_mismatch(Algorithm.EdDSA, key)
    if len(signature) != ED25519_SIGNATURE_LENGTH:
        raise InvalidSignatureError("Signature verification failed")

    try:
        key.public_key.verify(signature, message)
    except InvalidSignature:
        raise InvalidSignatureError("Signature verification failed") from None


def _unsupported(algorithm: Algorithm) -> Verifier:
    def verify(key: DecodingKey, message: bytes, signature: bytes) -> None:
        raise UnsupportedAlgorithmError(f"Algorithm {algorithm.value} is not implemented")

    return verify


# ---------------------------------------------------------------------- #
# Registry
# ---------------------------------------------------------------------- #

_VERIFIERS: Dict[Algorithm, Verifier] = {
    Algorithm.HS256: _hmac_verifier(Algorithm.HS256, hashes.SHA256()),
    Algorithm.HS384: _hmac_verifier(Algorithm.HS384, hashes.SHA384()),
    Algorithm.HS512: _hmac_verifier(Algorithm.HS512, hashes.SHA512()),
    Algorithm.ES256: _ecdsa_verifier(Algorithm.ES256, Es256Key, ec.SECP256R1(), hashes.SHA256()),
    Algorithm.ES384: _ecdsa_verifier(Algorithm.ES384, Es384Key, ec.SECP384R1(), hashes.SHA384()),
    Algorithm.EdDSA: _verify_eddsa,
    Algorithm.RS256: _unsupported(Algorithm.RS256),
    Algorithm.RS384: _unsupported(Algorithm.RS384),
    Algorithm.RS512: _unsupported(Algorithm.RS512),
    Algorithm.PS256: _unsupported(Algorithm.PS256),
    Algorithm.PS384: _unsupported(Algorithm.PS384),
    Algorithm.PS512: _unsupported(Algorithm.PS512),
}

_missing = set(Algorithm) - set(_VERIFIERS)
if _missing:
    raise RuntimeError(f"No verifier registered for: {sorted(a.value for a in _missing)}")


def verify_signature(
    algorithm: Algorithm,
    key: DecodingKey,
    message: bytes,
    signature: bytes,
    options: ValidationOptions,
) -> None:
    """
    Verify `signature` over `message` for the header-declared algorithm.

    The algorithm only selects the check; trust comes from `key`, whose
    variant must belong to that algorithm or InvalidDecodingKeyError is
    raised.

    Raises:
        InvalidDecodingKeyError
        InvalidSignatureError
        UnsupportedAlgorithmError
    """
    if options.skip_secret:
        logger.warning("jwt_signature_verification_skipped", alg=algorithm.value)
        return

    _VERIFIERS[algorithm](key, message, signature)
