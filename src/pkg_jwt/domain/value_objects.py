# src/pkg_jwt/domain/value_objects.py

from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Tuple, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from jwt.algorithms import ECAlgorithm, OKPAlgorithm
from jwt.exceptions import InvalidKeyError
from jwt.utils import base64url_decode

from .constants import REGISTERED_CLAIMS


# --- Decoding keys -------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SecretKey:
    """Shared secret for the HMAC family (HS256 / HS384 / HS512)."""
    secret: bytes

    def __repr__(self) -> str:
        return "SecretKey(<redacted>)"


@dataclass(frozen=True, slots=True)
class Ed25519Key:
    public_key: ed25519.Ed25519PublicKey

    def __post_init__(self) -> None:
        if not isinstance(self.public_key, ed25519.Ed25519PublicKey):
            raise ValueError("Ed25519Key requires an Ed25519 public key")


def _check_curve(public_key: Any, curve_name: str) -> None:
    if not isinstance(public_key, ec.EllipticCurvePublicKey) or public_key.curve.name != curve_name:
        raise ValueError(f"Expected an EC public key on curve {curve_name}")


@dataclass(frozen=True, slots=True)
class Es256Key:
    """P-256 public key for ES256."""
    public_key: ec.EllipticCurvePublicKey

    def __post_init__(self) -> None:
        _check_curve(self.public_key, "secp256r1")


@dataclass(frozen=True, slots=True)
class Es384Key:
    """P-384 public key for ES384."""
    public_key: ec.EllipticCurvePublicKey

    def __post_init__(self) -> None:
        _check_curve(self.public_key, "secp384r1")


DecodingKey = Union[SecretKey, Ed25519Key, Es256Key, Es384Key]


def from_secret(secret: str | bytes) -> SecretKey:
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    return SecretKey(bytes(secret))


def from_ed25519_bytes(data: bytes) -> Ed25519Key:
    """Raw 32-byte Ed25519 public key."""
    return Ed25519Key(ed25519.Ed25519PublicKey.from_public_bytes(data))


def from_es256_bytes(data: bytes) -> Es256Key:
    """SEC1 encoded (compressed or uncompressed) P-256 point."""
    return Es256Key(ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), data))


def from_es384_bytes(data: bytes) -> Es384Key:
    """SEC1 encoded (compressed or uncompressed) P-384 point."""
    return Es384Key(ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP384R1(), data))


def from_public_key(key: Any) -> DecodingKey:
    """
    Wrap a `cryptography` key object into the matching DecodingKey variant.

    Private keys are accepted and reduced to their public half.
    """
    if isinstance(key, (ec.EllipticCurvePrivateKey, ed25519.Ed25519PrivateKey)):
        key = key.public_key()

    if isinstance(key, ed25519.Ed25519PublicKey):
        return Ed25519Key(key)
    if isinstance(key, ec.EllipticCurvePublicKey):
        if key.curve.name == "secp256r1":
            return Es256Key(key)
        if key.curve.name == "secp384r1":
            return Es384Key(key)
        raise ValueError(f"Unsupported EC curve: {key.curve.name}")
    raise ValueError(f"Unsupported key type: {type(key).__name__}")


def from_pem(data: str | bytes) -> DecodingKey:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return from_public_key(serialization.load_pem_public_key(data))


def from_jwk(jwk: Mapping[str, Any] | str) -> DecodingKey:
    """
    Build a DecodingKey from a JWK (`oct`, `EC` or `OKP`).

    Raises ValueError for unsupported or malformed keys.
    """
    data = json.loads(jwk) if isinstance(jwk, str) else dict(jwk)
    kty = data.get("kty")

    if kty == "oct":
        k = data.get("k")
        if not isinstance(k, str):
            raise ValueError("oct JWK is missing 'k'")
        return SecretKey(base64url_decode(k))

    try:
        if kty == "EC":
            key = ECAlgorithm.from_jwk(json.dumps(data))
        elif kty == "OKP":
            key = OKPAlgorithm.from_jwk(json.dumps(data))
        else:
            raise ValueError(f"Unsupported JWK key type: {kty!r}")
    except InvalidKeyError as exc:
        raise ValueError(f"Invalid JWK: {exc}") from exc

    return from_public_key(key)


# --- Validation options --------------------------------------------------


def _normalize(values: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalize an iterable of strings into a tuple.
    If a plain string is passed, treat it as a single-element collection.
    """
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True, slots=True)
class ValidationOptions:
    """
    Claim policy applied by ClaimValidator, plus the signature bypass switch.

    - skip_secret:     UNSAFE. Skip signature verification entirely. Claims
                       decoded this way are untrusted; use only to inspect a
                       token whose key you do not have.
    - required_claims: registered claims that must be present.
    - leeway_seconds:  clock-skew tolerance for exp / nbf / iat.
    - expected_aud:    accepted audience(s); any overlap with `aud` passes.
    - expected_iss:    exact issuer.
    - verify_*:        opt-outs for the time based checks (iat is opt-in).
    - clock:           seconds-since-epoch source, injectable for tests.
    """

    skip_secret: bool = False
    required_claims: frozenset[str] = frozenset()
    leeway_seconds: float = 0
    expected_aud: Tuple[str, ...] = ()
    expected_iss: str | None = None
    verify_exp: bool = True
    verify_nbf: bool = True
    verify_iat: bool = False
    clock: Callable[[], float] = time.time

    def __post_init__(self) -> None:
        object.__setattr__(self, "expected_aud", _normalize(self.expected_aud or ()))
        object.__setattr__(self, "required_claims", frozenset(_normalize(self.required_claims)))

        unknown = self.required_claims - REGISTERED_CLAIMS
        if unknown:
            raise ValueError(f"Unknown registered claims: {sorted(unknown)}")
        if not math.isfinite(self.leeway_seconds) or self.leeway_seconds < 0:
            raise ValueError("leeway_seconds must be a finite, non-negative number")
