# tests/test_domain.py
import json

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm, OKPAlgorithm

from pkg_jwt.domain.constants import Algorithm, AlgorithmFamily
from pkg_jwt.domain.entities import DecodedToken, Header, RegisteredClaims
from pkg_jwt.domain.exceptions import MissingClaimError, UnsupportedAlgorithmError
from pkg_jwt.domain.value_objects import (
    Ed25519Key,
    Es256Key,
    Es384Key,
    SecretKey,
    ValidationOptions,
    from_ed25519_bytes,
    from_es256_bytes,
    from_es384_bytes,
    from_jwk,
    from_pem,
    from_public_key,
    from_secret,
)


def test_algorithm_from_header():
    assert Algorithm.from_header("HS256") is Algorithm.HS256
    assert Algorithm.from_header("EdDSA") is Algorithm.EdDSA
    assert Algorithm.HS512.family is AlgorithmFamily.HMAC
    assert Algorithm.ES384.family is AlgorithmFamily.ECDSA
    assert Algorithm.PS256.family is AlgorithmFamily.RSA_PSS

    for bad in (None, "none", "hs256", "", 256):
        with pytest.raises(UnsupportedAlgorithmError):
            Algorithm.from_header(bad)


def test_every_algorithm_has_a_family():
    for algorithm in Algorithm:
        assert isinstance(algorithm.family, AlgorithmFamily)


def test_header():
    header = Header(alg="ES256", typ="JWT", kid="k1")
    assert header.alg is Algorithm.ES256
    assert header.kid == "k1"

    with pytest.raises(UnsupportedAlgorithmError):
        Header()
    with pytest.raises(UnsupportedAlgorithmError):
        Header(alg="XS999")
    with pytest.raises(TypeError):
        Header(alg="HS256", kid=7)


def test_registered_claims():
    claims = RegisteredClaims(exp=10, nbf=1.5, aud=["a", "b"], iss="me")
    assert claims.aud == ("a", "b")
    assert claims.audiences == ("a", "b")
    assert RegisteredClaims(aud="a").audiences == ("a",)
    assert RegisteredClaims().audiences == ()

    with pytest.raises(TypeError):
        RegisteredClaims(exp="tomorrow")
    with pytest.raises(TypeError):
        RegisteredClaims(exp=True)
    with pytest.raises(TypeError):
        RegisteredClaims(aud=["a", 1])
    with pytest.raises(TypeError):
        RegisteredClaims(iss=42)


def test_validation_options():
    opts = ValidationOptions(expected_aud="api", required_claims=["exp", "iss"])
    assert opts.expected_aud == ("api",)
    assert opts.required_claims == frozenset({"exp", "iss"})
    assert opts.skip_secret is False
    assert opts.verify_iat is False

    assert ValidationOptions(expected_aud=["a", "b"]).expected_aud == ("a", "b")
    assert ValidationOptions().expected_aud == ()

    with pytest.raises(ValueError):
        ValidationOptions(required_claims=["email"])
    with pytest.raises(ValueError):
        ValidationOptions(leeway_seconds=-1)
    for leeway in (float("nan"), float("inf")):
        with pytest.raises(ValueError):
            ValidationOptions(leeway_seconds=leeway)


def test_missing_claim_error_names_claim():
    err = MissingClaimError("exp")
    assert err.claim == "exp"
    assert "exp" in str(err)


def test_secret_key():
    assert from_secret("secret") == SecretKey(b"secret")
    assert from_secret(b"\x00\x01") == SecretKey(b"\x00\x01")
    assert "secret" not in repr(from_secret("secret"))


def test_key_from_raw_bytes(es256_private_key, es384_private_key, ed25519_private_key):
    point = es256_private_key.public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    assert isinstance(from_es256_bytes(point), Es256Key)

    compressed = es384_private_key.public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.CompressedPoint
    )
    assert isinstance(from_es384_bytes(compressed), Es384Key)

    raw = ed25519_private_key.public_key().public_bytes(
        serialization.Encoding.Raw, serialization.PublicFormat.Raw
    )
    assert isinstance(from_ed25519_bytes(raw), Ed25519Key)

    with pytest.raises(ValueError):
        from_es256_bytes(b"\x04" + b"\x00" * 64)
    with pytest.raises(ValueError):
        from_ed25519_bytes(b"short")
    # P-384 point offered as a P-256 key
    with pytest.raises(ValueError):
        from_es256_bytes(compressed)


def test_curve_is_checked(es384_private_key):
    with pytest.raises(ValueError):
        Es256Key(es384_private_key.public_key())
    with pytest.raises(ValueError):
        Ed25519Key(es384_private_key.public_key())


def test_from_public_key(es256_private_key, ed25519_private_key):
    assert isinstance(from_public_key(es256_private_key), Es256Key)
    assert isinstance(from_public_key(ed25519_private_key.public_key()), Ed25519Key)

    with pytest.raises(ValueError):
        from_public_key(ec.generate_private_key(ec.SECP521R1()))
    with pytest.raises(ValueError):
        from_public_key(b"not a key")


def test_from_pem(es384_private_key):
    pem = es384_private_key.public_key().public_bytes(
        serialization.Encoding.PEM, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    assert isinstance(from_pem(pem), Es384Key)
    assert isinstance(from_pem(pem.decode()), Es384Key)

    with pytest.raises(ValueError):
        from_pem(b"-----BEGIN PUBLIC KEY-----\nnope\n-----END PUBLIC KEY-----\n")


def test_from_jwk(es256_private_key, ed25519_private_key):
    ec_jwk = json.loads(ECAlgorithm.to_jwk(es256_private_key.public_key()))
    assert isinstance(from_jwk(ec_jwk), Es256Key)
    assert isinstance(from_jwk(json.dumps(ec_jwk)), Es256Key)

    okp_jwk = json.loads(OKPAlgorithm.to_jwk(ed25519_private_key.public_key()))
    assert isinstance(from_jwk(okp_jwk), Ed25519Key)

    assert from_jwk({"kty": "oct", "k": "c2VjcmV0"}) == SecretKey(b"secret")

    with pytest.raises(ValueError):
        from_jwk({"kty": "RSA", "n": "AQAB", "e": "AQAB"})
    with pytest.raises(ValueError):
        from_jwk({"kty": "EC", "crv": "P-256"})
    with pytest.raises(ValueError):
        from_jwk({"kty": "oct"})


def test_decoded_token_release():
    header = Header(alg="HS256")
    token = DecodedToken(header, {"sub": "1"})
    assert token.header is header
    assert token.claims == {"sub": "1"}
    assert not token.released

    token.release()
    assert token.released
    with pytest.raises(RuntimeError):
        _ = token.claims
    with pytest.raises(RuntimeError):
        _ = token.header
    with pytest.raises(RuntimeError):
        token.release()


def test_decoded_token_context_manager():
    with DecodedToken(Header(alg="HS256"), {"sub": "1"}) as token:
        sub = token.claims["sub"]
    assert sub == "1"
    assert token.released
    assert "released" in repr(token)

    # releasing inside the block is not an error on exit
    with DecodedToken(Header(alg="HS256"), {}) as token:
        token.release()
