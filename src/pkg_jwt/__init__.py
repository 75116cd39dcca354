"""
pkg_jwt

Decode, verify and validate compact JSON Web Tokens.
Framework-agnostic core with optional FastAPI and JWKS integrations.
"""

__version__ = "0.1.0"

from .domain.constants import Algorithm, AlgorithmFamily
from .domain.entities import DecodedToken, Header, RegisteredClaims
from .domain.exceptions import (
    JWTError,
    TokenDecodeError,
    MalformedTokenError,
    InvalidEncodingError,
    InvalidPayloadError,
    TokenVerificationError,
    InvalidDecodingKeyError,
    InvalidSignatureError,
    UnsupportedAlgorithmError,
    ClaimValidationError,
    TokenExpiredError,
    TokenNotYetValidError,
    InvalidIssuedAtError,
    MissingClaimError,
    InvalidAudienceError,
    InvalidIssuerError,
)
from .domain.value_objects import (
    DecodingKey,
    SecretKey,
    Ed25519Key,
    Es256Key,
    Es384Key,
    ValidationOptions,
    from_secret,
    from_ed25519_bytes,
    from_es256_bytes,
    from_es384_bytes,
    from_public_key,
    from_pem,
    from_jwk,
)
from .domain.ports import KeyProvider, TokenDecoder

from .application.use_cases.decode_token import JWTDecoder, decode, decode_header
from .application.use_cases.validate_claims import ClaimValidator
from .application.use_cases.verify_signature import verify_signature
from .env import validation_options_from_env

# JWKS adapter (needs network access at runtime only)
from .adapters.jwks.key_provider import JWKSKeyProvider

__all__ = [
    "__version__",
    # domain core
    "Algorithm",
    "AlgorithmFamily",
    "DecodedToken",
    "Header",
    "RegisteredClaims",
    "DecodingKey",
    "SecretKey",
    "Ed25519Key",
    "Es256Key",
    "Es384Key",
    "ValidationOptions",
    "from_secret",
    "from_ed25519_bytes",
    "from_es256_bytes",
    "from_es384_bytes",
    "from_public_key",
    "from_pem",
    "from_jwk",
    "KeyProvider",
    "TokenDecoder",
    # exceptions
    "JWTError",
    "TokenDecodeError",
    "MalformedTokenError",
    "InvalidEncodingError",
    "InvalidPayloadError",
    "TokenVerificationError",
    "InvalidDecodingKeyError",
    "InvalidSignatureError",
    "UnsupportedAlgorithmError",
    "ClaimValidationError",
    "TokenExpiredError",
    "TokenNotYetValidError",
    "InvalidIssuedAtError",
    "MissingClaimError",
    "InvalidAudienceError",
    "InvalidIssuerError",
    # use cases
    "decode",
    "decode_header",
    "verify_signature",
    "ClaimValidator",
    "JWTDecoder",
    "validation_options_from_env",
    # adapters
    "JWKSKeyProvider",
]
