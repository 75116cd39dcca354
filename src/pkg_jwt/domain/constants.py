from enum import Enum

from .exceptions import UnsupportedAlgorithmError


class AlgorithmFamily(Enum):
    HMAC = "hmac"
    ECDSA = "ecdsa"
    EDDSA = "eddsa"
    RSA = "rsa"
    RSA_PSS = "rsa_pss"


class Algorithm(str, Enum):
    """
    JWS algorithm identifiers that may appear in a token header (`alg`).

    RSA / RSA-PSS identifiers are recognised so that they fail with
    UnsupportedAlgorithmError instead of being mistaken for garbage input.
    """

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    ES256 = "ES256"
    ES384 = "ES384"
    EdDSA = "EdDSA"

    # reserved, not implemented
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"
    PS256 = "PS256"
    PS384 = "PS384"
    PS512 = "PS512"

    @property
    def family(self) -> AlgorithmFamily:
        return _FAMILIES[self]

    @classmethod
    def from_header(cls, value: object) -> "Algorithm":
        """Map a raw header `alg` value to an Algorithm (exact, case-sensitive)."""
        if value is None:
            raise UnsupportedAlgorithmError("Token header does not declare an algorithm")
        if not isinstance(value, str):
            raise UnsupportedAlgorithmError(f"Invalid algorithm value: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAlgorithmError(f"Unsupported algorithm: {value!r}") from None


_FAMILIES = {
    Algorithm.HS256: AlgorithmFamily.HMAC,
    Algorithm.HS384: AlgorithmFamily.HMAC,
    Algorithm.HS512: AlgorithmFamily.HMAC,
    Algorithm.ES256: AlgorithmFamily.ECDSA,
    Algorithm.ES384: AlgorithmFamily.ECDSA,
    Algorithm.EdDSA: AlgorithmFamily.EDDSA,
    Algorithm.RS256: AlgorithmFamily.RSA,
    Algorithm.RS384: AlgorithmFamily.RSA,
    Algorithm.RS512: AlgorithmFamily.RSA,
    Algorithm.PS256: AlgorithmFamily.RSA_PSS,
    Algorithm.PS384: AlgorithmFamily.RSA_PSS,
    Algorithm.PS512: AlgorithmFamily.RSA_PSS,
}


# Registered claim names that ValidationOptions.required_claims may list.
REGISTERED_CLAIMS = frozenset({"exp", "nbf", "iat", "aud", "iss", "sub", "jti"})
