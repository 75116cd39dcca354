from __future__ import annotations

from dataclasses import dataclass

from ...domain.entities import RegisteredClaims
from ...domain.exceptions import (
    InvalidAudienceError,
    InvalidIssuedAtError,
    InvalidIssuerError,
    MissingClaimError,
    TokenExpiredError,
    TokenNotYetValidError,
)
from ...domain.value_objects import ValidationOptions

# Order in which missing required claims are reported.
_REQUIRED_ORDER = ("exp", "nbf", "iat", "iss", "aud", "sub", "jti")


@dataclass(slots=True)
class ClaimValidator:
    """
    Application use case: enforce ValidationOptions on registered claims.

    Fail-fast: the first violation is raised, checked in this order:
      required claims -> exp -> nbf -> iat -> iss -> aud
    """

    options: ValidationOptions

    def validate(self, claims: RegisteredClaims) -> None:
        """
        Raises:
            MissingClaimError
            TokenExpiredError
            TokenNotYetValidError
            InvalidIssuedAtError
            InvalidIssuerError
            InvalidAudienceError
        """
        opts = self.options
        now = opts.clock()
        leeway = opts.leeway_seconds

        for name in _REQUIRED_ORDER:
            if name in opts.required_claims and claims.get(name) is None:
                raise MissingClaimError(name)

        if opts.verify_exp and claims.exp is not None and now > claims.exp + leeway:
            raise TokenExpiredError("Token has expired")

        if opts.verify_nbf and claims.nbf is not None and now < claims.nbf - leeway:
            raise TokenNotYetValidError("Token is not yet valid")

        if opts.verify_iat and claims.iat is not None and claims.iat > now + leeway:
            raise InvalidIssuedAtError("Token was issued in the future")

        self._check_issuer(claims)
        self._check_audience(claims)

    def _check_issuer(self, claims: RegisteredClaims) -> None:
        expected = self.options.expected_iss
        if expected is not None and claims.iss != expected:
            raise InvalidIssuerError(
                f"Invalid issuer: expected {expected}, got {claims.iss}"
            )

    def _check_audience(self, claims: RegisteredClaims) -> None:
        expected = self.options.expected_aud
        if not expected:
            return

        # Claim may be a string or a list; any overlap is enough.
        audiences = claims.audiences
        if not any(aud in audiences for aud in expected):
            raise InvalidAudienceError(
                f"Invalid audience: expected {list(expected)}, got {list(audiences)}"
            )
