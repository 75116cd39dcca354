class JWTError(Exception):
    """Base class for every error raised while decoding a token."""
    pass


# --- Structural / codec failures -----------------------------------------


class TokenDecodeError(JWTError):
    """Raised when the token cannot be parsed at all."""
    pass


class MalformedTokenError(TokenDecodeError):
    """Raised when the token is not three dot-separated segments."""
    pass


class InvalidEncodingError(TokenDecodeError):
    """Raised when a segment is not canonical base64url without padding."""
    pass


class InvalidPayloadError(TokenDecodeError):
    """Raised when a header or payload segment is not the expected JSON."""
    pass


# --- Signature failures --------------------------------------------------


class TokenVerificationError(JWTError):
    """Raised when the signature of a well-formed token cannot be trusted."""
    pass


class InvalidDecodingKeyError(TokenVerificationError):
    """Raised when the key does not belong to the token's algorithm."""
    pass


class InvalidSignatureError(TokenVerificationError):
    """Raised when the signature does not match."""
    pass


class UnsupportedAlgorithmError(TokenVerificationError):
    """Raised when the header algorithm is absent, unknown or unimplemented."""
    pass


# --- Claim policy failures -----------------------------------------------


class ClaimValidationError(JWTError):
    """Raised when a verified token's claims are out of policy."""
    pass


class TokenExpiredError(ClaimValidationError):
    """Raised when token has expired."""
    pass


class TokenNotYetValidError(ClaimValidationError):
    """Raised when the token is used before its nbf time."""
    pass


class InvalidIssuedAtError(ClaimValidationError):
    """Raised when the token claims to be issued in the future."""
    pass


class InvalidAudienceError(ClaimValidationError):
    """Raised when the token audience does not match the expected one."""
    pass


class InvalidIssuerError(ClaimValidationError):
    """Raised when the token issuer does not match the expected one."""
    pass


class MissingClaimError(ClaimValidationError):
    """Raised when a required registered claim is absent."""

    def __init__(self, claim: str) -> None:
        super().__init__(f"Token is missing the required '{claim}' claim")
        self.claim = claim
