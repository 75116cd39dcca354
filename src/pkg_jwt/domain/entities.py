from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar

from .constants import Algorithm

ClaimsT = TypeVar("ClaimsT")


@dataclass(frozen=True, slots=True)
class Header:
    """
    JOSE header of a compact token.

    Only `alg` is mandatory; a missing or unknown algorithm surfaces as
    UnsupportedAlgorithmError rather than as a payload error.
    """
    alg: Algorithm | None = None
    typ: Optional[str] = None
    cty: Optional[str] = None
    kid: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "alg", Algorithm.from_header(self.alg))
        for name in ("typ", "cty", "kid"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"Header field '{name}' must be a string")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True, slots=True)
class RegisteredClaims:
    """
    Registered-claims view of a payload (RFC 7519, section 4.1).

    Decoded independently from the caller's own claims type, so the two
    never have to share a shape.
    """
    exp: Optional[float] = None
    nbf: Optional[float] = None
    iat: Optional[float] = None
    aud: str | Tuple[str, ...] | None = None
    iss: Optional[str] = None
    sub: Optional[str] = None
    jti: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("exp", "nbf", "iat"):
            value = getattr(self, name)
            if value is not None and not _is_number(value):
                raise TypeError(f"Claim '{name}' must be a number")

        for name in ("iss", "sub", "jti"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"Claim '{name}' must be a string")

        if self.aud is not None and not isinstance(self.aud, str):
            if not isinstance(self.aud, (list, tuple)) or not all(isinstance(a, str) for a in self.aud):
                raise TypeError("Claim 'aud' must be a string or a list of strings")
            object.__setattr__(self, "aud", tuple(self.aud))

    @property
    def audiences(self) -> Tuple[str, ...]:
        if self.aud is None:
            return ()
        if isinstance(self.aud, str):
            return (self.aud,)
        return self.aud

    def get(self, name: str) -> Any:
        return getattr(self, name)


class DecodedToken(Generic[ClaimsT]):
    """
    Result of a successful decode: the header plus the caller's claims.

    The caller owns the token and must release it exactly once, either by
    calling `release()` or by using it as a context manager:

        with decode(dict, token, key) as decoded:
            user_id = decoded.claims["sub"]

    After release the header and claims are no longer reachable through
    this object; a second release is an error. Values already copied out
    by the caller are ordinary Python objects and stay valid.
    """

    __slots__ = ("_header", "_claims", "_released")

    def __init__(self, header: Header, claims: ClaimsT) -> None:
        self._header: Header | None = header
        self._claims: ClaimsT | None = claims
        self._released = False

    def _ensure_live(self) -> None:
        if self._released:
            raise RuntimeError("DecodedToken has been released")

    @property
    def header(self) -> Header:
        self._ensure_live()
        return self._header  # type: ignore[return-value]

    @property
    def claims(self) -> ClaimsT:
        self._ensure_live()
        return self._claims  # type: ignore[return-value]

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            raise RuntimeError("DecodedToken already released")
        self._header = None
        self._claims = None
        self._released = True

    def __enter__(self) -> "DecodedToken[ClaimsT]":
        self._ensure_live()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._released:
            self.release()

    def __repr__(self) -> str:
        if self._released:
            return "DecodedToken(<released>)"
        return f"DecodedToken(header={self._header!r}, claims={self._claims!r})"
