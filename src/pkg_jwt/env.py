from __future__ import annotations

import os

import structlog

from .domain.value_objects import ValidationOptions

logger = structlog.get_logger(__name__)


def validation_options_from_env(prefix: str = "JWT_") -> ValidationOptions:
    """
    Build ValidationOptions from environment variables:

      {prefix}LEEWAY_SECONDS     number, default 0
      {prefix}EXPECTED_AUDIENCE  comma separated
      {prefix}EXPECTED_ISSUER
      {prefix}REQUIRED_CLAIMS    comma separated, e.g. "exp,iss"
      {prefix}VERIFY_EXP / VERIFY_NBF (default on), VERIFY_IAT (default off)
      {prefix}SKIP_SECRET        UNSAFE, default off

    Raises RuntimeError naming the offending variable.
    """

    def _bool(key: str, default: bool) -> bool:
        raw = os.getenv(prefix + key)
        if raw is None:
            return default
        value = str(raw).strip().lower()
        if value in {"1", "true", "yes", "on"}:
            return True
        if value in {"0", "false", "no", "off"}:
            return False
        raise RuntimeError(f"{prefix}{key} must be a boolean, got {raw!r}")

    def _split_csv(key: str) -> list[str]:
        raw = os.getenv(prefix + key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    raw_leeway = os.getenv(prefix + "LEEWAY_SECONDS", "0")
    try:
        leeway = float(raw_leeway)
    except ValueError:
        raise RuntimeError(f"{prefix}LEEWAY_SECONDS must be a number, got {raw_leeway!r}") from None

    skip_secret = _bool("SKIP_SECRET", False)
    if skip_secret:
        logger.warning("jwt_skip_secret_enabled_from_env", variable=prefix + "SKIP_SECRET")

    try:
        return ValidationOptions(
            skip_secret=skip_secret,
            required_claims=frozenset(_split_csv("REQUIRED_CLAIMS")),
            leeway_seconds=leeway,
            expected_aud=tuple(_split_csv("EXPECTED_AUDIENCE")),
            expected_iss=os.getenv(prefix + "EXPECTED_ISSUER") or None,
            verify_exp=_bool("VERIFY_EXP", True),
            verify_nbf=_bool("VERIFY_NBF", True),
            verify_iat=_bool("VERIFY_IAT", False),
        )
    except ValueError as exc:
        raise RuntimeError(f"Invalid {prefix}* validation settings: {exc}") from exc
