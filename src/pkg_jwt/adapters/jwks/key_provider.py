import time
from typing import Any, Dict, List, Optional

import structlog
from requests import Session

from ...domain.entities import Header
from ...domain.exceptions import InvalidDecodingKeyError
from ...domain.ports import KeyProvider
from ...domain.value_objects import DecodingKey, from_jwk

logger = structlog.get_logger(__name__)


class JWKSKeyProvider(KeyProvider):
    """
    Adapter implementing KeyProvider port on top of a JWKS endpoint.

    Infrastructure layer:
    - Knows how to fetch and cache a JWK Set over HTTP.
    - Picks the key by the token's `kid` and converts it to a DecodingKey.
    """

    def __init__(
        self,
        jwks_uri: str,
        cache_ttl_seconds: int = 300,
        session: Optional[Session] = None,
        timeout: float = 10.0,
        min_refresh_interval_seconds: float = 30.0,
    ) -> None:
        self._jwks_uri = jwks_uri
        self._cache_ttl = cache_ttl_seconds
        self._timeout = timeout
        self._min_refresh_interval = min_refresh_interval_seconds

        self._session = session or Session()
        self._jwks_keys: Optional[List[Dict[str, Any]]] = None
        self._jwks_last_fetched: float = 0.0

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def get_key(self, header: Header) -> DecodingKey:
        """
        Resolve the decoding key for `header`.

        A header without `kid` is only accepted when the set holds exactly
        one key. On a `kid` miss the set is re-fetched once (key rotation),
        but at most once per `min_refresh_interval_seconds`.

        Raises:
            InvalidDecodingKeyError
            requests.HTTPError (from the JWKS endpoint)
        """
        fetched_at = self._jwks_last_fetched
        jwk = self._select(self._fetch_jwks_keys(), header.kid)
        if (
            jwk is None
            and self._jwks_last_fetched == fetched_at
            and time.time() - fetched_at >= self._min_refresh_interval
        ):
            # served from cache; the set may predate a key rotation
            jwk = self._select(self._fetch_jwks_keys(force=True), header.kid)

        if jwk is None:
            raise InvalidDecodingKeyError("No matching key found in JWKS")

        try:
            return from_jwk(jwk)
        except ValueError as exc:
            raise InvalidDecodingKeyError(f"Unusable JWKS key: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _select(keys: List[Dict[str, Any]], kid: Optional[str]) -> Optional[Dict[str, Any]]:
        if kid is None:
            return keys[0] if len(keys) == 1 else None
        return next((k for k in keys if k.get("kid") == kid), None)

    def _fetch_jwks_keys(self, force: bool = False) -> List[Dict[str, Any]]:
        """
        Fetch JWKS keys with simple in-memory caching.
        """
        now = time.time()
        if (
            not force
            and self._jwks_keys is not None
            and (now - self._jwks_last_fetched) < self._cache_ttl
        ):
            return self._jwks_keys

        response = self._session.get(self._jwks_uri, timeout=self._timeout)
        response.raise_for_status()

        body = response.json()
        self._jwks_keys = body.get("keys", [])
        self._jwks_last_fetched = now
        logger.debug("jwks_refreshed", keys=len(self._jwks_keys), jwks_uri=self._jwks_uri)
        return self._jwks_keys
