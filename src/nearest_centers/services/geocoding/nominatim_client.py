"""HTTP client for a Nominatim-compatible search endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ...config import settings
from ..rate_limiter import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)

# Characters that break Nominatim's free-text parser when left in the query.
_STRIPPED_CHARACTERS = ("#", "&")


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        country_codes: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        rate_limiter: RateLimiter | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self.country_codes = settings.geocoder_country_codes if country_codes is None else country_codes
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.user_agent = user_agent or settings.user_agent
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self._client = client

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": self.user_agent},
        )

    def _build_params(self, query: str) -> dict[str, Any]:
        sanitized = query
        for character in _STRIPPED_CHARACTERS:
            sanitized = sanitized.replace(character, "")
        params: dict[str, Any] = {"q": sanitized, "format": "json", "limit": 1}
        if self.country_codes:
            params["countrycodes"] = self.country_codes
        return params

    def search(self, query: str) -> dict[str, Any] | None:
        """Return the first match for ``query`` or None.

        Transport errors, non-2xx responses and malformed JSON all count as
        "no match"; they are logged and never raised.
        """
        url = f"{self.base_url}/search"
        params = self._build_params(query)

        with self.rate_limiter.throttle():
            client = self._client or self._get_client()
            try:
                response = client.get(url, params=params)
                response.raise_for_status()
                results = response.json()
            except httpx.HTTPError as exc:
                logger.error(f"Error fetching Nominatim result for query '{query}': {exc}")
                return None
            except ValueError as exc:
                logger.error(f"Error deserializing Nominatim result for query '{query}': {exc}")
                return None
            finally:
                if self._client is None:
                    client.close()

        if not isinstance(results, list) or not results:
            return None
        first = results[0]
        return first if isinstance(first, dict) else None
