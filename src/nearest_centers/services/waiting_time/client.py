"""HTTP client for the waiting-time source."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ...config import settings
from ...schemas.centers import WaitingTimeRequest, WaitingTimeResponse
from ..rate_limiter import RateLimiter, get_rate_limiter

logger = logging.getLogger(__name__)


class WaitingTimeClient:
    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        rate_limiter: RateLimiter | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.url = url or settings.waiting_time_url
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.user_agent = user_agent or settings.user_agent
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self._client = client

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            headers={"User-Agent": self.user_agent},
        )

    def fetch(self, site_id: int) -> WaitingTimeResponse | None:
        """POST the site id and parse the response; None on any failure."""
        payload = WaitingTimeRequest(site_id=site_id).model_dump(by_alias=True)

        with self.rate_limiter.throttle():
            client = self._client or self._get_client()
            try:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
                return WaitingTimeResponse.model_validate(response.json())
            except httpx.HTTPError as exc:
                logger.error(f"Error fetching waiting time from API for siteId: {site_id}: {exc}")
                return None
            except ValidationError as exc:
                logger.error(f"Invalid waiting time API response for siteId: {site_id}: {exc}")
                return None
            except ValueError as exc:
                logger.error(f"Error deserializing waiting time API response for siteId: {site_id}: {exc}")
                return None
            finally:
                if self._client is None:
                    client.close()

    def fetch_patient_count(self, site_id: int) -> int | None:
        response = self.fetch(site_id)
        if response is None or not response.data_values:
            return None
        return response.data_values[0].total_op
