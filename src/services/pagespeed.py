"""Google PageSpeed Insights client."""

import logging

import httpx

from analyzers.models import PageSpeedResult
from analyzers.scoring import round_half_up
from config import settings
from errors import ExternalServiceError

logger = logging.getLogger(__name__)

PAGESPEED_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"


class PageSpeedClient:
    """
    Fetches a Lighthouse performance score through PageSpeed Insights.

    Only the performance category score (0-1, scaled to 0-100) and the
    speed-index display value are used.
    """

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.api_key = api_key or settings.google_api_key
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def measure(self, url: str, strategy: str = "mobile") -> PageSpeedResult:
        """
        Run PageSpeed Insights for a URL.

        Raises:
            ExternalServiceError: on any transport, HTTP or payload failure
        """
        if not self.enabled:
            raise ExternalServiceError("pagespeed", "GOOGLE_API_KEY is not configured")

        try:
            with httpx.Client(
                timeout=settings.pagespeed_timeout,
                transport=self.transport,
            ) as client:
                response = client.get(
                    PAGESPEED_URL,
                    params={"url": url, "key": self.api_key, "strategy": strategy},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ExternalServiceError("pagespeed", str(e)) from e
        except ValueError as e:
            raise ExternalServiceError("pagespeed", f"Invalid JSON: {e}") from e

        return self._extract(data)

    def _extract(self, data: dict) -> PageSpeedResult:
        lighthouse = data.get("lighthouseResult", {})
        score = lighthouse.get("categories", {}).get("performance", {}).get("score")
        if score is None:
            raise ExternalServiceError("pagespeed", "Response has no performance score")

        speed_index = lighthouse.get("audits", {}).get("speed-index", {})
        return PageSpeedResult(
            score=round_half_up(score * 100),
            load_time=speed_index.get("displayValue") or "Unknown",
        )
