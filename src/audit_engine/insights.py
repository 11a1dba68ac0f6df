"""
PageSpeed Insights client.

Best-effort dependency: any failure results in a missing snapshot rather than
an aborted run.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx

from .errors import InsightsError
from .models import STRATEGIES, Diagnostic, Opportunity, PerformanceSnapshot, URLInput

logger = logging.getLogger(__name__)

PAGESPEED_API_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"

# (label, lighthouse audit id)
METRIC_AUDITS = (
    ("FCP", "first-contentful-paint"),
    ("LCP", "largest-contentful-paint"),
    ("CLS", "cumulative-layout-shift"),
    ("TTI", "interactive"),
    ("TBT", "total-blocking-time"),
)

METRIC_NAMES = {
    "FCP": "First Contentful Paint",
    "LCP": "Largest Contentful Paint",
    "CLS": "Cumulative Layout Shift",
    "TTI": "Time to Interactive",
    "TBT": "Total Blocking Time",
}

MISSING_METRIC = "N/A"


class InsightsProvider(ABC):
    """
    Abstract interface for performance scoring services.

    Implementations must never raise for remote failures; they return None instead.
    """

    @abstractmethod
    async def fetch_insights(self, url: str, strategy: str) -> PerformanceSnapshot | None:
        """
        Score a URL for one strategy.

        Args:
            url: Absolute URL to score
            strategy: 'mobile' or 'desktop'

        Returns:
            PerformanceSnapshot, or None if the service call failed
        """
        pass


class PageSpeedInsightsClient(InsightsProvider):
    """
    Queries the Google PageSpeed Insights v5 API.

    One GET request per strategy, no retries.
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = 120.0,
        endpoint: str = PAGESPEED_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the PageSpeed client.

        Args:
            api_key: Google API key
            timeout: Request timeout in seconds
            endpoint: API endpoint (overridable for testing)
            transport: Custom httpx transport (optional, used by tests)
        """
        self.api_key = api_key
        self.timeout = timeout
        self.endpoint = endpoint
        self.transport = transport

    async def fetch_insights(self, url: str, strategy: str) -> PerformanceSnapshot | None:
        if strategy not in STRATEGIES:
            raise ValueError(f"Strategy must be one of {STRATEGIES}: {strategy}")
        URLInput(url)

        try:
            data = await self._request(url, strategy)
            return parse_pagespeed_response(data, strategy)
        except InsightsError as e:
            logger.error("Error fetching PageSpeed Insights for %s: %s", strategy, e)
            return None

    async def _request(self, url: str, strategy: str) -> dict[str, Any]:
        params = {"url": url, "strategy": strategy, "key": self.api_key}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(self.endpoint, params=params)
        except httpx.TimeoutException as e:
            raise InsightsError(f"Timeout after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise InsightsError(f"HTTP error: {str(e)}") from e

        if not response.is_success:
            raise InsightsError(f"HTTP {response.status_code}: {response.text[:200]}")

        try:
            data = response.json()
        except ValueError as e:
            raise InsightsError("Response body is not valid JSON") from e

        if not isinstance(data, dict):
            raise InsightsError("Response body is not a JSON object")

        return data


def parse_pagespeed_response(data: dict[str, Any], strategy: str) -> PerformanceSnapshot:
    """
    Normalize a PageSpeed API response into a PerformanceSnapshot.

    Args:
        data: Decoded JSON body
        strategy: Strategy the request was made with

    Returns:
        PerformanceSnapshot

    Raises:
        InsightsError: If the performance score is missing or malformed
    """
    lighthouse = data.get("lighthouseResult") or {}

    try:
        raw_score = lighthouse["categories"]["performance"]["score"]
        score = round(float(raw_score) * 100, 2)
    except (KeyError, TypeError, ValueError) as e:
        raise InsightsError("Response is missing lighthouseResult.categories.performance.score") from e

    audits = lighthouse.get("audits")
    if not isinstance(audits, dict):
        audits = {}

    metrics = {}
    for label, audit_id in METRIC_AUDITS:
        audit = audits.get(audit_id)
        if isinstance(audit, dict):
            metrics[label] = str(audit.get("displayValue", MISSING_METRIC))
        else:
            metrics[label] = MISSING_METRIC

    opportunities = []
    diagnostics = []

    for audit in audits.values():
        if not isinstance(audit, dict):
            continue

        details = audit.get("details")
        if not isinstance(details, dict):
            continue
        audit_type = details.get("type")

        if audit_type == "opportunity":
            opportunities.append(
                Opportunity(
                    title=audit.get("title", ""),
                    description=audit.get("description", ""),
                    savings_ms=details.get("overallSavingsMs"),
                )
            )
        elif audit_type == "diagnostic":
            value = audit.get("displayValue")
            if value is None:
                value = audit.get("numericValue")
            diagnostics.append(
                Diagnostic(
                    title=audit.get("title", ""),
                    description=audit.get("description", ""),
                    value=value,
                )
            )

    try:
        return PerformanceSnapshot(
            strategy=strategy,
            score=score,
            metrics=metrics,
            opportunities=tuple(opportunities),
            diagnostics=tuple(diagnostics),
        )
    except ValueError as e:
        raise InsightsError(str(e)) from e
