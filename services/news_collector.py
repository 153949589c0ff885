"""News signal collector backed by the NewsData.io search API."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

from config import settings
from schemas.brief import NewsItem
from services.simulation import CollectorResult, SimulationMode

logger = structlog.get_logger()

FAVICON_URL = "https://www.google.com/s2/favicons?domain={domain}"


class NewsCollector:
    """Fetches recent news about a company, falling back to simulated articles."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key or settings.newsdata_api_key
        self.base_url = settings.newsdata_base_url
        self.max_results = settings.news_max_results
        self.timeout = settings.collector_timeout
        self.transport = transport

    @property
    def is_available(self) -> bool:
        """True when a NewsData API key is configured."""
        return bool(self.api_key)

    async def collect(self, company_name: str, simulation: SimulationMode) -> CollectorResult[List[NewsItem]]:
        if not self.is_available:
            logger.info("NewsData API key not configured, using simulated news", company=company_name)
            return CollectorResult(simulation.news(company_name), is_simulated=True)

        try:
            items = await self._fetch(company_name)
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as e:
            logger.warning("News fetch failed, using simulated news", company=company_name, error=str(e))
            return CollectorResult(simulation.news(company_name), is_simulated=True)

        if items is None:
            logger.warning("NewsData response had no results, using simulated news", company=company_name)
            return CollectorResult(simulation.news(company_name), is_simulated=True)

        logger.info("News collected", company=company_name, articles=len(items))
        return CollectorResult(items, is_simulated=False)

    async def _fetch(self, company_name: str) -> Optional[List[NewsItem]]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(
                f"{self.base_url}/news",
                params={
                    "apikey": self.api_key,
                    "q": company_name,
                    "language": "en",
                    "size": self.max_results,
                },
            )
            response.raise_for_status()
            data = response.json()

        results = data.get("results")
        if not isinstance(results, list):
            return None
        return [self._to_news_item(item) for item in results[:self.max_results]]

    @staticmethod
    def _to_news_item(item: Dict[str, Any]) -> NewsItem:
        source = item.get("source_id") or ""
        return NewsItem(
            title=item.get("title") or "",
            description=item.get("description") or "",
            url=item.get("link") or "",
            published_at=item.get("pubDate") or "",
            source=source,
            source_favicon=FAVICON_URL.format(domain=source) if source else None,
        )


# Global collector instance
news_collector = NewsCollector()
