"""
GNews headline client.

Fetches top headlines and flattens each article to the fields the report
prompt needs.
"""

import httpx
import structlog
from dataclasses import dataclass, asdict
from typing import List, Optional

from newsdesk.core.config import settings

logger = structlog.get_logger()


class NewsFetchError(Exception):
    pass


@dataclass
class Article:
    title: str
    description: str
    source: str
    content: str
    url: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_gnews(cls, data: dict) -> "Article":
        description = data.get("description") or ""
        return cls(
            title=data.get("title") or "",
            description=description,
            source=(data.get("source") or {}).get("name") or "",
            content=data.get("content") or description,
            url=data.get("url") or "",
        )


class GNewsClient:
    """Thin async wrapper around the GNews top-headlines endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        country: Optional[str] = None,
        lang: Optional[str] = None,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GNEWS_API_KEY
        self.base_url = (base_url or settings.GNEWS_BASE_URL).rstrip("/")
        self.country = country or settings.GNEWS_COUNTRY
        self.lang = lang or settings.GNEWS_LANG
        self.timeout = timeout
        self._transport = transport

    async def _get_articles(self, count: int) -> List[dict]:
        if not self.api_key:
            raise NewsFetchError("GNews API key not found.")

        params = {
            "lang": self.lang,
            "country": self.country,
            "max": count,
            "apikey": self.api_key,
        }
        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.get(f"{self.base_url}/top-headlines", params=params)
            if response.status_code != 200:
                raise NewsFetchError(
                    f"GNews returned {response.status_code}: {response.text[:200]}"
                )
            payload = response.json()
            if not isinstance(payload, dict):
                raise NewsFetchError("GNews returned an unexpected body")
            return payload.get("articles") or []

    async def fetch_top_headlines(self, count: Optional[int] = None) -> Optional[List[Article]]:
        """
        Returns the top headlines, an empty list when there are none, or
        None when the provider could not be reached or sent a malformed body.
        """
        count = count or settings.NEWS_MAX_ARTICLES
        try:
            raw_articles = await self._get_articles(count)
            articles = [Article.from_gnews(item) for item in raw_articles]
        except (httpx.HTTPError, NewsFetchError, ValueError, AttributeError, TypeError) as e:
            logger.warning("news_fetch_failed", error=str(e))
            return None

        logger.info("news_fetched", count=len(articles))
        return articles
