"""Hosted search-and-scrape through the Firecrawl REST API."""

import logging
import os
from collections.abc import Collection
from typing import Any

import httpx

from relation_radar.data import Article, DateRange, SearchQuery
from relation_radar.dates import extract_date, normalize, utc_now
from relation_radar.errors import SourceUnavailableError
from relation_radar.sources import NewsSourceConfig, SourceRegistry
from relation_radar.text import extract_summary
from relation_radar.url import extract_domain

FIRECRAWL_API_URL = "https://api.firecrawl.dev"
PROVIDER_NAME = "firecrawl"
MAX_SEARCH_RESULTS = 100

# Metadata keys Firecrawl fills from <meta> tags, most specific first.
_DATE_METADATA_KEYS = ("publishedTime", "article:published_time", "date", "pubdate")

logger = logging.getLogger(__name__)


def build_search_query(
    terms: str,
    domains: list[str],
    date_range: DateRange | None = None,
    lang: str = "tr",
) -> str:
    """Compose a provider query string.

    Example:
        ``'"Acme" site:hurriyet.com.tr OR site:t24.com.tr after:2020-01-01 lang:tr'``
    """
    parts = [terms.strip()]
    if domains:
        parts.append(" OR ".join(f"site:{domain}" for domain in domains))
    if date_range is not None:
        if date_range.start:
            parts.append(f"after:{date_range.start}")
        if date_range.end:
            parts.append(f"before:{date_range.end}")
    if lang:
        parts.append(f"lang:{lang}")
    return " ".join(part for part in parts if part)


class FirecrawlSearcher:
    """Search and scrape news pages through Firecrawl.

    Search requests ask for markdown bodies alongside the hits, so articles
    returned here usually arrive already fetched.

    Args:
        registry: Source registry used for ``site:`` restrictions and for
            attributing result URLs to named sources.
        api_key: Firecrawl API key (defaults to FIRECRAWL_API_KEY env var).
        api_url: API base URL (defaults to FIRECRAWL_API_URL env var, then the
            public endpoint).
        lang: Language tag appended to search queries.
        timeout: Per-request timeout in seconds.
        scrape_wait_ms: How long Firecrawl waits for a page to settle before scraping.
    """

    def __init__(
        self,
        registry: SourceRegistry,
        *,
        api_key: str | None = None,
        api_url: str | None = None,
        lang: str = "tr",
        timeout: float = 60.0,
        scrape_wait_ms: int = 2000,
    ) -> None:
        self._api_key = api_key or os.environ.get("FIRECRAWL_API_KEY")
        if not self._api_key:
            raise ValueError(
                "Firecrawl API key required. Pass api_key or set FIRECRAWL_API_KEY env var."
            )
        base = api_url or os.environ.get("FIRECRAWL_API_URL") or FIRECRAWL_API_URL
        self._api_url = base.rstrip("/")
        self._registry = registry
        self._lang = lang
        self._timeout = timeout
        self._scrape_wait_ms = scrape_wait_ms

    async def search(
        self, query: SearchQuery, *, limit: int, exclude: Collection[str] = ()
    ) -> list[Article]:
        """Search for up to ``limit`` articles not already in ``exclude``.

        Raises:
            SourceUnavailableError: On transport errors or a non-success response.
        """
        if limit <= 0:
            return []

        text = build_search_query(
            query.terms,
            self._registry.domains(query.sources),
            query.date_range,
            self._lang,
        )
        payload = {
            "query": text,
            "limit": min(limit + len(exclude), MAX_SEARCH_RESULTS),
            "scrapeOptions": {"formats": ["markdown"], "onlyMainContent": True},
        }
        logger.info(f"Firecrawl search: {text}")
        data = await self._post("/v1/search", payload)

        seen_urls: set[str] = set(exclude)
        articles: list[Article] = []
        for item in _result_items(data):
            article = self._to_article(item)
            if article is None or article.url in seen_urls:
                continue
            seen_urls.add(article.url)
            if query.date_range is not None and not query.date_range.contains(
                article.published_date
            ):
                continue
            articles.append(article)

        logger.info(f"Firecrawl returned {len(articles)} usable results")
        return articles[:limit]

    async def fetch_body(self, url: str, source: NewsSourceConfig | None = None) -> str:
        """Scrape the main content of ``url`` as markdown.

        Raises:
            SourceUnavailableError: If the request fails or yields no content.
        """
        payload = {
            "url": url,
            "formats": ["markdown"],
            "onlyMainContent": True,
            "waitFor": self._scrape_wait_ms,
        }
        data = await self._post("/v1/scrape", payload)
        document = data.get("data") or {}
        markdown = (document.get("markdown") if isinstance(document, dict) else None) or ""
        if not markdown.strip():
            raise SourceUnavailableError(PROVIDER_NAME, f"empty scrape result for {url}")
        return markdown.strip()

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    f"{self._api_url}{path}", json=payload, headers=headers
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise SourceUnavailableError(PROVIDER_NAME, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise SourceUnavailableError(PROVIDER_NAME, f"malformed response: {e}") from e

        if not isinstance(data, dict) or not data.get("success", False):
            error = data.get("error") if isinstance(data, dict) else None
            raise SourceUnavailableError(PROVIDER_NAME, error or "request was not successful")
        return data

    def _to_article(self, item: dict[str, Any]) -> Article | None:
        metadata = item.get("metadata") or {}
        url = item.get("url") or metadata.get("sourceURL") or metadata.get("url")
        if not url:
            return None

        markdown = (item.get("markdown") or "").strip()
        title = item.get("title") or metadata.get("title") or ""
        description = item.get("description") or metadata.get("description") or ""

        published = None
        for key in _DATE_METADATA_KEYS:
            value = metadata.get(key)
            if isinstance(value, str):
                published = normalize(value)
            if published:
                break
        if published is None:
            published = extract_date(markdown)

        source = self._registry.for_url(url)
        return Article(
            url=url,
            title=title.strip(),
            source=source.name if source else extract_domain(url),
            published_date=published,
            summary=description.strip() or extract_summary(markdown),
            body=markdown,
            fetched=bool(markdown),
            fetched_at=utc_now() if markdown else None,
        )


def _result_items(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Pull result items out of a search response.

    Older API versions return ``data`` as a list; newer ones nest web results
    under ``data.web``.
    """
    results = data.get("data") or []
    if isinstance(results, dict):
        results = results.get("web") or []
    return [item for item in results if isinstance(item, dict)]
