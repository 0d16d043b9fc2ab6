"""Backfill article bodies from the hosted provider or the browser."""

import logging
from dataclasses import replace

from relation_radar.data import Article
from relation_radar.dates import utc_now
from relation_radar.errors import PersistenceError, SourceUnavailableError
from relation_radar.search.base import ArticleSearcher
from relation_radar.sources import NewsSourceConfig, SourceRegistry
from relation_radar.store import CorpusStore

logger = logging.getLogger(__name__)


class ContentFetcher:
    """Make sure an article carries its full text.

    Args:
        store: Corpus that receives the filled article.
        registry: Sources, used to resolve an article's content selector.
        hosted: Hosted scraper, tried first.
        browser: Browser fallback.
    """

    def __init__(
        self,
        store: CorpusStore,
        registry: SourceRegistry,
        *,
        hosted: ArticleSearcher | None = None,
        browser: ArticleSearcher | None = None,
    ) -> None:
        self._store = store
        self._registry = registry
        self._hosted = hosted
        self._browser = browser

    async def ensure_body(self, article: Article) -> Article:
        """Return ``article`` with a body, fetching and storing it if needed.

        Already-fetched articles with a body come back unchanged.

        Raises:
            UnknownSourceError: If the article's source is not registered.
            SourceUnavailableError: If every fetch path failed.
        """
        if article.fetched and article.body:
            return article

        source = self._registry.get(article.source)
        body = await self._fetch(article.url, source)
        filled = replace(article, body=body, fetched=True, fetched_at=utc_now())

        try:
            return await self._store.upsert(filled)
        except PersistenceError as e:
            logger.error("Fetched body for %s could not be stored: %s", article.url, e)
            return filled

    async def _fetch(self, url: str, source: NewsSourceConfig) -> str:
        reasons: list[str] = []
        for fetcher in (self._hosted, self._browser):
            if fetcher is None:
                continue
            try:
                return await fetcher.fetch_body(url, source)
            except SourceUnavailableError as e:
                logger.warning(f"{type(fetcher).__name__} could not fetch {url}: {e.reason}")
                reasons.append(e.reason)
        reason = "; ".join(reasons) or "no body fetcher configured"
        raise SourceUnavailableError(source.name, reason)
