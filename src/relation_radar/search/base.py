from collections.abc import Collection
from typing import Protocol

from relation_radar.data import Article, SearchQuery
from relation_radar.sources import NewsSourceConfig


class ArticleSearcher(Protocol):
    """Interface for an online provider of articles and article bodies.

    Implementations raise ``SourceUnavailableError`` for provider failures so
    callers can fall back to the next provider.
    """

    async def search(
        self, query: SearchQuery, *, limit: int, exclude: Collection[str] = ()
    ) -> list[Article]:
        """Find up to ``limit`` articles matching the query.

        Args:
            query: Query terms plus optional source and date-range filters.
            limit: Maximum number of articles to return.
            exclude: URLs the caller already holds. They are neither returned
                nor counted towards ``limit``.

        Returns:
            Articles deduplicated by URL.
        """
        ...

    async def fetch_body(self, url: str, source: NewsSourceConfig) -> str:
        """Return the full text of the article at ``url``."""
        ...
