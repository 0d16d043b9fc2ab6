from relation_radar.search.base import ArticleSearcher
from relation_radar.search.browser import BrowserSearcher, SourceOutcome
from relation_radar.search.firecrawl import FirecrawlSearcher, build_search_query

__all__ = [
    "ArticleSearcher",
    "BrowserSearcher",
    "FirecrawlSearcher",
    "SourceOutcome",
    "build_search_query",
]
