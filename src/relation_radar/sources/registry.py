"""Registry of news sources that can be searched and scraped."""

import logging
from collections.abc import Iterable, Iterator

from pydantic import BaseModel

from relation_radar.errors import UnknownSourceError
from relation_radar.url import extract_domain

logger = logging.getLogger(__name__)


class SourceSelectors(BaseModel):
    """CSS selectors for a source's search page and article pages."""

    search_input: str
    search_button: str
    result_list: str
    title: str
    date: str
    summary: str
    content: str

    model_config = {"frozen": True}


class NewsSourceConfig(BaseModel):
    """Static description of one news site."""

    name: str
    base_url: str
    search_url: str
    selectors: SourceSelectors
    date_format: str | None = "DD.MM.YYYY"

    model_config = {"frozen": True}

    @property
    def domain(self) -> str:
        """Hostname without the ``www.`` prefix."""
        return extract_domain(self.base_url)


def _source(
    name: str,
    base_url: str,
    search_url: str,
    *,
    search_input: str,
    search_button: str,
    result_list: str,
    title: str,
    summary: str,
    content: str,
) -> NewsSourceConfig:
    return NewsSourceConfig(
        name=name,
        base_url=base_url,
        search_url=search_url,
        selectors=SourceSelectors(
            search_input=search_input,
            search_button=search_button,
            result_list=result_list,
            title=title,
            date=".date",
            summary=summary,
            content=content,
        ),
    )


DEFAULT_SOURCES: tuple[NewsSourceConfig, ...] = (
    _source(
        "Hürriyet",
        "https://www.hurriyet.com.tr",
        "https://www.hurriyet.com.tr/arama/",
        search_input='input[name="query"]',
        search_button='button[type="submit"]',
        result_list=".searchResults .item",
        title="h3.title a",
        summary=".spot",
        content=".news-content p",
    ),
    _source(
        "Milliyet",
        "https://www.milliyet.com.tr",
        "https://www.milliyet.com.tr/arama/",
        search_input="input#search",
        search_button="button.searchButton",
        result_list=".archive-list .list-item",
        title="h3 a",
        summary=".spot",
        content=".article-content p",
    ),
    _source(
        "Cumhuriyet",
        "https://www.cumhuriyet.com.tr",
        "https://www.cumhuriyet.com.tr/arama",
        search_input='input[name="query"]',
        search_button="button.search-button",
        result_list=".search-list .item",
        title="h3.title a",
        summary=".summary",
        content=".news-text p",
    ),
    _source(
        "Sabah",
        "https://www.sabah.com.tr",
        "https://www.sabah.com.tr/arama",
        search_input='input[name="q"]',
        search_button="button.btn-search",
        result_list=".search-results .result-item",
        title="h3 a",
        summary=".summary",
        content=".article-body p",
    ),
    _source(
        "HaberTürk",
        "https://www.haberturk.com",
        "https://www.haberturk.com/arama",
        search_input='input[name="q"]',
        search_button='button[type="submit"]',
        result_list=".haberler .haber",
        title="h2 a",
        summary=".spot",
        content=".news-content p",
    ),
    _source(
        "Sözcü",
        "https://www.sozcu.com.tr",
        "https://www.sozcu.com.tr/arama/",
        search_input='input[name="s"]',
        search_button='button[type="submit"]',
        result_list=".news-list-item",
        title="h3 a",
        summary=".spot",
        content=".content p",
    ),
    _source(
        "T24",
        "https://t24.com.tr",
        "https://t24.com.tr/arama",
        search_input='input[name="q"]',
        search_button="button.search-button",
        result_list=".search-results .search-item",
        title="h3 a",
        summary=".summary",
        content=".article-body p",
    ),
    _source(
        "Dünya",
        "https://www.dunya.com",
        "https://www.dunya.com/arama",
        search_input='input[name="word"]',
        search_button="button.search-button",
        result_list=".search-items .item",
        title="h3 a",
        summary=".summary",
        content=".article-content p",
    ),
    _source(
        "Bloomberg HT",
        "https://www.bloomberght.com",
        "https://www.bloomberght.com/arama",
        search_input='input[name="q"]',
        search_button='button[type="submit"]',
        result_list=".search-item",
        title="h3 a",
        summary=".summary",
        content=".article-body p",
    ),
)


class SourceRegistry:
    """Ordered, name-indexed collection of news sources.

    Args:
        sources: Source configurations, in priority order.
    """

    def __init__(self, sources: Iterable[NewsSourceConfig] = DEFAULT_SOURCES) -> None:
        self._sources = list(sources)
        self._by_name = {source.name.casefold(): source for source in self._sources}

    def __iter__(self) -> Iterator[NewsSourceConfig]:
        return iter(self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    def get(self, name: str) -> NewsSourceConfig:
        """Look up a source by name, case-insensitively.

        Raises:
            UnknownSourceError: If no source has that name.
        """
        source = self._by_name.get(name.casefold())
        if source is None:
            raise UnknownSourceError(name)
        return source

    def find(self, name: str) -> NewsSourceConfig | None:
        """Like :meth:`get` but returns ``None`` for unknown names."""
        return self._by_name.get(name.casefold())

    def for_url(self, url: str) -> NewsSourceConfig | None:
        """Find the source whose host the URL belongs to."""
        host = extract_domain(url)
        for source in self._sources:
            if source.domain and source.domain in host:
                return source
        return None

    def select(
        self, names: Iterable[str] = (), *, default_count: int = 3
    ) -> list[NewsSourceConfig]:
        """Pick sources for a search.

        Args:
            names: Explicit source names. Unknown names are skipped with a warning.
            default_count: How many leading sources to use when ``names`` is empty.
        """
        names = list(names)
        if not names:
            return self._sources[:default_count]

        selected: list[NewsSourceConfig] = []
        for name in names:
            source = self.find(name)
            if source is None:
                logger.warning("Ignoring unknown source filter %r", name)
                continue
            if source not in selected:
                selected.append(source)
        return selected

    def domains(self, names: Iterable[str] = ()) -> list[str]:
        """Hostnames for ``site:`` restrictions.

        Names not in the registry are passed through as-is, so a caller can
        restrict to an arbitrary domain.
        """
        names = list(names)
        if not names:
            return [source.domain for source in self._sources]
        domains: list[str] = []
        for name in names:
            source = self.find(name)
            domains.append(source.domain if source else name)
        return domains
