"""Browser-automation search over the registered news sites, using Playwright."""

import asyncio
import logging
from collections.abc import AsyncIterator, Collection
from contextlib import asynccontextmanager
from dataclasses import dataclass

from playwright.async_api import Browser, ElementHandle, Page, async_playwright
from playwright.async_api import Error as PlaywrightError

from relation_radar.data import Article, SearchQuery
from relation_radar.dates import normalize
from relation_radar.errors import SourceUnavailableError
from relation_radar.sources import NewsSourceConfig, SourceRegistry
from relation_radar.url import absolute_url

PROVIDER_NAME = "browser"

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceOutcome:
    """What one source contributed to a browser search: articles or an error."""

    source: str
    articles: tuple[Article, ...] = ()
    error: SourceUnavailableError | None = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped


async def _text_of(item: ElementHandle, selector: str) -> str:
    element = await item.query_selector(selector)
    if element is None:
        return ""
    return (await element.inner_text()).strip()


async def extract_result(item: ElementHandle, source: NewsSourceConfig) -> Article | None:
    """Read one search-result element into an article.

    Returns ``None`` when the element has no title link.
    """
    selectors = source.selectors
    link = await item.query_selector(selectors.title)
    if link is None:
        return None

    url = absolute_url(source.base_url, await link.get_attribute("href"))
    if url is None:
        return None

    date_text = await _text_of(item, selectors.date)
    return Article(
        url=url,
        title=(await link.inner_text()).strip(),
        source=source.name,
        published_date=normalize(date_text, source.date_format),
        summary=await _text_of(item, selectors.summary),
    )


class BrowserSearcher:
    """Drive each news site's own search page with a headless Chromium.

    Sources run as independent tasks, at most ``max_concurrency`` at a time,
    each in its own browser context. A failing source is recorded in its
    :class:`SourceOutcome` and never affects the others. Once enough articles
    have been collected, sources that have not started yet are skipped; with
    more than one worker this cut-off is approximate.

    Args:
        registry: Sources and their selector sets.
        headless: Run Chromium without a window.
        navigation_timeout_ms: Bound on page navigation.
        selector_timeout_ms: Bound on waiting for the result list to render.
        max_concurrency: Sources searched in parallel. 1 searches them in order.
        default_source_count: Sources used when the query names none.
        viewport: Browser viewport as (width, height).
    """

    def __init__(
        self,
        registry: SourceRegistry,
        *,
        headless: bool = True,
        navigation_timeout_ms: int = 30_000,
        selector_timeout_ms: int = 10_000,
        max_concurrency: int = 1,
        default_source_count: int = 3,
        viewport: tuple[int, int] = (1280, 800),
    ) -> None:
        self._registry = registry
        self._headless = headless
        self._navigation_timeout_ms = navigation_timeout_ms
        self._selector_timeout_ms = selector_timeout_ms
        self._max_concurrency = max(1, max_concurrency)
        self._default_source_count = default_source_count
        self._viewport = {"width": viewport[0], "height": viewport[1]}

    async def search(
        self, query: SearchQuery, *, limit: int, exclude: Collection[str] = ()
    ) -> list[Article]:
        """Search the selected sources and return up to ``limit`` unique articles.

        URLs in ``exclude`` are already held by the caller; they are dropped and
        do not count towards ``limit``.
        """
        outcomes = await self.search_sources(query, limit=limit, exclude=exclude)

        seen_urls: set[str] = set()
        articles: list[Article] = []
        for outcome in outcomes:
            for article in outcome.articles:
                if article.url not in seen_urls:
                    seen_urls.add(article.url)
                    articles.append(article)
        return articles[:limit]

    async def search_sources(
        self, query: SearchQuery, *, limit: int, exclude: Collection[str] = ()
    ) -> list[SourceOutcome]:
        """Run the per-source tasks and return one outcome per selected source.

        Raises:
            SourceUnavailableError: If the browser itself cannot be launched.
        """
        sources = self._registry.select(query.sources, default_count=self._default_source_count)
        if not sources or limit <= 0:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        held = frozenset(exclude)
        found: set[str] = set()

        async with self._browser() as browser:

            async def run(source: NewsSourceConfig) -> SourceOutcome:
                async with semaphore:
                    need = limit - len(found)
                    if need <= 0:
                        return SourceOutcome(source=source.name, skipped=True)

                    logger.info(f"Browser search on {source.name} for {query.terms!r}")
                    try:
                        articles = await self._search_source(
                            browser, source, query, need, skip=held | found
                        )
                    except SourceUnavailableError as e:
                        logger.warning("Browser search failed on %s: %s", source.name, e.reason)
                        return SourceOutcome(source=source.name, error=e)

                    fresh = [a for a in articles if a.url not in found and a.url not in held]
                    found.update(a.url for a in fresh)
                    logger.info(f"{source.name}: {len(fresh)} results")
                    return SourceOutcome(source=source.name, articles=tuple(fresh))

            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(run(source)) for source in sources]

        return [task.result() for task in tasks]

    async def fetch_body(self, url: str, source: NewsSourceConfig) -> str:
        """Open ``url`` and join the text of the source's content elements.

        Raises:
            SourceUnavailableError: On navigation errors or when nothing matches
                the content selector.
        """
        try:
            async with self._browser() as browser, self._page(browser) as page:
                await page.goto(
                    url, timeout=self._navigation_timeout_ms, wait_until="domcontentloaded"
                )
                fragments = await page.locator(source.selectors.content).all_inner_texts()
        except PlaywrightError as e:
            raise SourceUnavailableError(source.name, str(e)) from e

        body = "\n\n".join(text.strip() for text in fragments if text.strip())
        if not body:
            raise SourceUnavailableError(
                source.name, f"no content matched {source.selectors.content!r}"
            )
        return body

    @asynccontextmanager
    async def _browser(self) -> AsyncIterator[Browser]:
        async with async_playwright() as playwright:
            try:
                browser = await playwright.chromium.launch(
                    headless=self._headless, args=BROWSER_ARGS
                )
            except PlaywrightError as e:
                raise SourceUnavailableError(PROVIDER_NAME, f"could not launch browser: {e}") from e
            try:
                yield browser
            finally:
                await browser.close()

    @asynccontextmanager
    async def _page(self, browser: Browser) -> AsyncIterator[Page]:
        context = await browser.new_context(viewport=self._viewport)
        try:
            page = await context.new_page()
            page.set_default_navigation_timeout(self._navigation_timeout_ms)
            page.set_default_timeout(self._selector_timeout_ms)
            yield page
        finally:
            await context.close()

    async def _search_source(
        self,
        browser: Browser,
        source: NewsSourceConfig,
        query: SearchQuery,
        limit: int,
        *,
        skip: Collection[str] = (),
    ) -> list[Article]:
        selectors = source.selectors
        try:
            async with self._page(browser) as page:
                await page.goto(
                    source.search_url,
                    timeout=self._navigation_timeout_ms,
                    wait_until="domcontentloaded",
                )
                await page.fill(selectors.search_input, query.terms)
                await page.click(selectors.search_button)
                await page.wait_for_selector(
                    selectors.result_list, timeout=self._selector_timeout_ms
                )

                articles: list[Article] = []
                for item in await page.query_selector_all(selectors.result_list):
                    if len(articles) >= limit:
                        break
                    article = await extract_result(item, source)
                    if article is None or article.url in skip:
                        continue
                    if query.date_range is not None and not query.date_range.contains(
                        article.published_date
                    ):
                        continue
                    articles.append(article)
                return articles
        except PlaywrightError as e:
            raise SourceUnavailableError(source.name, str(e) or type(e).__name__) from e
