"""Cascading retrieval: local corpus, then hosted search, then browser automation."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import StrEnum

from relation_radar.data import Article, SearchQuery
from relation_radar.errors import PersistenceError, SourceUnavailableError
from relation_radar.run_logger import RunLogger, RunRecord
from relation_radar.search.base import ArticleSearcher
from relation_radar.store import CorpusStore
from relation_radar.text import parse_terms

logger = logging.getLogger(__name__)


class CascadeState(StrEnum):
    """Stages of one retrieval. A cascade only ever moves forward."""

    LOCAL_ONLY = "local_only"
    API_ATTEMPTED = "api_attempted"
    BROWSER_ATTEMPTED = "browser_attempted"
    DONE = "done"


_STATE_ORDER = list(CascadeState)


@dataclass
class Cascade:
    """Per-query retrieval state.

    ``local`` holds corpus hits in corpus order. ``online`` holds provider hits
    whose URLs were not already collected, in the order they were accepted.
    """

    query: SearchQuery
    local: list[Article] = field(default_factory=list)
    online: list[Article] = field(default_factory=list)
    state: CascadeState = CascadeState.LOCAL_ONLY

    @property
    def collected(self) -> int:
        return len(self.local) + len(self.online)

    @property
    def remaining(self) -> int:
        return max(0, self.query.limit - self.collected)

    @property
    def needs_more(self) -> bool:
        return self.remaining > 0

    @property
    def urls(self) -> set[str]:
        """URLs collected so far, local and online."""
        return {a.url for a in self.local} | {a.url for a in self.online}

    def advance(self, state: CascadeState) -> None:
        """Move to ``state``, which must come after the current one.

        Raises:
            ValueError: On a backward or repeated transition.
        """
        if _STATE_ORDER.index(state) <= _STATE_ORDER.index(self.state):
            raise ValueError(f"Cannot move cascade from {self.state} to {state}")
        self.state = state

    def add_online(self, articles: list[Article]) -> list[Article]:
        """Accept online hits with unseen URLs until the limit is reached.

        Returns:
            The accepted articles.
        """
        seen = self.urls
        accepted: list[Article] = []
        for article in articles:
            if not self.needs_more:
                break
            if article.url in seen:
                continue
            seen.add(article.url)
            self.online.append(article)
            accepted.append(article)
        return accepted

    def merged(self) -> list[Article]:
        """Local hits first, then online hits, capped at the query limit."""
        return (self.local + self.online)[: self.query.limit]


class RetrievalOrchestrator:
    """Answer a query from the corpus, topping up from online providers.

    Corpus hits are authoritative: when they already fill the limit no provider
    is called. Otherwise the hosted searcher and then the browser searcher are
    asked for what is still missing. Provider failures are logged and skipped.
    New online hits are written to the corpus by background tasks, so a failed
    write never fails the search; :meth:`drain` waits for them.

    Args:
        store: The article corpus.
        hosted: Hosted search-and-scrape provider, or None when not configured.
        browser: Browser-automation provider, or None.
        run_logger: Optional RunLogger recording each cascade stage.
    """

    def __init__(
        self,
        store: CorpusStore,
        *,
        hosted: ArticleSearcher | None = None,
        browser: ArticleSearcher | None = None,
        run_logger: RunLogger | None = None,
    ) -> None:
        self._store = store
        self._hosted = hosted
        self._browser = browser
        self._run_logger = run_logger
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def store(self) -> CorpusStore:
        return self._store

    async def search(self, query: SearchQuery) -> list[Article]:
        """Retrieve up to ``query.limit`` articles, deduplicated by URL.

        A query with no terms is answered from the corpus alone.
        """
        cascade = await self.run_cascade(query)
        return cascade.merged()

    async def run_cascade(self, query: SearchQuery) -> Cascade:
        """Run the cascade and return its final state."""
        record = self._run_logger.start_run(query) if self._run_logger else None
        cascade = Cascade(query=query)

        t0 = time.monotonic()
        cascade.local = self._store.find_by_query(query)
        self._log_stage(
            record,
            "local",
            type(self._store).__name__,
            {"terms": query.terms, "limit": query.limit},
            {"article_count": len(cascade.local)},
            time.monotonic() - t0,
        )
        logger.info(f"Corpus returned {len(cascade.local)} of {query.limit} for {query.terms!r}")

        if parse_terms(query.terms):
            if cascade.needs_more and self._hosted is not None:
                cascade.advance(CascadeState.API_ATTEMPTED)
                await self._attempt(cascade, self._hosted, "hosted_api", record)
            if cascade.needs_more and self._browser is not None:
                cascade.advance(CascadeState.BROWSER_ATTEMPTED)
                await self._attempt(cascade, self._browser, "browser", record)
        cascade.advance(CascadeState.DONE)

        merged = cascade.merged()
        self._log_stage(
            record,
            "merge",
            "url_dedup",
            {"local": len(cascade.local), "online": len(cascade.online)},
            {"article_count": len(merged)},
            0.0,
        )
        if self._run_logger:
            await asyncio.to_thread(self._run_logger.finish_run, record, merged)

        self._persist(cascade.online)
        return cascade

    async def drain(self) -> None:
        """Wait for outstanding corpus writes to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _attempt(
        self,
        cascade: Cascade,
        searcher: ArticleSearcher,
        stage: str,
        record: RunRecord | None,
    ) -> None:
        need = cascade.remaining
        component = type(searcher).__name__
        t0 = time.monotonic()
        try:
            found = await searcher.search(cascade.query, limit=need, exclude=cascade.urls)
        except SourceUnavailableError as e:
            logger.warning(f"{component} failed, falling through: {e}")
            self._log_stage(
                record,
                stage,
                component,
                {"limit": need},
                None,
                time.monotonic() - t0,
                error=str(e),
            )
            return

        accepted = cascade.add_online(found)
        self._log_stage(
            record,
            stage,
            component,
            {"limit": need},
            accepted,
            time.monotonic() - t0,
        )
        logger.info(f"{component} added {len(accepted)} new articles")

    def _persist(self, articles: list[Article]) -> None:
        if not articles:
            return
        task = asyncio.create_task(self._write_all(articles))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write_all(self, articles: list[Article]) -> None:
        for article in articles:
            try:
                await self._store.upsert(article)
            except PersistenceError as e:
                logger.error("Failed to persist %s: %s", article.url, e)

    def _log_stage(
        self,
        record: RunRecord | None,
        stage: str,
        component: str,
        input_data: object,
        output_data: object,
        duration: float,
        error: str | None = None,
    ) -> None:
        if self._run_logger:
            self._run_logger.log_stage(
                record, stage, component, input_data, output_data, duration, error
            )
