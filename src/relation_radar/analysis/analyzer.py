"""End-to-end subject analysis: retrieve, backfill, score, extract, persist."""

import datetime
import logging
from collections.abc import Iterable, Mapping, Sequence

from relation_radar.analysis.catalog import DEFAULT_LIMIT, list_analyses
from relation_radar.analysis.insights import (
    build_summary_text,
    extract_connections,
    extract_key_events,
    extract_key_people,
    no_data_summary,
)
from relation_radar.analysis.people import PeopleDirectory
from relation_radar.analysis.scoring import compute_metrics, relation_score
from relation_radar.data import (
    AffiliatedPerson,
    AnalysisOptions,
    AnalysisResult,
    AnalysisSummary,
    Article,
    ConnectionCategory,
    DateRange,
    DetailLevel,
    RelationTier,
    SearchQuery,
    SeedReport,
)
from relation_radar.dates import today, utc_now
from relation_radar.errors import (
    NoDataError,
    PersistenceError,
    RadarError,
    SourceUnavailableError,
    UnknownSourceError,
)
from relation_radar.lexicon import DEFAULT_LEXICON, Lexicon
from relation_radar.retrieval import ContentFetcher, RetrievalOrchestrator
from relation_radar.store import AnalysisStore

logger = logging.getLogger(__name__)

DEFAULT_DETAIL_LIMITS: dict[DetailLevel, int] = {
    DetailLevel.BASIC: 10,
    DetailLevel.DETAILED: 20,
    DetailLevel.COMPREHENSIVE: 30,
}
DEFAULT_YEAR_FROM = 2002
DEFAULT_SEED_LIMIT = 20
TOP_N = 5


class RelationAnalyzer:
    """Analyze how a company or person is tied to state institutions and parties.

    Flow:
    1. Expand the subject into search queries (quoted name, name + keywords,
       affiliated people)
    2. Run each query through the retrieval cascade until the detail-level cap
       is reached
    3. Backfill article bodies
    4. Score and extract insights, then persist the result

    Args:
        orchestrator: Retrieval cascade.
        fetcher: Body backfill.
        store: Persisted analyses.
        lexicon: Keyword and entity tables.
        people: Optional roster of affiliated people.
        detail_limits: Article cap per detail level.
        default_year_from: First year searched when options give none.
        keyword_queries_per_category: Keywords combined with the subject name,
            per category.
        people_queries: How many affiliated people get their own queries.
        affiliated_tier: Tier given to affiliated people. None derives it from
            the mention count.
    """

    def __init__(
        self,
        orchestrator: RetrievalOrchestrator,
        fetcher: ContentFetcher,
        store: AnalysisStore,
        *,
        lexicon: Lexicon = DEFAULT_LEXICON,
        people: PeopleDirectory | None = None,
        detail_limits: Mapping[DetailLevel, int] | None = None,
        default_year_from: int = DEFAULT_YEAR_FROM,
        keyword_queries_per_category: int = 5,
        people_queries: int = 3,
        affiliated_tier: RelationTier | None = RelationTier.LOW,
    ) -> None:
        self._orchestrator = orchestrator
        self._fetcher = fetcher
        self._store = store
        self._lexicon = lexicon
        self._people = people
        self._detail_limits = {**DEFAULT_DETAIL_LIMITS, **(detail_limits or {})}
        self._default_year_from = default_year_from
        self._keyword_queries = keyword_queries_per_category
        self._people_queries = people_queries
        self._affiliated_tier = affiliated_tier

    @property
    def orchestrator(self) -> RetrievalOrchestrator:
        return self._orchestrator

    async def search(self, query: SearchQuery) -> list[Article]:
        """Run one query through the retrieval cascade."""
        articles = await self._orchestrator.search(query)
        await self._orchestrator.drain()
        return articles

    async def analyze(
        self, subject: str, options: AnalysisOptions | None = None
    ) -> AnalysisResult:
        """Analyze ``subject`` and store the result, replacing any previous one.

        A subject with no articles yields a zero score and a "no data" summary
        rather than an error.

        Raises:
            ValueError: If the subject is blank or the year range is inverted.
        """
        subject = subject.strip()
        if not subject:
            raise ValueError("Subject name must not be empty")
        options = options or AnalysisOptions()

        date_range = self.date_range_for(options)
        roster = await self._roster(subject) if options.include_individuals else []
        queries = self.build_queries(subject, roster)
        cap = self._detail_limits[options.detail_level]

        logger.info(
            f"Analyzing {subject!r}: {len(queries)} queries, cap {cap}, "
            f"{date_range.start} to {date_range.end}"
        )
        articles = await self._collect(queries, date_range, cap)
        articles = await self._fill_bodies(articles)
        await self._orchestrator.drain()

        result = self.build_result(subject, articles, roster)
        try:
            await self._store.save(result)
        except PersistenceError as e:
            logger.error("Analysis for %s could not be stored: %s", subject, e)
        return result

    async def seed_corpus(
        self,
        keywords: Iterable[str],
        *,
        sources: Sequence[str] = (),
        date_range: DateRange | None = None,
        limit: int = DEFAULT_SEED_LIMIT,
    ) -> SeedReport:
        """Search each keyword and fetch the bodies of the articles found.

        Keywords are searched one after another. A failing keyword or article
        is logged and skipped; the rest of the batch still runs.

        Args:
            keywords: Query texts. Blank entries are ignored.
            sources: Source names to search. Empty means the defaults.
            date_range: Publication window. Defaults to the first analyzed year
                through today.
            limit: Articles per keyword.
        """
        date_range = date_range or DateRange(
            start=f"{self._default_year_from:04d}-01-01", end=today()
        )
        searched = 0
        total_found = 0
        newly_fetched = 0
        failed: list[str] = []

        for keyword in (k.strip() for k in keywords):
            if not keyword:
                continue
            searched += 1
            query = SearchQuery(
                terms=keyword, sources=tuple(sources), date_range=date_range, limit=limit
            )
            try:
                found = await self._orchestrator.search(query)
            except RadarError as e:
                logger.warning(f"Seeding search failed for {keyword!r}: {e}")
                failed.append(keyword)
                continue

            total_found += len(found)
            fetched = 0
            for article in found:
                if article.fetched and article.body:
                    continue
                try:
                    await self._fetcher.ensure_body(article)
                except (SourceUnavailableError, UnknownSourceError) as e:
                    logger.warning(f"Could not fetch {article.url}: {e}")
                    continue
                fetched += 1
            newly_fetched += fetched
            logger.info(f"{keyword!r}: {len(found)} articles, {fetched} bodies fetched")

        await self._orchestrator.drain()
        return SeedReport(
            keyword_count=searched,
            total_found=total_found,
            newly_fetched=newly_fetched,
            failed_keywords=tuple(failed),
        )

    async def analyze_many(
        self, subjects: Iterable[str], options: AnalysisOptions | None = None
    ) -> list[AnalysisResult]:
        """Analyze several subjects in turn, highest relation score first.

        A subject whose analysis fails is logged and left out of the ranking.
        """
        results: list[AnalysisResult] = []
        for subject in subjects:
            try:
                results.append(await self.analyze(subject, options))
            except (RadarError, ValueError) as e:
                logger.error(f"Analysis of {subject!r} failed: {e}")
        return sorted(results, key=lambda r: r.relation_score, reverse=True)

    def get_analysis(self, subject: str) -> AnalysisResult | None:
        """Stored analysis for ``subject`` (case-insensitive), or None."""
        return self._store.get(subject)

    def require_analysis(self, subject: str) -> AnalysisResult:
        """Stored analysis for ``subject``, for callers that need data to report on.

        Raises:
            NoDataError: If the subject was never analyzed or no articles were found.
        """
        result = self._store.get(subject)
        if result is None or result.article_count == 0:
            raise NoDataError(subject)
        return result

    def list_analyses(
        self,
        *,
        filter: str | None = None,
        sort_by: str = "name",
        limit: int = DEFAULT_LIMIT,
    ) -> list[AnalysisSummary]:
        """List stored analyses. See :func:`relation_radar.analysis.catalog.list_analyses`."""
        return list_analyses(self._store.all(), filter=filter, sort_by=sort_by, limit=limit)

    def date_range_for(self, options: AnalysisOptions) -> DateRange:
        year_from = options.year_from or self._default_year_from
        year_to = options.year_to or datetime.datetime.now(tz=datetime.UTC).year
        if year_from > year_to:
            raise ValueError(f"Year range is inverted: {year_from} > {year_to}")
        return DateRange(start=f"{year_from:04d}-01-01", end=f"{year_to:04d}-12-31")

    def build_queries(self, subject: str, roster: Sequence[AffiliatedPerson] = ()) -> list[str]:
        """Expand a subject into query texts, most specific last."""
        quoted = f'"{subject}"'
        n = self._keyword_queries
        queries = [quoted]
        queries += [f"{quoted} {kw}" for kw in self._lexicon.institution_keywords[:n]]
        queries += [f"{quoted} {kw}" for kw in self._lexicon.party_keywords[:n]]

        institution_any = " OR ".join(self._lexicon.institution_keywords[:3])
        party_any = " OR ".join(self._lexicon.party_keywords[:3])
        for person in roster[: self._people_queries]:
            name = f'"{person.name}"'
            queries += [name, f"{name} {institution_any}", f"{name} {party_any}"]
        return queries

    def build_result(
        self,
        subject: str,
        articles: Sequence[Article],
        roster: Sequence[AffiliatedPerson] = (),
    ) -> AnalysisResult:
        """Score ``articles`` and extract the top insights."""
        if not articles:
            return AnalysisResult(
                subject_name=subject,
                summary_text=no_data_summary(subject),
                analyzed_at=utc_now(),
            )

        metrics = compute_metrics(articles, self._lexicon)
        people = extract_key_people(
            articles, roster, self._lexicon, affiliated_tier=self._affiliated_tier
        )
        institutions = extract_connections(
            articles, self._lexicon.institution_entities, ConnectionCategory.INSTITUTION
        )
        parties = extract_connections(
            articles, self._lexicon.party_entities, ConnectionCategory.PARTY
        )
        return AnalysisResult(
            subject_name=subject,
            relation_score=relation_score(metrics.score),
            article_count=len(articles),
            summary_text=build_summary_text(subject, articles, metrics),
            key_events=tuple(extract_key_events(articles, self._lexicon)[:TOP_N]),
            key_people=tuple(people[:TOP_N]),
            institution_connections=tuple(institutions[:TOP_N]),
            party_connections=tuple(parties[:TOP_N]),
            analyzed_at=utc_now(),
            metrics=metrics,
        )

    async def _roster(self, subject: str) -> list[AffiliatedPerson]:
        if self._people is None:
            return []
        try:
            return await self._people.people_for(subject)
        except RadarError as e:
            logger.warning(f"Could not load affiliated people for {subject}: {e}")
            return []

    async def _collect(self, queries: list[str], date_range: DateRange, cap: int) -> list[Article]:
        per_query = max(1, cap // len(queries))
        seen_urls: set[str] = set()
        articles: list[Article] = []

        # Queries run in order and only ever append, so stopping at the cap
        # keeps the same first ``cap`` articles as running them all.
        for text in queries:
            if len(articles) >= cap:
                break
            query = SearchQuery(terms=text, date_range=date_range, limit=per_query)
            try:
                found = await self._orchestrator.search(query)
            except RadarError as e:
                logger.warning(f"Search failed for {text!r}: {e}")
                continue
            for article in found:
                if article.url not in seen_urls:
                    seen_urls.add(article.url)
                    articles.append(article)

        return articles[:cap]

    async def _fill_bodies(self, articles: list[Article]) -> list[Article]:
        filled: list[Article] = []
        for article in articles:
            try:
                filled.append(await self._fetcher.ensure_body(article))
            except (SourceUnavailableError, UnknownSourceError) as e:
                logger.warning(f"Keeping {article.url} without body: {e}")
                filled.append(article)
        return filled
