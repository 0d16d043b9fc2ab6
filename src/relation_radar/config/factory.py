"""Factory functions to create components from configuration."""

import logging
import os
from pathlib import Path

from relation_radar.analysis import RelationAnalyzer, StaticPeopleDirectory
from relation_radar.config.models import (
    BrowserConfig,
    HostedSearchConfig,
    PersonConfig,
    RadarConfig,
)
from relation_radar.data import AffiliatedPerson
from relation_radar.lexicon import DEFAULT_LEXICON, Lexicon, load_lexicon
from relation_radar.retrieval import ContentFetcher, RetrievalOrchestrator
from relation_radar.run_logger import RunLogger
from relation_radar.search import BrowserSearcher, FirecrawlSearcher
from relation_radar.sources import SourceRegistry
from relation_radar.store import AnalysisStore, CorpusStore

logger = logging.getLogger(__name__)


def create_hosted_searcher(
    config: HostedSearchConfig, registry: SourceRegistry
) -> FirecrawlSearcher | None:
    """Create the Firecrawl searcher, or None when disabled or no API key is set."""
    if not config.enabled:
        return None
    if not os.environ.get("FIRECRAWL_API_KEY"):
        logger.info("FIRECRAWL_API_KEY not set, hosted search disabled")
        return None
    return FirecrawlSearcher(
        registry,
        api_url=config.api_url,
        lang=config.lang,
        timeout=config.timeout_seconds,
        scrape_wait_ms=config.scrape_wait_ms,
    )


def create_browser_searcher(
    config: BrowserConfig, registry: SourceRegistry
) -> BrowserSearcher | None:
    """Create the Playwright searcher, or None when disabled."""
    if not config.enabled:
        return None
    return BrowserSearcher(
        registry,
        headless=config.headless,
        navigation_timeout_ms=config.navigation_timeout_ms,
        selector_timeout_ms=config.selector_timeout_ms,
        max_concurrency=config.max_concurrency,
        default_source_count=config.default_source_count,
        viewport=(config.viewport_width, config.viewport_height),
    )


def create_lexicon(config: RadarConfig) -> Lexicon:
    if config.lexicon_path is None:
        return DEFAULT_LEXICON
    return load_lexicon(config.lexicon_path)


def create_people_directory(roster: dict[str, list[PersonConfig]]) -> StaticPeopleDirectory:
    return StaticPeopleDirectory(
        {
            subject: [AffiliatedPerson(name=p.name, role=p.role) for p in people]
            for subject, people in roster.items()
        }
    )


def create_from_config(
    config: RadarConfig,
    *,
    log_override: bool | None = None,
    log_dir_override: str | None = None,
) -> tuple[RelationAnalyzer, RunLogger | None]:
    """Wire a complete analyzer from root config.

    Args:
        config: Root configuration.
        log_override: Override the config's logging.enabled setting.
        log_dir_override: Override the config's logging.log_dir setting.

    Returns:
        Tuple of (analyzer, run_logger). run_logger is None if logging is disabled.
    """
    log_enabled = log_override if log_override is not None else config.logging.enabled
    log_dir = Path(log_dir_override if log_dir_override is not None else config.logging.log_dir)

    run_logger: RunLogger | None = None
    if log_enabled:
        run_logger = RunLogger(log_dir=log_dir, enabled=True)

    data_dir = Path(config.storage.data_dir)
    registry = SourceRegistry(config.sources)
    corpus = CorpusStore(data_dir / config.storage.corpus_file)
    analyses = AnalysisStore(
        data_dir / config.storage.analyses_file,
        snapshot_dir=data_dir / "companies" if config.storage.snapshots else None,
    )

    hosted = create_hosted_searcher(config.hosted_search, registry)
    browser = create_browser_searcher(config.browser, registry)

    orchestrator = RetrievalOrchestrator(
        corpus, hosted=hosted, browser=browser, run_logger=run_logger
    )
    fetcher = ContentFetcher(corpus, registry, hosted=hosted, browser=browser)

    analyzer = RelationAnalyzer(
        orchestrator,
        fetcher,
        analyses,
        lexicon=create_lexicon(config),
        people=create_people_directory(config.people),
        detail_limits=config.analysis.detail_limits,
        default_year_from=config.analysis.default_year_from,
        keyword_queries_per_category=config.analysis.keyword_queries_per_category,
        people_queries=config.analysis.people_queries,
    )
    return (analyzer, run_logger)
