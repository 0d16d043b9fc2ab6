"""Relation Radar: Turkish press coverage retrieval and government/party relation scoring."""

from relation_radar.analysis import (
    PeopleDirectory,
    RelationAnalyzer,
    StaticPeopleDirectory,
    build_summary_text,
    compute_metrics,
    extract_connections,
    extract_key_events,
    extract_key_people,
    list_analyses,
    relation_score,
)
from relation_radar.config import RadarConfig, create_from_config, load_config
from relation_radar.data import (
    AffiliatedPerson,
    AnalysisOptions,
    AnalysisResult,
    AnalysisSummary,
    Article,
    ConnectionCategory,
    ConnectionRecord,
    DateRange,
    DetailLevel,
    KeyEvent,
    KeywordCount,
    PersonMention,
    RelationMetrics,
    RelationTier,
    SearchQuery,
    SupportingArticle,
)
from relation_radar.dates import extract_date, normalize
from relation_radar.errors import (
    InvalidDateError,
    NoDataError,
    PersistenceError,
    RadarError,
    SourceUnavailableError,
    UnknownSourceError,
)
from relation_radar.lexicon import DEFAULT_LEXICON, Lexicon, load_lexicon
from relation_radar.retrieval import Cascade, CascadeState, ContentFetcher, RetrievalOrchestrator
from relation_radar.run_logger import RunLogger
from relation_radar.search import ArticleSearcher, BrowserSearcher, FirecrawlSearcher
from relation_radar.sources import DEFAULT_SOURCES, NewsSourceConfig, SourceRegistry
from relation_radar.store import AnalysisStore, CorpusStore
from relation_radar.url import extract_domain

__all__ = [
    # Models
    "AffiliatedPerson",
    "AnalysisOptions",
    "AnalysisResult",
    "AnalysisSummary",
    "Article",
    "ConnectionCategory",
    "ConnectionRecord",
    "DateRange",
    "DetailLevel",
    "KeyEvent",
    "KeywordCount",
    "PersonMention",
    "RelationMetrics",
    "RelationTier",
    "SearchQuery",
    "SupportingArticle",
    # Errors
    "InvalidDateError",
    "NoDataError",
    "PersistenceError",
    "RadarError",
    "SourceUnavailableError",
    "UnknownSourceError",
    # Functions
    "build_summary_text",
    "compute_metrics",
    "extract_connections",
    "extract_date",
    "extract_domain",
    "extract_key_events",
    "extract_key_people",
    "list_analyses",
    "load_lexicon",
    "normalize",
    "relation_score",
    # Protocols
    "ArticleSearcher",
    "PeopleDirectory",
    # Static tables
    "DEFAULT_LEXICON",
    "DEFAULT_SOURCES",
    "Lexicon",
    "NewsSourceConfig",
    "SourceRegistry",
    "StaticPeopleDirectory",
    # Storage
    "AnalysisStore",
    "CorpusStore",
    # Searchers
    "BrowserSearcher",
    "FirecrawlSearcher",
    # Retrieval
    "Cascade",
    "CascadeState",
    "ContentFetcher",
    "RetrievalOrchestrator",
    # Analysis
    "RelationAnalyzer",
    # Logging
    "RunLogger",
    # Config
    "RadarConfig",
    "create_from_config",
    "load_config",
]
