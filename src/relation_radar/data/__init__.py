"""Data models for Relation Radar."""

from relation_radar.data.models import (
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
    SeedReport,
    SupportingArticle,
    newest_first,
)

__all__ = [
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
    "SeedReport",
    "SupportingArticle",
    "newest_first",
]
