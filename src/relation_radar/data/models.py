"""Core data models for Relation Radar."""

from dataclasses import dataclass, field
from enum import StrEnum


class DetailLevel(StrEnum):
    """How many articles an analysis run gathers."""

    BASIC = "basic"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class RelationTier(StrEnum):
    """Categorical bucket derived from a mention count."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_count(cls, count: int) -> "RelationTier":
        """Bucket a mention count: more than 5 is high, more than 2 is medium."""
        if count > 5:
            return cls.HIGH
        if count > 2:
            return cls.MEDIUM
        return cls.LOW


class ConnectionCategory(StrEnum):
    """Kind of entity a connection points at."""

    INSTITUTION = "institution"
    PARTY = "party"


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range. Bounds are ``YYYY-MM-DD`` strings."""

    start: str | None = None
    end: str | None = None

    def contains(self, date: str | None) -> bool:
        """Whether ``date`` falls inside the range.

        Unknown dates cannot be shown to be out of range, so they pass.
        """
        if date is None:
            return True
        if self.start and date < self.start:
            return False
        if self.end and date > self.end:
            return False
        return True


@dataclass(frozen=True)
class SearchQuery:
    """A retrieval request. Not persisted."""

    terms: str
    sources: tuple[str, ...] = ()
    date_range: DateRange | None = None
    limit: int = 10


@dataclass(frozen=True)
class Article:
    """A news article, identified by its URL."""

    url: str
    title: str = ""
    source: str = ""
    published_date: str | None = None
    summary: str = ""
    body: str = ""
    fetched: bool = False
    fetched_at: str | None = None

    @property
    def text(self) -> str:
        """Title, body and summary joined for keyword scanning."""
        return f"{self.title} {self.body} {self.summary}"


@dataclass(frozen=True)
class KeywordCount:
    keyword: str
    count: int


@dataclass(frozen=True)
class RelationMetrics:
    """Keyword statistics computed over a set of articles."""

    institution_mention_count: int = 0
    party_mention_count: int = 0
    total_word_count: int = 0
    score: float = 0.0
    top_keywords: tuple[KeywordCount, ...] = ()


@dataclass(frozen=True)
class KeyEvent:
    date: str | None
    title: str
    description: str
    source: str
    url: str


@dataclass(frozen=True)
class PersonMention:
    name: str
    role: str
    mention_count: int
    relation_tier: RelationTier = RelationTier.LOW


@dataclass(frozen=True)
class SupportingArticle:
    title: str
    date: str | None
    url: str


@dataclass(frozen=True)
class ConnectionRecord:
    """An institution or party entity and the articles that mention it."""

    entity_name: str
    mention_count: int
    category: ConnectionCategory
    supporting_articles: tuple[SupportingArticle, ...] = ()


@dataclass(frozen=True)
class AffiliatedPerson:
    """An individual tied to a subject, e.g. an executive or board member."""

    name: str
    role: str = "Unknown"


@dataclass(frozen=True)
class AnalysisOptions:
    """Knobs for a single analysis run."""

    year_from: int | None = None
    year_to: int | None = None
    include_individuals: bool = True
    detail_level: DetailLevel = DetailLevel.DETAILED


@dataclass(frozen=True)
class AnalysisResult:
    """One subject's analysis snapshot."""

    subject_name: str
    relation_score: float = 0.0
    article_count: int = 0
    summary_text: str = ""
    key_events: tuple[KeyEvent, ...] = ()
    key_people: tuple[PersonMention, ...] = ()
    institution_connections: tuple[ConnectionRecord, ...] = ()
    party_connections: tuple[ConnectionRecord, ...] = ()
    analyzed_at: str = ""
    metrics: RelationMetrics = field(default_factory=RelationMetrics)


@dataclass(frozen=True)
class AnalysisSummary:
    """Compact listing row for a stored analysis."""

    name: str
    relation_score: float
    article_count: int
    summary: str
    last_analyzed: str


@dataclass(frozen=True)
class SeedReport:
    """Outcome of seeding the corpus with a batch of keyword searches."""

    keyword_count: int
    total_found: int = 0
    newly_fetched: int = 0
    failed_keywords: tuple[str, ...] = ()


def newest_first(articles: list[Article]) -> list[Article]:
    """Sort articles by publication date, newest first, unknown dates last."""
    return sorted(articles, key=lambda a: a.published_date or "", reverse=True)
