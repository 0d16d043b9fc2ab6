"""Pydantic configuration models for Relation Radar."""

from pydantic import BaseModel, Field, field_validator

from relation_radar.data import DetailLevel
from relation_radar.sources import DEFAULT_SOURCES, NewsSourceConfig

# ============================================================
# Storage
# ============================================================


class StorageConfig(BaseModel):
    """Where the corpus and analyses live on disk."""

    data_dir: str = "data"
    corpus_file: str = "news-articles.json"
    analyses_file: str = "analyses.json"
    snapshots: bool = True

    model_config = {"frozen": True}


# ============================================================
# Provider Configs
# ============================================================


class HostedSearchConfig(BaseModel):
    """Configuration for the Firecrawl search-and-scrape provider.

    The API key is never stored here; it comes from FIRECRAWL_API_KEY.
    """

    enabled: bool = True
    api_url: str | None = None
    lang: str = "tr"
    timeout_seconds: float = 60.0
    scrape_wait_ms: int = 2000

    model_config = {"frozen": True}


class BrowserConfig(BaseModel):
    """Configuration for the Playwright fallback."""

    enabled: bool = True
    headless: bool = True
    navigation_timeout_ms: int = Field(default=30_000, gt=0)
    selector_timeout_ms: int = Field(default=10_000, gt=0)
    max_concurrency: int = Field(default=1, ge=1)
    default_source_count: int = Field(default=3, ge=1)
    viewport_width: int = 1280
    viewport_height: int = 800

    model_config = {"frozen": True}


# ============================================================
# Analysis Config
# ============================================================


def _default_detail_limits() -> dict[DetailLevel, int]:
    return {DetailLevel.BASIC: 10, DetailLevel.DETAILED: 20, DetailLevel.COMPREHENSIVE: 30}


class AnalysisConfig(BaseModel):
    """Knobs for subject analysis."""

    default_year_from: int = 2002
    detail_limits: dict[DetailLevel, int] = Field(default_factory=_default_detail_limits)
    keyword_queries_per_category: int = Field(default=5, ge=0)
    people_queries: int = Field(default=3, ge=0)

    model_config = {"frozen": True}

    @field_validator("detail_limits")
    @classmethod
    def limits_must_be_positive(cls, v: dict[DetailLevel, int]) -> dict[DetailLevel, int]:
        for level, limit in v.items():
            if limit < 1:
                raise ValueError(f"detail limit for {level} must be at least 1")
        return v


class PersonConfig(BaseModel):
    """One person affiliated with a subject."""

    name: str
    role: str = "Unknown"

    model_config = {"frozen": True}


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Configuration for per-search run logs."""

    enabled: bool = False
    log_dir: str = "logs"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class RadarConfig(BaseModel):
    """Root configuration for Relation Radar."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    hosted_search: HostedSearchConfig = Field(default_factory=HostedSearchConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sources: list[NewsSourceConfig] = Field(default_factory=lambda: list(DEFAULT_SOURCES))
    lexicon_path: str | None = None
    people: dict[str, list[PersonConfig]] = Field(default_factory=dict)

    model_config = {"frozen": True}
