from relation_radar.sources.registry import (
    DEFAULT_SOURCES,
    NewsSourceConfig,
    SourceRegistry,
    SourceSelectors,
)

__all__ = [
    "DEFAULT_SOURCES",
    "NewsSourceConfig",
    "SourceRegistry",
    "SourceSelectors",
]
