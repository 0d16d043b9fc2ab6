"""Configuration module for Relation Radar."""

from relation_radar.config.factory import create_from_config
from relation_radar.config.loader import get_default_config_path, load_config
from relation_radar.config.models import (
    AnalysisConfig,
    BrowserConfig,
    HostedSearchConfig,
    LoggingConfig,
    PersonConfig,
    RadarConfig,
    StorageConfig,
)

__all__ = [
    "AnalysisConfig",
    "BrowserConfig",
    "HostedSearchConfig",
    "LoggingConfig",
    "PersonConfig",
    "RadarConfig",
    "StorageConfig",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
