"""YAML configuration loading utilities."""

from pathlib import Path

import yaml

from relation_radar.config.models import RadarConfig


def load_config(path: Path | str) -> RadarConfig:
    """Load configuration from YAML file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    path = Path(path)
    with path.open(encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    return RadarConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """Get path to default config file."""
    return Path(__file__).resolve().parents[3] / "configs" / "default.yaml"
