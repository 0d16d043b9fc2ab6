"""Tests for configuration loading and factory functions."""

from __future__ import annotations

from pathlib import Path
from tempfile import NamedTemporaryFile

import pytest
from pydantic import ValidationError

from relation_radar.analysis import RelationAnalyzer
from relation_radar.config import (
    AnalysisConfig,
    BrowserConfig,
    HostedSearchConfig,
    RadarConfig,
    StorageConfig,
    create_from_config,
    get_default_config_path,
    load_config,
)
from relation_radar.config.factory import (
    create_browser_searcher,
    create_hosted_searcher,
    create_people_directory,
)
from relation_radar.config.models import PersonConfig
from relation_radar.data import AffiliatedPerson, DetailLevel
from relation_radar.run_logger import RunLogger
from relation_radar.search import BrowserSearcher, FirecrawlSearcher
from relation_radar.sources import SourceRegistry


def _write_yaml(content: str) -> Path:
    with NamedTemporaryFile(mode="w", suffix=".yaml", delete=False, encoding="utf-8") as f:
        f.write(content)
        return Path(f.name)


class TestConfigModels:
    """Tests for Pydantic config models."""

    def test_root_defaults(self) -> None:
        config = RadarConfig()
        assert config.storage.corpus_file == "news-articles.json"
        assert config.hosted_search.enabled is True
        assert config.browser.max_concurrency == 1
        assert config.logging.enabled is False
        assert len(config.sources) == 9
        assert config.people == {}

    def test_detail_limits_default(self) -> None:
        config = AnalysisConfig()
        assert config.detail_limits == {
            DetailLevel.BASIC: 10,
            DetailLevel.DETAILED: 20,
            DetailLevel.COMPREHENSIVE: 30,
        }

    def test_detail_limits_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisConfig(detail_limits={DetailLevel.BASIC: 0})

    def test_browser_concurrency_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            BrowserConfig(max_concurrency=0)

    def test_models_are_frozen(self) -> None:
        config = StorageConfig()
        with pytest.raises(ValidationError):
            config.data_dir = "elsewhere"  # type: ignore[misc]


class TestConfigLoading:
    """Tests for YAML config loading."""

    def test_load_config(self) -> None:
        path = _write_yaml(
            """
storage:
  data_dir: /tmp/radar
browser:
  enabled: false
analysis:
  detail_limits:
    basic: 5
people:
  Örnek Holding:
    - name: Ali Veli
      role: CEO
    - name: Ayşe Kaya
"""
        )
        config = load_config(path)

        assert config.storage.data_dir == "/tmp/radar"
        assert config.browser.enabled is False
        assert config.analysis.detail_limits == {DetailLevel.BASIC: 5}
        assert config.people["Örnek Holding"] == [
            PersonConfig(name="Ali Veli", role="CEO"),
            PersonConfig(name="Ayşe Kaya", role="Unknown"),
        ]
        path.unlink()

    def test_empty_file_gives_defaults(self) -> None:
        path = _write_yaml("")
        assert load_config(path) == RadarConfig()
        path.unlink()

    def test_invalid_config_raises(self) -> None:
        path = _write_yaml("browser:\n  max_concurrency: 0\n")
        with pytest.raises(ValidationError):
            load_config(path)
        path.unlink()

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_get_default_config_path(self) -> None:
        path = get_default_config_path()
        assert path.name == "default.yaml"
        assert path.parent.name == "configs"

    def test_load_default_config(self) -> None:
        path = get_default_config_path()
        if not path.exists():
            pytest.skip("Default config not found")
        config = load_config(path)
        assert config.analysis.default_year_from == 2002
        assert config.hosted_search.lang == "tr"


class TestFactoryFunctions:
    """Tests for component factories."""

    def test_hosted_searcher_needs_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FIRECRAWL_API_KEY", raising=False)
        assert create_hosted_searcher(HostedSearchConfig(), SourceRegistry()) is None

    def test_hosted_searcher_with_api_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIRECRAWL_API_KEY", "test-key")
        searcher = create_hosted_searcher(HostedSearchConfig(), SourceRegistry())
        assert isinstance(searcher, FirecrawlSearcher)

    def test_hosted_searcher_disabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FIRECRAWL_API_KEY", "test-key")
        config = HostedSearchConfig(enabled=False)
        assert create_hosted_searcher(config, SourceRegistry()) is None

    def test_browser_searcher(self) -> None:
        searcher = create_browser_searcher(BrowserConfig(), SourceRegistry())
        assert isinstance(searcher, BrowserSearcher)
        assert create_browser_searcher(BrowserConfig(enabled=False), SourceRegistry()) is None

    async def test_people_directory(self) -> None:
        directory = create_people_directory({"Örnek Holding": [PersonConfig(name="Ali Veli")]})
        assert await directory.people_for("ÖRNEK HOLDİNG") == [AffiliatedPerson("Ali Veli")]
        assert await directory.people_for("Başka") == []

    def test_create_from_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FIRECRAWL_API_KEY", raising=False)
        config = RadarConfig(storage=StorageConfig(data_dir=str(tmp_path)))

        analyzer, run_logger = create_from_config(config)

        assert isinstance(analyzer, RelationAnalyzer)
        assert run_logger is None
        assert analyzer.orchestrator.store.path == tmp_path / "news-articles.json"

    def test_create_from_config_log_override(self, tmp_path: Path) -> None:
        config = RadarConfig(storage=StorageConfig(data_dir=str(tmp_path)))

        _, run_logger = create_from_config(
            config, log_override=True, log_dir_override=str(tmp_path / "logs")
        )

        assert isinstance(run_logger, RunLogger)
        assert run_logger.enabled
