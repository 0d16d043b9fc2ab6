"""Tests for body backfill."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from relation_radar.data import Article
from relation_radar.errors import PersistenceError, SourceUnavailableError, UnknownSourceError
from relation_radar.retrieval import ContentFetcher
from relation_radar.sources import SourceRegistry
from relation_radar.store import CorpusStore

URL = "https://t24.com.tr/haber/acme"


def _fetcher_mock(body: str | None = None, error: Exception | None = None) -> MagicMock:
    fetcher = MagicMock()
    fetcher.fetch_body = AsyncMock(return_value=body, side_effect=error)
    return fetcher


@pytest.fixture
def store(tmp_path: Path) -> CorpusStore:
    return CorpusStore(tmp_path / "corpus.json")


async def test_already_fetched_is_returned_unchanged(store: CorpusStore) -> None:
    hosted = _fetcher_mock("yeni")
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=hosted)
    article = Article(url=URL, source="T24", body="eski", fetched=True)

    assert await fetcher.ensure_body(article) is article
    hosted.fetch_body.assert_not_called()


async def test_unknown_source_raises(store: CorpusStore) -> None:
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=_fetcher_mock("metin"))

    with pytest.raises(UnknownSourceError):
        await fetcher.ensure_body(Article(url=URL, source="Nowhere Times"))


async def test_hosted_body_is_stored(store: CorpusStore) -> None:
    hosted = _fetcher_mock("Tam metin")
    browser = _fetcher_mock("tarayıcı")
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=hosted, browser=browser)

    filled = await fetcher.ensure_body(Article(url=URL, source="T24", title="Acme"))

    assert filled.body == "Tam metin"
    assert filled.fetched is True
    assert filled.fetched_at is not None
    assert filled.title == "Acme"
    assert store.get(URL) == filled
    browser.fetch_body.assert_not_called()


async def test_falls_back_to_browser(store: CorpusStore) -> None:
    hosted = _fetcher_mock(error=SourceUnavailableError("firecrawl", "HTTP 500"))
    browser = _fetcher_mock("Paragraf 1\n\nParagraf 2")
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=hosted, browser=browser)

    filled = await fetcher.ensure_body(Article(url=URL, source="t24"))

    assert filled.body == "Paragraf 1\n\nParagraf 2"
    source = browser.fetch_body.await_args.args[1]
    assert source.name == "T24"


async def test_all_paths_failing_raises(store: CorpusStore) -> None:
    hosted = _fetcher_mock(error=SourceUnavailableError("firecrawl", "HTTP 500"))
    browser = _fetcher_mock(error=SourceUnavailableError("T24", "timeout"))
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=hosted, browser=browser)

    with pytest.raises(SourceUnavailableError, match="HTTP 500; timeout"):
        await fetcher.ensure_body(Article(url=URL, source="T24"))
    assert store.get(URL) is None


async def test_no_fetchers_configured(store: CorpusStore) -> None:
    fetcher = ContentFetcher(store, SourceRegistry())

    with pytest.raises(SourceUnavailableError, match="no body fetcher"):
        await fetcher.ensure_body(Article(url=URL, source="T24"))


async def test_store_failure_still_returns_body(
    store: CorpusStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(store, "upsert", AsyncMock(side_effect=PersistenceError("disk full")))
    fetcher = ContentFetcher(store, SourceRegistry(), hosted=_fetcher_mock("metin"))

    filled = await fetcher.ensure_body(Article(url=URL, source="T24"))

    assert filled.body == "metin"
    assert filled.fetched is True
