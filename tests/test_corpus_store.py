"""Tests for the article corpus."""

import asyncio
from pathlib import Path

import pytest

from relation_radar.data import Article, DateRange, SearchQuery
from relation_radar.errors import PersistenceError
from relation_radar.store import CorpusStore, merge_articles


def _article(n: int, **kwargs) -> Article:
    defaults = {
        "url": f"https://example.com/{n}",
        "title": f"Haber {n}",
        "source": "T24",
        "published_date": f"2020-01-{n:02d}",
    }
    defaults.update(kwargs)
    return Article(**defaults)


@pytest.fixture
def store(tmp_path: Path) -> CorpusStore:
    return CorpusStore(tmp_path / "news-articles.json")


class TestUpsert:
    async def test_insert_increments_total(self, store: CorpusStore) -> None:
        await store.upsert(_article(1))
        await store.upsert(_article(2))
        assert store.total_count == 2
        assert len(store) == 2

    async def test_upsert_is_idempotent(self, store: CorpusStore) -> None:
        article = _article(1, body="Metin")
        await store.upsert(article)
        await store.upsert(article)
        assert store.total_count == 1
        assert store.get(article.url) == article

    async def test_merge_keeps_fetched_body(self, store: CorpusStore) -> None:
        url = "https://example.com/1"
        await store.upsert(Article(url=url, title="Eski", body="Tam metin", fetched=True))

        stored = await store.upsert(Article(url=url, title="Yeni", summary="Özet"))

        assert stored.title == "Yeni"
        assert stored.summary == "Özet"
        assert stored.body == "Tam metin"
        assert stored.fetched is True

    async def test_flushes_before_returning(self, tmp_path: Path) -> None:
        path = tmp_path / "corpus.json"
        store = CorpusStore(path)
        await store.upsert(_article(1))

        reloaded = CorpusStore(path)
        assert reloaded.total_count == 1
        assert reloaded.get("https://example.com/1") == _article(1)

    async def test_concurrent_upserts_of_same_url(self, store: CorpusStore) -> None:
        await asyncio.gather(*(store.upsert(_article(1)) for _ in range(10)))
        assert store.total_count == 1
        assert len(store) == 1

    async def test_failed_write_rolls_back(
        self, store: CorpusStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await store.upsert(_article(1))

        def fail(*args, **kwargs):
            raise PersistenceError("disk full")

        monkeypatch.setattr("relation_radar.store.corpus.write_document", fail)

        with pytest.raises(PersistenceError):
            await store.upsert(_article(2))
        with pytest.raises(PersistenceError):
            await store.upsert(_article(1, title="Değişti"))

        assert store.total_count == 1
        assert store.get("https://example.com/2") is None
        assert store.get("https://example.com/1").title == "Haber 1"


class TestFindByQuery:
    async def test_all_terms_must_match(self, store: CorpusStore) -> None:
        await store.upsert(_article(1, body="Acme ihale kazandı"))
        await store.upsert(_article(2, body="Acme kâr açıkladı"))

        found = store.find_by_query(SearchQuery(terms="acme ihale"))

        assert [a.url for a in found] == ["https://example.com/1"]

    async def test_turkish_case_insensitive(self, store: CorpusStore) -> None:
        await store.upsert(_article(1, title="İSTANBUL HAVALİMANI İHALESİ"))

        found = store.find_by_query(SearchQuery(terms="istanbul ihalesi"))

        assert len(found) == 1

    async def test_quoted_phrase(self, store: CorpusStore) -> None:
        await store.upsert(_article(1, body="Acme Holding açıklama yaptı"))
        await store.upsert(_article(2, body="Holding Acme değil"))

        found = store.find_by_query(SearchQuery(terms='"Acme Holding"'))

        assert [a.url for a in found] == ["https://example.com/1"]

    async def test_matches_summary(self, store: CorpusStore) -> None:
        await store.upsert(_article(1, summary="Özet: Acme"))
        assert len(store.find_by_query(SearchQuery(terms="acme"))) == 1

    async def test_source_filter(self, store: CorpusStore) -> None:
        await store.upsert(_article(1, body="acme", source="T24"))
        await store.upsert(_article(2, body="acme", source="Sözcü"))

        found = store.find_by_query(SearchQuery(terms="acme", sources=("t24",)))

        assert [a.source for a in found] == ["T24"]

    async def test_date_range_is_inclusive(self, store: CorpusStore) -> None:
        for n in range(1, 6):
            await store.upsert(_article(n, body="acme"))

        query = SearchQuery(terms="acme", date_range=DateRange("2020-01-02", "2020-01-04"))
        found = store.find_by_query(query)

        assert [a.published_date for a in found] == ["2020-01-04", "2020-01-03", "2020-01-02"]

    async def test_newest_first_and_limited(self, store: CorpusStore) -> None:
        await store.upsert(_article(3, body="acme"))
        await store.upsert(_article(1, body="acme"))
        await store.upsert(_article(9, body="acme", published_date=None))
        await store.upsert(_article(5, body="acme"))

        found = store.find_by_query(SearchQuery(terms="acme", limit=3))

        assert [a.published_date for a in found] == ["2020-01-05", "2020-01-03", "2020-01-01"]

    async def test_empty_terms_return_everything_up_to_limit(self, store: CorpusStore) -> None:
        for n in range(1, 5):
            await store.upsert(_article(n))

        assert len(store.find_by_query(SearchQuery(terms="", limit=3))) == 3


def test_merge_articles_new_values_win() -> None:
    existing = Article(url="u", title="a", summary="s", body="b", fetched=True)
    incoming = Article(url="u", title="c", summary="", body="", fetched=False)

    merged = merge_articles(existing, incoming)

    assert merged == Article(url="u", title="c", summary="s", body="b", fetched=True)


def test_corrupt_file_raises_persistence_error(tmp_path: Path) -> None:
    path = tmp_path / "corpus.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        CorpusStore(path)
