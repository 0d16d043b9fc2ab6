"""Durable, URL-keyed collection of retrieved articles."""

import asyncio
import logging
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from relation_radar.data import Article, SearchQuery, newest_first
from relation_radar.dates import utc_now
from relation_radar.errors import PersistenceError
from relation_radar.store.base import StoreMetadata, read_document, write_document
from relation_radar.text import parse_terms, tr_lower

logger = logging.getLogger(__name__)


class CorpusRecord(BaseModel):
    """An article plus its storage timestamps."""

    article: Article
    created_at: str
    updated_at: str


class CorpusDocument(BaseModel):
    """On-disk shape of the corpus file."""

    articles: list[CorpusRecord] = Field(default_factory=list)
    metadata: StoreMetadata = Field(default_factory=StoreMetadata)


def _is_present(value: Any) -> bool:
    return value is not None and value != "" and value is not False


def merge_articles(existing: Article, incoming: Article) -> Article:
    """Merge ``incoming`` over ``existing`` field by field.

    Non-empty incoming values win. Empty strings, ``None`` and ``False`` never
    overwrite what is already stored, so a bare search hit cannot erase a
    fetched body.
    """
    updates = {
        f.name: getattr(incoming, f.name)
        for f in fields(Article)
        if f.name != "url" and _is_present(getattr(incoming, f.name))
    }
    return replace(existing, **updates)


class CorpusStore:
    """Article corpus backed by a single JSON file.

    Writes are serialized through an ``asyncio.Lock`` and flushed to disk before
    :meth:`upsert` returns. Reads work on the in-memory copy and never wait on
    the lock.

    Args:
        path: Location of the JSON file. Created on first write.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()
        self._document = read_document(self._path, CorpusDocument) or CorpusDocument()
        self._index = {record.article.url: i for i, record in enumerate(self._document.articles)}
        logger.info(f"Corpus loaded from {self._path}: {len(self._index)} articles")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def total_count(self) -> int:
        """Number of distinct articles ever inserted."""
        return self._document.metadata.total_count

    @property
    def last_updated(self) -> str:
        return self._document.metadata.last_updated

    def __len__(self) -> int:
        return len(self._document.articles)

    def get(self, url: str) -> Article | None:
        index = self._index.get(url)
        if index is None:
            return None
        return self._document.articles[index].article

    def all(self) -> list[Article]:
        """Snapshot of every stored article."""
        return [record.article for record in self._document.articles]

    def find_by_query(self, query: SearchQuery) -> list[Article]:
        """Find stored articles matching every query term.

        Terms match case-insensitively as substrings of title, body and summary.
        The optional source and date-range filters apply first. Results are
        newest first, capped at ``query.limit``.
        """
        terms = parse_terms(query.terms)
        wanted_sources = {name.casefold() for name in query.sources}

        matches: list[Article] = []
        for article in self.all():
            if wanted_sources and article.source.casefold() not in wanted_sources:
                continue
            if query.date_range is not None and not query.date_range.contains(
                article.published_date
            ):
                continue
            if terms:
                text = tr_lower(article.text)
                if not all(term in text for term in terms):
                    continue
            matches.append(article)

        return newest_first(matches)[: query.limit]

    async def upsert(self, article: Article) -> Article:
        """Insert ``article`` or merge it into the stored record with the same URL.

        Returns:
            The article as now stored.

        Raises:
            PersistenceError: If the flush fails. The in-memory state is rolled
                back so readers never see an unsaved change.
        """
        async with self._lock:
            now = utc_now()
            previous_metadata = self._document.metadata
            index = self._index.get(article.url)

            if index is None:
                record = CorpusRecord(article=article, created_at=now, updated_at=now)
                self._document.articles.append(record)
                self._index[article.url] = len(self._document.articles) - 1
                total = previous_metadata.total_count + 1
                previous_record = None
            else:
                previous_record = self._document.articles[index]
                record = previous_record.model_copy(
                    update={
                        "article": merge_articles(previous_record.article, article),
                        "updated_at": now,
                    }
                )
                self._document.articles[index] = record
                total = previous_metadata.total_count

            self._document.metadata = StoreMetadata(last_updated=now, total_count=total)

            try:
                await asyncio.to_thread(write_document, self._path, self._document)
            except PersistenceError:
                self._document.metadata = previous_metadata
                if previous_record is None:
                    self._document.articles.pop()
                    del self._index[article.url]
                else:
                    self._document.articles[index] = previous_record  # type: ignore[index]
                raise

            return record.article
