"""Persisted analysis results, one per subject."""

import asyncio
import logging
import re
from pathlib import Path

from pydantic import BaseModel, Field

from relation_radar.data import AnalysisResult
from relation_radar.dates import today, utc_now
from relation_radar.errors import PersistenceError
from relation_radar.store.base import StoreMetadata, read_document, write_document
from relation_radar.text import fold_identity

logger = logging.getLogger(__name__)


class AnalysisRecord(BaseModel):
    result: AnalysisResult
    created_at: str
    updated_at: str


class AnalysisDocument(BaseModel):
    """On-disk shape of the analyses file."""

    analyses: list[AnalysisRecord] = Field(default_factory=list)
    metadata: StoreMetadata = Field(default_factory=StoreMetadata)


def subject_key(name: str) -> str:
    """Case-insensitive identity for a subject name."""
    return fold_identity(name)


def snapshot_filename(result: AnalysisResult, date: str) -> str:
    """Snapshot file name for ``result`` on ``date``.

    Only word characters and ``-`` survive, so the name never leaves the
    snapshot directory.
    """
    slug = re.sub(r"[^\w-]+", "-", subject_key(result.subject_name)).strip("-") or "subject"
    return f"{slug}_{date}.json"


class AnalysisStore:
    """Latest analysis per subject, backed by a JSON file.

    Saving a subject that already exists replaces its record. When
    ``snapshot_dir`` is set, every save also writes a standalone JSON copy
    named after the subject and the date.

    Args:
        path: Location of the JSON file. Created on first write.
        snapshot_dir: Optional directory for per-run snapshot files.
    """

    def __init__(self, path: Path | str, *, snapshot_dir: Path | str | None = None) -> None:
        self._path = Path(path)
        self._snapshot_dir = Path(snapshot_dir) if snapshot_dir is not None else None
        self._lock = asyncio.Lock()
        self._document = read_document(self._path, AnalysisDocument) or AnalysisDocument()

    def _find(self, name: str) -> int | None:
        key = subject_key(name)
        for i, record in enumerate(self._document.analyses):
            if subject_key(record.result.subject_name) == key:
                return i
        return None

    def get(self, name: str) -> AnalysisResult | None:
        index = self._find(name)
        if index is None:
            return None
        return self._document.analyses[index].result

    def all(self) -> list[AnalysisResult]:
        return [record.result for record in self._document.analyses]

    @property
    def total_count(self) -> int:
        return self._document.metadata.total_count

    async def save(self, result: AnalysisResult) -> None:
        """Insert or replace the analysis for ``result.subject_name``.

        Raises:
            PersistenceError: If the main file cannot be written. Snapshot
                failures are only logged.
        """
        async with self._lock:
            now = utc_now()
            previous_metadata = self._document.metadata
            index = self._find(result.subject_name)

            if index is None:
                self._document.analyses.append(
                    AnalysisRecord(result=result, created_at=now, updated_at=now)
                )
                total = previous_metadata.total_count + 1
                previous_record = None
            else:
                previous_record = self._document.analyses[index]
                self._document.analyses[index] = AnalysisRecord(
                    result=result, created_at=previous_record.created_at, updated_at=now
                )
                total = previous_metadata.total_count

            self._document.metadata = StoreMetadata(last_updated=now, total_count=total)

            try:
                await asyncio.to_thread(write_document, self._path, self._document)
            except PersistenceError:
                self._document.metadata = previous_metadata
                if previous_record is None:
                    self._document.analyses.pop()
                else:
                    self._document.analyses[index] = previous_record  # type: ignore[index]
                raise

        if self._snapshot_dir is not None:
            await self._write_snapshot(result, self._snapshot_dir)

    async def _write_snapshot(self, result: AnalysisResult, directory: Path) -> None:
        path = directory / snapshot_filename(result, today())
        snapshot = AnalysisRecord(
            result=result, created_at=result.analyzed_at, updated_at=result.analyzed_at
        )
        try:
            await asyncio.to_thread(write_document, path, snapshot)
        except PersistenceError as e:
            logger.error("Failed to write analysis snapshot: %s", e)
            return
        logger.info("Analysis snapshot written to %s", path)
