"""JSON run logs: one file per search, one entry per cascade stage."""

import dataclasses
import datetime
import logging
import uuid
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from relation_radar.dates import utc_now
from relation_radar.errors import PersistenceError
from relation_radar.store.base import write_document

logger = logging.getLogger(__name__)


class StageRecord(BaseModel):
    """What one cascade stage received, produced and how long it took."""

    stage: str
    component: str
    input: Any = None
    output: Any = None
    error: str | None = None
    timestamp: str = Field(default_factory=utc_now)
    duration_seconds: float = 0.0


class RunRecord(BaseModel):
    """Everything logged for a single search call."""

    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    query: Any = None
    started_at: str = Field(default_factory=utc_now)
    completed_at: str | None = None
    stages: list[StageRecord] = Field(default_factory=list)
    final_article_count: int = 0
    article_urls: list[str] = Field(default_factory=list)


def to_jsonable(value: Any) -> Any:
    """Convert stage payloads (dataclasses, models, enums, paths) to plain JSON values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [to_jsonable(item) for item in value]
    return value


def log_filename(record: RunRecord) -> str:
    """``run_20260212T143000_<id8>.json``; the id keeps same-second runs apart."""
    started = datetime.datetime.fromisoformat(record.started_at)
    return f"run_{started:%Y%m%dT%H%M%S}_{record.run_id[:8]}.json"


class RunLogger:
    """Write a JSON log of every retrieval cascade.

    :meth:`start_run` hands out a fresh :class:`RunRecord` that the caller
    passes back to :meth:`log_stage` and :meth:`finish_run`, so concurrent
    searches never share state. A disabled logger returns ``None`` records and
    ignores them.

    Args:
        log_dir: Directory for the log files. Created on first write.
        enabled: Whether anything is recorded.
    """

    def __init__(self, log_dir: Path, *, enabled: bool = True) -> None:
        self._log_dir = Path(log_dir)
        self._enabled = enabled
        self._last_log_path: Path | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def last_log_path(self) -> Path | None:
        """Most recent file written by this logger."""
        return self._last_log_path

    def start_run(self, query: Any) -> RunRecord | None:
        if not self._enabled:
            return None
        return RunRecord(query=to_jsonable(query))

    def log_stage(
        self,
        record: RunRecord | None,
        stage: str,
        component: str,
        input_data: Any,
        output_data: Any,
        duration_seconds: float,
        error: str | None = None,
    ) -> None:
        """Append one stage to ``record``.

        Args:
            record: Record from :meth:`start_run`. ``None`` is ignored.
            stage: ``local``, ``hosted_api``, ``browser`` or ``merge``.
            component: Class name of the component that ran the stage.
            input_data: What the stage was asked for.
            output_data: What it produced. ``None`` when it failed.
            duration_seconds: Wall-clock time spent in the stage.
            error: Reason the stage failed, if it did.
        """
        if record is None:
            return
        record.stages.append(
            StageRecord(
                stage=stage,
                component=component,
                input=to_jsonable(input_data),
                output=to_jsonable(output_data),
                error=error,
                duration_seconds=round(duration_seconds, 4),
            )
        )

    def finish_run(self, record: RunRecord | None, articles: list[Any]) -> Path | None:
        """Close ``record`` and write it out.

        A log that cannot be written is reported and dropped; it never fails
        the search that produced it.

        Returns:
            The written file, or None when disabled or the write failed.
        """
        if record is None:
            return None

        record.completed_at = utc_now()
        record.final_article_count = len(articles)
        record.article_urls = [getattr(a, "url", str(a)) for a in articles]

        path = self._log_dir / log_filename(record)
        try:
            write_document(path, record)
        except PersistenceError as e:
            logger.warning("Run log not written: %s", e)
            return None

        logger.debug("Run log written to %s", path)
        self._last_log_path = path
        return path
