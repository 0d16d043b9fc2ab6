"""JSON document persistence shared by the corpus and analysis stores."""

import logging
import os
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, Field, ValidationError

from relation_radar.dates import utc_now
from relation_radar.errors import PersistenceError

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class StoreMetadata(BaseModel):
    """Bookkeeping kept alongside every stored collection."""

    last_updated: str = Field(default_factory=utc_now)
    total_count: int = 0


def read_document(path: Path, model: type[DocumentT]) -> DocumentT | None:
    """Load and validate a JSON document, or return ``None`` if the file is absent.

    Raises:
        PersistenceError: If the file exists but cannot be read or validated.
    """
    if not path.exists():
        return None
    try:
        return model.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, ValidationError) as e:
        raise PersistenceError(f"Could not load {path}: {e}") from e


def write_document(path: Path, document: BaseModel) -> None:
    """Write ``document`` to ``path`` atomically.

    The JSON is written to a sibling temp file, fsynced, then renamed over the
    target, so readers only ever see the old or the new document.

    Raises:
        PersistenceError: If the write fails.
    """
    tmp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_name = f.name
            f.write(document.model_dump_json(indent=2))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise PersistenceError(f"Could not write {path}: {e}") from e
