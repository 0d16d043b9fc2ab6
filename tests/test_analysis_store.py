"""Tests for persisted analyses."""

from pathlib import Path

import pytest

from relation_radar.data import AnalysisResult, KeyEvent
from relation_radar.dates import today
from relation_radar.errors import PersistenceError
from relation_radar.store import AnalysisStore
from relation_radar.store.analyses import snapshot_filename


def _result(name: str = "Acme Holding", score: float = 4.0) -> AnalysisResult:
    return AnalysisResult(
        subject_name=name,
        relation_score=score,
        article_count=3,
        summary_text="özet",
        key_events=(
            KeyEvent("2020-01-01", "Başlık", "Açıklama", "T24", "https://t24.com.tr/1"),
        ),
        analyzed_at="2024-05-01T10:00:00+00:00",
    )


async def test_save_and_get_case_insensitive(tmp_path: Path) -> None:
    store = AnalysisStore(tmp_path / "analyses.json")
    await store.save(_result("İstanbul Yatırım"))

    assert store.get("istanbul yatırım") == _result("İstanbul Yatırım")
    assert store.get("unknown") is None


async def test_rerun_replaces_record(tmp_path: Path) -> None:
    path = tmp_path / "analyses.json"
    store = AnalysisStore(path)
    await store.save(_result(score=2.0))
    created_at = store._document.analyses[0].created_at

    await store.save(_result("ACME HOLDING", score=6.5))

    assert store.total_count == 1
    assert len(store.all()) == 1
    assert store.get("acme holding").relation_score == 6.5
    assert store._document.analyses[0].created_at == created_at


async def test_round_trips_through_disk(tmp_path: Path) -> None:
    path = tmp_path / "analyses.json"
    await AnalysisStore(path).save(_result())

    reloaded = AnalysisStore(path)

    assert reloaded.get("Acme Holding") == _result()


async def test_writes_snapshot(tmp_path: Path) -> None:
    snapshots = tmp_path / "companies"
    store = AnalysisStore(tmp_path / "analyses.json", snapshot_dir=snapshots)

    await store.save(_result())

    assert (snapshots / f"acme-holding_{today()}.json").exists()


async def test_snapshot_failure_is_not_raised(tmp_path: Path) -> None:
    blocker = tmp_path / "companies"
    blocker.write_text("not a directory")
    store = AnalysisStore(tmp_path / "analyses.json", snapshot_dir=blocker)

    await store.save(_result())

    assert store.get("Acme Holding") is not None


def test_snapshot_filename() -> None:
    assert snapshot_filename(_result("Örnek  İnşaat A.Ş."), "2024-05-01") == (
        "örnek-inşaat-a-ş_2024-05-01.json"
    )


def test_snapshot_filename_stays_inside_directory() -> None:
    assert snapshot_filename(_result("../../escaped"), "2024-05-01") == (
        "escaped_2024-05-01.json"
    )
    assert snapshot_filename(_result("a/b\\c"), "2024-05-01") == "a-b-c_2024-05-01.json"
    assert snapshot_filename(_result("..."), "2024-05-01") == "subject_2024-05-01.json"


async def test_snapshot_for_hostile_name_written_in_snapshot_dir(tmp_path: Path) -> None:
    snapshots = tmp_path / "a" / "companies"
    store = AnalysisStore(tmp_path / "analyses.json", snapshot_dir=snapshots)

    await store.save(_result("../../escaped"))

    assert (snapshots / f"escaped_{today()}.json").exists()
    assert not list(tmp_path.glob("escaped_*.json"))


async def test_failed_write_rolls_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = AnalysisStore(tmp_path / "analyses.json")

    def fail(*args, **kwargs):
        raise PersistenceError("disk full")

    monkeypatch.setattr("relation_radar.store.analyses.write_document", fail)

    with pytest.raises(PersistenceError):
        await store.save(_result())
    assert store.all() == []
    assert store.total_count == 0
