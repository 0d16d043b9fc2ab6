"""Filtering and ordering of stored analyses for listings."""

from collections.abc import Callable, Iterable
from typing import Any

from relation_radar.data import AnalysisResult, AnalysisSummary
from relation_radar.text import fold_identity

DEFAULT_LIMIT = 20

# (phrases, predicate on the 0-10 relation score)
_SCORE_FILTERS: list[tuple[tuple[str, ...], Callable[[float], bool]]] = [
    (("high relation", "yüksek ilişki"), lambda score: score >= 7),
    (("medium relation", "orta ilişki"), lambda score: 4 <= score < 7),
    (("low relation", "düşük ilişki"), lambda score: score < 4),
]

_SORT_KEYS: dict[str, tuple[Callable[[AnalysisResult], Any], bool]] = {
    "name": (lambda r: fold_identity(r.subject_name), False),
    "relation_score": (lambda r: r.relation_score, True),
    "article_count": (lambda r: r.article_count, True),
    "last_analyzed": (lambda r: r.analyzed_at, True),
}


def matches_filter(result: AnalysisResult, text: str) -> bool:
    """Whether ``result`` passes a listing filter.

    A filter containing a relation-level phrase ("high relation",
    "orta ilişki", ...) selects by score band; any other text must appear in
    the subject name or summary.
    """
    folded = fold_identity(text.strip())
    for phrases, predicate in _SCORE_FILTERS:
        if any(phrase in folded for phrase in phrases):
            return predicate(result.relation_score)
    return folded in fold_identity(result.subject_name) or folded in fold_identity(
        result.summary_text
    )


def summarize(result: AnalysisResult) -> AnalysisSummary:
    return AnalysisSummary(
        name=result.subject_name,
        relation_score=result.relation_score,
        article_count=result.article_count,
        summary=result.summary_text,
        last_analyzed=result.analyzed_at[:10],
    )


def list_analyses(
    results: Iterable[AnalysisResult],
    *,
    filter: str | None = None,
    sort_by: str = "name",
    limit: int = DEFAULT_LIMIT,
) -> list[AnalysisSummary]:
    """Filter, sort and cap stored analyses.

    Args:
        results: Stored analyses.
        filter: Relation-level phrase or free text. None or blank keeps all.
        sort_by: ``name`` (ascending) or ``relation_score``, ``article_count``,
            ``last_analyzed`` (descending).
        limit: Maximum rows returned.

    Raises:
        ValueError: If ``sort_by`` is not a known key.
    """
    if sort_by not in _SORT_KEYS:
        raise ValueError(f"Unknown sort key {sort_by!r}. Choose from: {', '.join(_SORT_KEYS)}")

    selected = list(results)
    if filter and filter.strip():
        selected = [r for r in selected if matches_filter(r, filter)]

    key, descending = _SORT_KEYS[sort_by]
    selected.sort(key=key, reverse=descending)
    return [summarize(r) for r in selected[: max(0, limit)]]
