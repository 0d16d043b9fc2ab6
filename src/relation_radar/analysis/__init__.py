from relation_radar.analysis.analyzer import DEFAULT_DETAIL_LIMITS, RelationAnalyzer
from relation_radar.analysis.catalog import list_analyses
from relation_radar.analysis.insights import (
    build_summary_text,
    extract_connections,
    extract_key_events,
    extract_key_people,
)
from relation_radar.analysis.people import PeopleDirectory, StaticPeopleDirectory
from relation_radar.analysis.scoring import compute_metrics, relation_score

__all__ = [
    "DEFAULT_DETAIL_LIMITS",
    "PeopleDirectory",
    "RelationAnalyzer",
    "StaticPeopleDirectory",
    "build_summary_text",
    "compute_metrics",
    "extract_connections",
    "extract_key_events",
    "extract_key_people",
    "list_analyses",
    "relation_score",
]
