from relation_radar.store.analyses import AnalysisStore, subject_key
from relation_radar.store.base import StoreMetadata
from relation_radar.store.corpus import CorpusStore, merge_articles

__all__ = [
    "AnalysisStore",
    "CorpusStore",
    "StoreMetadata",
    "merge_articles",
    "subject_key",
]
