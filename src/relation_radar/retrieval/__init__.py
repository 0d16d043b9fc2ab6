from relation_radar.retrieval.fetcher import ContentFetcher
from relation_radar.retrieval.orchestrator import Cascade, CascadeState, RetrievalOrchestrator

__all__ = [
    "Cascade",
    "CascadeState",
    "ContentFetcher",
    "RetrievalOrchestrator",
]
