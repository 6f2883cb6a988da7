"""Services for en/ett lookups and their data sources."""

from enorett.services.corpus import CorpusClient
from enorett.services.lookup import LookupOrchestrator, LookupResult, build_orchestrator
from enorett.services.morphology import MorphologyClient

__all__ = [
    "CorpusClient",
    "LookupOrchestrator",
    "LookupResult",
    "MorphologyClient",
    "build_orchestrator",
]
