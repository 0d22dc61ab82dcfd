"""Graph package - family tree editing engine and document storage."""

from src.graph.models import MutationResult
from src.graph.family.graph import FamilyGraph
from src.graph.family_store import FamilyStore

__all__ = [
    "MutationResult",
    "FamilyGraph",
    "FamilyStore",
]
