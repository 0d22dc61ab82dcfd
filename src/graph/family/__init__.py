"""Family graph package."""
from src.graph.family.person import PersonOperations, drag_targets
from src.graph.family.relationships import RelationshipOperations, default_partner_gender
from src.graph.family.graph import FamilyGraph
from src.graph.family import queries

__all__ = [
    "PersonOperations",
    "RelationshipOperations",
    "FamilyGraph",
    "queries",
    "drag_targets",
    "default_partner_gender",
]
