"""Shared data models for graph operations."""

from dataclasses import dataclass
from typing import Optional

from src.models import FamilyData


@dataclass(frozen=True)
class MutationResult:
    """Result of one graph-editing operation."""
    data: FamilyData
    success: bool = True
    error: Optional[str] = None  # user-facing rejection message

    @classmethod
    def ok(cls, data: FamilyData) -> "MutationResult":
        return cls(data=data)

    @classmethod
    def rejected(cls, data: FamilyData, error: Optional[str] = None) -> "MutationResult":
        """Failed precondition: the input snapshot is returned untouched."""
        return cls(data=data, success=False, error=error)
