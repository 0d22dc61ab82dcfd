"""Pytest fixtures for graph tests."""

import itertools

import pytest

from src.graph.family.graph import FamilyGraph
from src.graph.family.person import PersonOperations
from src.graph.family.relationships import RelationshipOperations
from src.graph.family_store import FamilyStore
from src.models import FamilyData, Gender, Person, Position, create_empty_document


@pytest.fixture
def empty_doc():
    """Document holding only the root person."""
    return create_empty_document()


@pytest.fixture
def persons():
    """Person operations with predictable ids."""
    counter = itertools.count(1)
    return PersonOperations(id_factory=lambda: f"id{next(counter)}")


@pytest.fixture
def ops(persons):
    """Relationship operations sharing the person operations."""
    return RelationshipOperations(persons)


@pytest.fixture
def store(tmp_path):
    """Document store in a temporary directory."""
    return FamilyStore(tmp_path / "tree.json")


@pytest.fixture
def graph():
    """FamilyGraph without persistence."""
    return FamilyGraph()


def _make_person(pid: str, name: str = "", gender: Gender = Gender.UNKNOWN, x: float = 0, y: float = 0):
    return Person(id=pid, name=name or pid, gender=gender, position=Position(x=x, y=y))


def _make_doc(*persons: Person, relationships=()) -> FamilyData:
    return FamilyData(persons=list(persons), relationships=list(relationships))


@pytest.fixture
def make_person():
    """Factory for persons with fixed ids."""
    return _make_person


@pytest.fixture
def make_doc():
    """Factory for documents from persons and relationships."""
    return _make_doc
