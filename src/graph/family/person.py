"""Person operations for FamilyGraph."""

import logging
import uuid
from typing import Callable, Iterable, Optional

from src.config import LayoutSettings, settings
from src.graph.models import MutationResult
from src.models import FamilyData, Gender, Person, Position


logger = logging.getLogger(__name__)

ROOT_DELETE_MESSAGE = "The root person 'Me' cannot be deleted, but you can rename them."


def new_id() -> str:
    """Fresh opaque identifier."""
    return str(uuid.uuid4())


def drag_targets(dragged_id: str, selection: Optional[Iterable[str]] = None) -> set[str]:
    """Persons to move when a node is dragged.

    The whole selection moves together when the dragged node is part of
    it; otherwise only the dragged node moves.
    """
    selected = set(selection or ())
    if dragged_id in selected:
        return selected
    return {dragged_id}


class PersonOperations:
    """Edit operations on Person records.

    Every method takes a snapshot and returns a MutationResult holding a
    new snapshot; the input is never modified.
    """

    def __init__(
        self,
        layout: Optional[LayoutSettings] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.layout = layout or settings.layout
        self.id_factory = id_factory or new_id

    def placeholder(self, name: str, gender: Gender, position: Position) -> Person:
        """Create a stand-in person for a structurally required role."""
        return Person(
            id=self.id_factory(),
            name=name,
            gender=gender,
            position=position,
            is_placeholder=True,
        )

    def update(self, data: FamilyData, updated: Person) -> MutationResult:
        """Replace the person with the same id by the given full record."""
        if data.get_person(updated.id) is None:
            return MutationResult.rejected(data)

        persons = [updated if p.id == updated.id else p for p in data.persons]
        logger.debug("Updated person %s", updated.id)
        return MutationResult.ok(data.with_changes(persons=persons))

    def delete(self, data: FamilyData, person_id: str) -> MutationResult:
        """Delete person and their relationships."""
        person = data.get_person(person_id)
        if person is not None and person.is_root:
            logger.info("Refused to delete root person")
            return MutationResult.rejected(data, ROOT_DELETE_MESSAGE)
        if person is None:
            return MutationResult.rejected(data)

        persons = [p for p in data.persons if p.id != person_id]
        relationships = [r for r in data.relationships if not r.touches(person_id)]
        logger.debug(
            "Deleted person %s and %d relationships",
            person_id, len(data.relationships) - len(relationships),
        )
        return MutationResult.ok(data.with_changes(persons=persons, relationships=relationships))

    def move(self, data: FamilyData, ids: Iterable[str], dx: float, dy: float) -> MutationResult:
        """Shift every listed person by the same delta."""
        targets = set(ids)
        if not targets & data.person_ids():
            return MutationResult.rejected(data)

        persons = [
            p.model_copy(update={"position": p.position.moved(dx, dy)}) if p.id in targets else p
            for p in data.persons
        ]
        return MutationResult.ok(data.with_changes(persons=persons))

    def move_to(self, data: FamilyData, person_id: str, x: float, y: float) -> MutationResult:
        """Place one person at an absolute position."""
        person = data.get_person(person_id)
        if person is None:
            return MutationResult.rejected(data)
        moved = person.model_copy(update={"position": Position(x=x, y=y)})
        return self.update(data, moved)
