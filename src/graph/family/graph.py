"""Main FamilyGraph facade combining all operations."""

import logging
import threading
from typing import Callable, Iterable, Optional

from src.config import settings
from src.errors import InvalidDocumentError
from src.graph.family import queries
from src.graph.family.person import PersonOperations
from src.graph.family.relationships import PartnerGenderStrategy, RelationshipOperations
from src.graph.family_store import FamilyStore, export_json, import_json
from src.graph.models import MutationResult
from src.models import FamilyData, Person, create_empty_document


logger = logging.getLogger(__name__)

Listener = Callable[[FamilyData], None]


class FamilyGraph:
    """
    Owner of the current family document.

    Holds one immutable snapshot. Each edit computes a new snapshot from
    the current one and installs it under a lock, so no reader ever sees
    a half-applied edit. Listeners run after every successful install.

    Usage:
        graph = FamilyGraph(store=FamilyStore())  # autosaves after each edit
        graph.add_parent("me")
        graph.add_sibling("me")
    """

    def __init__(
        self,
        store: Optional[FamilyStore] = None,
        data: Optional[FamilyData] = None,
        partner_gender: Optional[PartnerGenderStrategy] = None,
        history_limit: Optional[int] = None,
        autosave: bool = True,
    ):
        self.store = store
        if data is None and store is not None:
            data = store.load()
        self._data = data or create_empty_document()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._undo: list[FamilyData] = []
        self._redo: list[FamilyData] = []
        self.history_limit = history_limit if history_limit is not None else settings.editor.history_limit

        # Compose operations
        self.persons = PersonOperations()
        self.relationships = RelationshipOperations(self.persons, partner_gender)

        if store is not None and autosave:
            self.subscribe(store.save)

    @property
    def data(self) -> FamilyData:
        return self._data

    def subscribe(self, listener: Listener) -> None:
        """Call listener with every newly installed snapshot."""
        self._listeners.append(listener)

    def _notify(self, data: FamilyData) -> None:
        for listener in list(self._listeners):
            try:
                listener(data)
            except Exception:
                # Listener failures never roll back the installed state
                logger.exception("Listener failed after document change")

    def _install(self, data: FamilyData, record: bool = True) -> None:
        if record:
            if self.history_limit > 0:
                self._undo.append(self._data)
                del self._undo[:-self.history_limit]
            self._redo.clear()
        self._data = data

    def _apply(self, operation: Callable[[FamilyData], MutationResult]) -> MutationResult:
        """Run one operation against the current snapshot and install the result."""
        with self._lock:
            result = operation(self._data)
            changed = result.success and result.data is not self._data
            if changed:
                self._install(result.data)
                # Inside the lock so listeners see snapshots in install order
                self._notify(result.data)
        if not changed and result.error:
            logger.info("Edit rejected: %s", result.error)
        return result

    # ─────────────────────────────────────────
    # Person operations (delegated)
    # ─────────────────────────────────────────

    def update_person(self, person: Person) -> MutationResult:
        return self._apply(lambda d: self.persons.update(d, person))

    def delete_person(self, person_id: str) -> MutationResult:
        return self._apply(lambda d: self.persons.delete(d, person_id))

    def move_nodes(self, ids: Iterable[str], dx: float, dy: float) -> MutationResult:
        ids = list(ids)
        return self._apply(lambda d: self.persons.move(d, ids, dx, dy))

    def move_node_to(self, person_id: str, x: float, y: float) -> MutationResult:
        return self._apply(lambda d: self.persons.move_to(d, person_id, x, y))

    # ─────────────────────────────────────────
    # Relationship operations (delegated)
    # ─────────────────────────────────────────

    def add_parent(self, child_id: str) -> MutationResult:
        return self._apply(lambda d: self.relationships.add_parent(d, child_id))

    def add_sibling(self, person_id: str) -> MutationResult:
        return self._apply(lambda d: self.relationships.add_sibling(d, person_id))

    def add_spouse(self, person_id: str, spouse_id: Optional[str] = None) -> MutationResult:
        return self._apply(lambda d: self.relationships.add_spouse(d, person_id, spouse_id))

    def add_child(self, parent_id: str, partner_id: Optional[str] = None) -> MutationResult:
        return self._apply(lambda d: self.relationships.add_child(d, parent_id, partner_id))

    def add_relationship(self, from_id: str, to_id: str, rel_type,
                         label: Optional[str] = None) -> MutationResult:
        return self._apply(
            lambda d: self.relationships.add_relationship(d, from_id, to_id, rel_type, label)
        )

    def delete_relationship(self, relationship_id: str) -> MutationResult:
        return self._apply(lambda d: self.relationships.delete_relationship(d, relationship_id))

    # ─────────────────────────────────────────
    # Whole-document operations
    # ─────────────────────────────────────────

    def replace(self, data: FamilyData) -> MutationResult:
        """Swap in a whole document, e.g. after an import."""
        return self._apply(lambda d: MutationResult.ok(data))

    def reset(self) -> MutationResult:
        """Start over with only the root person."""
        return self.replace(create_empty_document())

    def import_json(self, text: str) -> MutationResult:
        """Replace the document with an imported one; bad input changes nothing."""
        try:
            imported = import_json(text)
        except InvalidDocumentError as e:
            logger.info("Import rejected: %s", e)
            return MutationResult.rejected(self._data, str(e))
        return self.replace(imported)

    def export_json(self) -> str:
        return export_json(self._data)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        """Restore the snapshot before the last edit."""
        with self._lock:
            if not self._undo:
                return False
            self._redo.append(self._data)
            self._install(self._undo.pop(), record=False)
            self._notify(self._data)
        return True

    def redo(self) -> bool:
        """Re-apply the last undone edit."""
        with self._lock:
            if not self._redo:
                return False
            self._undo.append(self._data)
            self._install(self._redo.pop(), record=False)
            self._notify(self._data)
        return True

    # ─────────────────────────────────────────
    # Query operations (delegated)
    # ─────────────────────────────────────────

    def get_person(self, person_id: str) -> Optional[Person]:
        return self._data.get_person(person_id)

    def get_parents(self, person_id: str) -> list[Person]:
        return queries.parents_of(self._data, person_id)

    def get_spouses(self, person_id: str) -> list[Person]:
        return queries.spouses_of(self._data, person_id)

    def get_children(self, person_id: str) -> list[Person]:
        return queries.children_of(self._data, person_id)

    def get_siblings(self, person_id: str) -> list[Person]:
        return queries.siblings_of(self._data, person_id)

    def get_family_tree(self, person_id: str) -> dict:
        return queries.family_tree(self._data, person_id)

    def search(self, text: str) -> list[Person]:
        return queries.search_persons(self._data, text)
