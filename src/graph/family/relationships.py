"""Relationship operations between persons."""

import logging
from typing import Callable, Optional

from src.graph.family.person import PersonOperations
from src.graph.family.queries import (
    find_gendered_parent,
    parent_relationships,
    parents_of,
    relationship_exists,
    spouse_relationship_exists,
)
from src.graph.models import MutationResult
from src.models import FamilyData, Gender, Person, Position, Relationship, RelationshipType


logger = logging.getLogger(__name__)

MAX_PARENTS = 2

SIBLING_NEEDS_PARENTS_MESSAGE = "Add parents first to create a sibling!"
DUPLICATE_MESSAGE = "These two people are already linked that way."
TOO_MANY_PARENTS_MESSAGE = "A person can have at most two parents."

PartnerGenderStrategy = Callable[[Gender], Gender]


def default_partner_gender(gender: Gender) -> Gender:
    """Guess a partner's gender: opposite of MALE/FEMALE, otherwise unknown."""
    if gender == Gender.MALE:
        return Gender.FEMALE
    if gender == Gender.FEMALE:
        return Gender.MALE
    return Gender.UNKNOWN


class RelationshipOperations:
    """One-click family expansion and free-form linking."""

    def __init__(
        self,
        persons: PersonOperations,
        partner_gender: Optional[PartnerGenderStrategy] = None,
    ):
        self.persons = persons
        self.partner_gender = partner_gender or default_partner_gender

    @property
    def layout(self):
        return self.persons.layout

    def _link(self, rel_type: RelationshipType, from_id: str, to_id: str,
              label: Optional[str] = None) -> Relationship:
        return Relationship(
            id=self.persons.id_factory(),
            type=rel_type,
            from_id=from_id,
            to_id=to_id,
            label=label,
        )

    def add_parent(self, data: FamilyData, child_id: str) -> MutationResult:
        """Fill the father and mother slots of a child.

        A parent already present in a slot is reused. The father and
        mother are married to each other when they are not already.
        """
        child = data.get_person(child_id)
        if child is None:
            return MutationResult.rejected(data)

        free_slots = MAX_PARENTS - len(parent_relationships(data, child_id))
        if free_slots <= 0:
            return MutationResult.rejected(data)

        persons = list(data.persons)
        relationships = list(data.relationships)

        resolved = {}
        for gender, name, sign in ((Gender.MALE, "Father", -1), (Gender.FEMALE, "Mother", 1)):
            parent = find_gendered_parent(data, child_id, gender)
            if parent is None and free_slots > 0:
                position = Position(
                    x=child.position.x + sign * self.layout.parent_dx,
                    y=child.position.y - self.layout.parent_dy,
                )
                parent = self.persons.placeholder(name, gender, position)
                persons.append(parent)
                relationships.append(self._link(RelationshipType.PARENT_CHILD, parent.id, child_id))
                free_slots -= 1
            resolved[gender] = parent

        father, mother = resolved[Gender.MALE], resolved[Gender.FEMALE]
        result = data.with_changes(persons=persons, relationships=relationships)
        if father and mother and not spouse_relationship_exists(result, father.id, mother.id):
            relationships.append(self._link(RelationshipType.SPOUSE, father.id, mother.id))
            result = data.with_changes(persons=persons, relationships=relationships)

        logger.debug("Added parents for %s", child_id)
        return MutationResult.ok(result)

    def add_sibling(self, data: FamilyData, person_id: str) -> MutationResult:
        """Add a sibling sharing every parent of the person."""
        person = data.get_person(person_id)
        if person is None:
            return MutationResult.rejected(data)

        parents = parents_of(data, person_id)
        if not parents:
            logger.info("Sibling for %s refused: no parents", person_id)
            return MutationResult.rejected(data, SIBLING_NEEDS_PARENTS_MESSAGE)

        sibling = self.persons.placeholder(
            "Sibling",
            Gender.UNKNOWN,
            Position(x=person.position.x + self.layout.sibling_dx, y=person.position.y),
        )
        links = []
        for parent in parents:
            if parent.id not in {r.from_id for r in links}:
                links.append(self._link(RelationshipType.PARENT_CHILD, parent.id, sibling.id))

        return MutationResult.ok(data.with_changes(
            persons=[*data.persons, sibling],
            relationships=[*data.relationships, *links],
        ))

    def _new_partner(self, person: Person, gender: Gender) -> Person:
        return self.persons.placeholder(
            "Partner",
            gender,
            Position(x=person.position.x + self.layout.spouse_dx, y=person.position.y),
        )

    def add_spouse(self, data: FamilyData, person_id: str,
                   spouse_id: Optional[str] = None) -> MutationResult:
        """Marry a person to an existing person or to a new placeholder partner."""
        person = data.get_person(person_id)
        if person is None:
            return MutationResult.rejected(data)

        persons = list(data.persons)
        if spouse_id is None:
            partner = self._new_partner(person, self.partner_gender(person.gender))
            persons.append(partner)
            spouse_id = partner.id
        elif spouse_id == person_id or data.get_person(spouse_id) is None:
            return MutationResult.rejected(data)
        elif spouse_relationship_exists(data, person_id, spouse_id):
            return MutationResult.ok(data)

        return MutationResult.ok(data.with_changes(
            persons=persons,
            relationships=[*data.relationships, self._link(RelationshipType.SPOUSE, person_id, spouse_id)],
        ))

    def add_child(self, data: FamilyData, parent_id: str,
                  partner_id: Optional[str] = None) -> MutationResult:
        """Add a child of a parent and a partner, creating the partner if needed."""
        parent = data.get_person(parent_id)
        if parent is None:
            return MutationResult.rejected(data)

        persons = list(data.persons)
        relationships = list(data.relationships)

        if partner_id is None:
            partner = self._new_partner(parent, Gender.UNKNOWN)
            persons.append(partner)
        else:
            partner = data.get_person(partner_id)
            if partner is None or partner_id == parent_id:
                return MutationResult.rejected(data)
        if not spouse_relationship_exists(data, parent_id, partner.id):
            relationships.append(self._link(RelationshipType.SPOUSE, parent_id, partner.id))

        # Below and between the two parents
        child = self.persons.placeholder(
            "Child",
            Gender.UNKNOWN,
            Position(
                x=(parent.position.x + partner.position.x) / 2,
                y=max(parent.position.y, partner.position.y) + self.layout.child_dy,
            ),
        )
        persons.append(child)
        relationships.append(self._link(RelationshipType.PARENT_CHILD, parent_id, child.id))
        relationships.append(self._link(RelationshipType.PARENT_CHILD, partner.id, child.id))

        logger.debug("Added child %s of %s and %s", child.id, parent_id, partner.id)
        return MutationResult.ok(data.with_changes(persons=persons, relationships=relationships))

    def add_relationship(self, data: FamilyData, from_id: str, to_id: str,
                         rel_type, label: Optional[str] = None) -> MutationResult:
        """Link two existing persons with a typed relationship."""
        try:
            rel_type = RelationshipType(rel_type)
        except ValueError:
            return MutationResult.rejected(data)

        if from_id == to_id:
            return MutationResult.rejected(data)
        if data.get_person(from_id) is None or data.get_person(to_id) is None:
            return MutationResult.rejected(data)
        if relationship_exists(data, from_id, to_id, rel_type):
            return MutationResult.rejected(data, DUPLICATE_MESSAGE)

        if rel_type == RelationshipType.PARENT_CHILD:
            error = self._parent_slot_error(data, from_id, to_id)
            if error:
                return MutationResult.rejected(data, error)

        link = self._link(rel_type, from_id, to_id, label or None)
        logger.debug("Linked %s -[%s]-> %s", from_id, rel_type.value, to_id)
        return MutationResult.ok(data.with_changes(relationships=[*data.relationships, link]))

    def _parent_slot_error(self, data: FamilyData, parent_id: str, child_id: str) -> Optional[str]:
        """Why parent cannot become a parent of child, if it cannot."""
        if len(parent_relationships(data, child_id)) >= MAX_PARENTS:
            return TOO_MANY_PARENTS_MESSAGE
        parent = data.get_person(parent_id)
        if parent.gender == Gender.MALE and find_gendered_parent(data, child_id, Gender.MALE):
            return "This person already has a father."
        if parent.gender == Gender.FEMALE and find_gendered_parent(data, child_id, Gender.FEMALE):
            return "This person already has a mother."
        return None

    def delete_relationship(self, data: FamilyData, relationship_id: str) -> MutationResult:
        """Remove a single relationship."""
        relationships = [r for r in data.relationships if r.id != relationship_id]
        if len(relationships) == len(data.relationships):
            return MutationResult.rejected(data)
        return MutationResult.ok(data.with_changes(relationships=relationships))
