"""Family tree queries over a document snapshot.

All helpers are read-only and skip relationships whose endpoints are
missing from the document.
"""

from typing import Optional

from src.models import FamilyData, Gender, Person, Relationship, RelationshipType


def _persons_by_id(data: FamilyData) -> dict[str, Person]:
    return {p.id: p for p in data.persons}


def _resolve(data: FamilyData, ids: list[str]) -> list[Person]:
    """Map ids to persons, dropping dangling ids."""
    index = _persons_by_id(data)
    return [index[pid] for pid in ids if pid in index]


def parent_relationships(data: FamilyData, person_id: str) -> list[Relationship]:
    """Parent-child relationships pointing at a person."""
    return [
        r for r in valid_relationships(data)
        if r.type == RelationshipType.PARENT_CHILD and r.to_id == person_id
    ]


def parents_of(data: FamilyData, person_id: str) -> list[Person]:
    """Get parents of a person, in relationship order."""
    return _resolve(data, [r.from_id for r in parent_relationships(data, person_id)])


def children_of(data: FamilyData, person_id: str) -> list[Person]:
    """Get children of a person."""
    ids = [
        r.to_id for r in valid_relationships(data)
        if r.type == RelationshipType.PARENT_CHILD and r.from_id == person_id
    ]
    return _resolve(data, ids)


def spouses_of(data: FamilyData, person_id: str) -> list[Person]:
    """Get spouse(s) of a person."""
    ids = []
    for r in valid_relationships(data):
        if r.type != RelationshipType.SPOUSE or not r.touches(person_id):
            continue
        other = r.to_id if r.from_id == person_id else r.from_id
        if other not in ids:
            ids.append(other)
    return _resolve(data, ids)


def siblings_of(data: FamilyData, person_id: str) -> list[Person]:
    """Get persons sharing at least one parent."""
    ids = []
    for parent in parents_of(data, person_id):
        for child in children_of(data, parent.id):
            if child.id != person_id and child.id not in ids:
                ids.append(child.id)
    return _resolve(data, ids)


def other_relations_of(data: FamilyData, person_id: str) -> list[tuple[Relationship, Person]]:
    """Free-form links touching a person, paired with the person at the other end."""
    index = _persons_by_id(data)
    pairs = []
    for r in valid_relationships(data):
        if r.type != RelationshipType.OTHER or not r.touches(person_id):
            continue
        pairs.append((r, index[r.to_id if r.from_id == person_id else r.from_id]))
    return pairs


def find_gendered_parent(data: FamilyData, person_id: str, gender: Gender) -> Optional[Person]:
    """First parent of the given gender, if any."""
    for parent in parents_of(data, person_id):
        if parent.gender == gender:
            return parent
    return None


def has_gendered_parent(data: FamilyData, person_id: str, gender: Gender) -> bool:
    return find_gendered_parent(data, person_id, gender) is not None


def spouse_relationship_exists(data: FamilyData, a_id: str, b_id: str) -> bool:
    """Check for a spouse link in either direction."""
    return relationship_exists(data, a_id, b_id, RelationshipType.SPOUSE)


def relationship_exists(
    data: FamilyData, from_id: str, to_id: str, rel_type: RelationshipType
) -> bool:
    """Spouse links match in either direction, other types only as given."""
    for r in valid_relationships(data):
        if r.type != rel_type:
            continue
        if rel_type == RelationshipType.SPOUSE:
            if r.connects(from_id, to_id):
                return True
        elif r.from_id == from_id and r.to_id == to_id:
            return True
    return False


def valid_relationships(data: FamilyData) -> list[Relationship]:
    """Relationships whose endpoints both exist."""
    ids = data.person_ids()
    return [r for r in data.relationships if r.from_id in ids and r.to_id in ids]


def search_persons(data: FamilyData, text: str) -> list[Person]:
    """Search persons by partial name, case-insensitive."""
    needle = (text or "").strip().lower()
    if not needle:
        return []
    return [p for p in data.persons if needle in p.name.lower()]


def family_tree(data: FamilyData, person_id: str) -> dict:
    """Get immediate family of a person."""
    return {
        "person": data.get_person(person_id),
        "parents": parents_of(data, person_id),
        "spouses": spouses_of(data, person_id),
        "children": children_of(data, person_id),
        "siblings": siblings_of(data, person_id),
    }
