"""Test relationship operations (family expansion and linking)."""

from src.graph.family import queries
from src.graph.family.relationships import (
    DUPLICATE_MESSAGE,
    SIBLING_NEEDS_PARENTS_MESSAGE,
    RelationshipOperations,
    default_partner_gender,
)
from src.models import Gender, Relationship, RelationshipType


PC = RelationshipType.PARENT_CHILD
SP = RelationshipType.SPOUSE


def count(data, rel_type):
    return sum(1 for r in data.relationships if r.type == rel_type)


class TestAddParent:
    """Tests for add_parent."""

    def test_creates_father_mother_and_marriage(self, ops, empty_doc):
        """Root-only tree gains Father, Mother and their spouse link."""
        result = ops.add_parent(empty_doc, "me")

        assert result.success
        data = result.data
        assert len(data.persons) == 3
        assert len(data.relationships) == 3
        father = queries.find_gendered_parent(data, "me", Gender.MALE)
        mother = queries.find_gendered_parent(data, "me", Gender.FEMALE)
        assert father.name == "Father" and father.is_placeholder
        assert mother.name == "Mother"
        assert queries.spouse_relationship_exists(data, father.id, mother.id)

    def test_parent_positions(self, ops, make_person, make_doc):
        data = make_doc(make_person("me", x=10, y=20))
        data = ops.add_parent(data, "me").data
        father = queries.find_gendered_parent(data, "me", Gender.MALE)
        mother = queries.find_gendered_parent(data, "me", Gender.FEMALE)
        assert (father.position.x, father.position.y) == (-110, -160)
        assert (mother.position.x, mother.position.y) == (130, -160)

    def test_twice_is_a_no_op(self, ops, empty_doc):
        """A second call leaves exactly one father, one mother and one marriage."""
        once = ops.add_parent(empty_doc, "me").data
        twice = ops.add_parent(once, "me")

        assert not twice.success
        assert twice.data is once
        assert len(queries.parents_of(twice.data, "me")) == 2
        assert count(twice.data, SP) == 1

    def test_reuses_existing_father(self, ops, make_person, make_doc):
        """Only the mother slot is filled when a father exists."""
        data = make_doc(
            make_person("me"),
            make_person("dad", gender=Gender.MALE),
            relationships=[Relationship(id="r1", type=PC, from_id="dad", to_id="me")],
        )
        data = ops.add_parent(data, "me").data

        parents = queries.parents_of(data, "me")
        assert len(parents) == 2
        assert [p.id for p in parents if p.gender == Gender.MALE] == ["dad"]
        mother = queries.find_gendered_parent(data, "me", Gender.FEMALE)
        assert queries.spouse_relationship_exists(data, "dad", mother.id)

    def test_spouse_of_parent_is_not_a_parent(self, ops, make_person, make_doc):
        """Only parent-child links fill slots; a parent's spouse is not reused."""
        data = make_doc(
            make_person("me"),
            make_person("mum", gender=Gender.FEMALE),
            make_person("dad", gender=Gender.MALE),
            relationships=[
                Relationship(id="r1", type=PC, from_id="mum", to_id="me"),
                Relationship(id="r2", type=SP, from_id="dad", to_id="mum"),
            ],
        )
        data = ops.add_parent(data, "me").data

        father = queries.find_gendered_parent(data, "me", Gender.MALE)
        assert father.id != "dad"
        assert len(data.persons) == 4
        assert queries.spouse_relationship_exists(data, father.id, "mum")

    def test_unknown_parent_counts_toward_cap(self, ops, make_person, make_doc):
        """One UNKNOWN parent leaves room for a single new parent."""
        data = make_doc(
            make_person("me"),
            make_person("p"),
            relationships=[Relationship(id="r1", type=PC, from_id="p", to_id="me")],
        )
        data = ops.add_parent(data, "me").data

        parents = queries.parents_of(data, "me")
        assert len(parents) == 2
        assert sum(1 for p in parents if p.gender == Gender.MALE) == 1
        assert not queries.has_gendered_parent(data, "me", Gender.FEMALE)
        assert count(data, SP) == 0

    def test_missing_child(self, ops, empty_doc):
        result = ops.add_parent(empty_doc, "nobody")
        assert not result.success
        assert result.data is empty_doc

    def test_input_snapshot_untouched(self, ops, empty_doc):
        before = empty_doc.model_dump()
        ops.add_parent(empty_doc, "me")
        assert empty_doc.model_dump() == before

    def test_at_most_two_parents_after_repeated_calls(self, ops, empty_doc):
        data = empty_doc
        for _ in range(4):
            data = ops.add_parent(data, "me").data
            for person in data.persons:
                parents = queries.parents_of(data, person.id)
                assert len(parents) <= 2
                assert sum(1 for p in parents if p.gender == Gender.MALE) <= 1
                assert sum(1 for p in parents if p.gender == Gender.FEMALE) <= 1


class TestAddSibling:
    """Tests for add_sibling."""

    def test_rejected_without_parents(self, ops, empty_doc):
        result = ops.add_sibling(empty_doc, "me")
        assert not result.success
        assert result.error == SIBLING_NEEDS_PARENTS_MESSAGE
        assert result.data is empty_doc

    def test_single_parent_is_shared(self, ops, make_person, make_doc):
        data = make_doc(
            make_person("me", x=0, y=0),
            make_person("mum", gender=Gender.FEMALE),
            relationships=[Relationship(id="r1", type=PC, from_id="mum", to_id="me")],
        )
        data = ops.add_sibling(data, "me").data

        sibling = next(p for p in data.persons if p.name == "Sibling")
        assert sibling.gender == Gender.UNKNOWN
        assert sibling.position.x == 250
        assert [p.id for p in queries.parents_of(data, sibling.id)] == ["mum"]

    def test_example_scenario(self, ops, empty_doc):
        """Parents then sibling: 4 persons and 5 relationships."""
        data = ops.add_parent(empty_doc, "me").data
        data = ops.add_sibling(data, "me").data

        assert len(data.persons) == 4
        assert len(data.relationships) == 5
        sibling = next(p for p in data.persons if p.name == "Sibling")
        assert {p.id for p in queries.parents_of(data, sibling.id)} == \
            {p.id for p in queries.parents_of(data, "me")}


class TestAddSpouse:
    """Tests for add_spouse."""

    def test_new_partners_each_call(self, ops, empty_doc):
        data = ops.add_spouse(empty_doc, "me").data
        data = ops.add_spouse(data, "me").data

        partners = [p for p in data.persons if p.name == "Partner"]
        assert len(partners) == 2
        assert partners[0].id != partners[1].id
        assert count(data, SP) == 2

    def test_existing_spouse_is_idempotent(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        data = ops.add_spouse(data, "a", "b").data
        assert queries.spouse_relationship_exists(data, "a", "b")

        again = ops.add_spouse(data, "b", "a")
        assert again.success
        assert again.data is data
        assert count(again.data, SP) == 1

    def test_partner_gender_heuristic(self, ops, make_person, make_doc):
        data = make_doc(make_person("a", gender=Gender.MALE, x=5, y=7))
        data = ops.add_spouse(data, "a").data
        partner = queries.spouses_of(data, "a")[0]
        assert partner.gender == Gender.FEMALE
        assert (partner.position.x, partner.position.y) == (205, 7)

    def test_partner_gender_strategy_is_swappable(self, persons, make_person, make_doc):
        ops = RelationshipOperations(persons, partner_gender=lambda g: Gender.OTHER)
        data = make_doc(make_person("a", gender=Gender.MALE))
        data = ops.add_spouse(data, "a").data
        assert queries.spouses_of(data, "a")[0].gender == Gender.OTHER

    def test_default_partner_gender(self):
        assert default_partner_gender(Gender.MALE) == Gender.FEMALE
        assert default_partner_gender(Gender.FEMALE) == Gender.MALE
        assert default_partner_gender(Gender.OTHER) == Gender.UNKNOWN
        assert default_partner_gender(Gender.UNKNOWN) == Gender.UNKNOWN

    def test_rejects_self_and_unknown(self, ops, empty_doc):
        assert not ops.add_spouse(empty_doc, "me", "me").success
        assert not ops.add_spouse(empty_doc, "me", "ghost").success


class TestAddChild:
    """Tests for add_child."""

    def test_creates_partner_when_omitted(self, ops, make_person, make_doc):
        data = make_doc(make_person("me", x=0, y=0))
        data = ops.add_child(data, "me").data

        assert len(data.persons) == 3
        partner = queries.spouses_of(data, "me")[0]
        assert partner.name == "Partner"
        child = queries.children_of(data, "me")[0]
        assert child.name == "Child"
        assert (child.position.x, child.position.y) == (100, 180)
        assert {p.id for p in queries.parents_of(data, child.id)} == {"me", partner.id}

    def test_uses_given_partner(self, ops, make_person, make_doc):
        data = make_doc(make_person("a", x=0, y=0), make_person("b", x=200, y=40))
        data = ops.add_spouse(data, "a", "b").data
        data = ops.add_child(data, "a", "b").data

        assert len(data.persons) == 3
        assert count(data, SP) == 1
        child = queries.children_of(data, "a")[0]
        assert (child.position.x, child.position.y) == (100, 220)

    def test_marries_unlinked_partner(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        data = ops.add_child(data, "a", "b").data
        assert queries.spouse_relationship_exists(data, "a", "b")

    def test_rejects_unknown_partner(self, ops, empty_doc):
        result = ops.add_child(empty_doc, "me", "ghost")
        assert not result.success
        assert result.data is empty_doc


class TestAddRelationship:
    """Tests for free-form linking."""

    def test_spouse_dedup_is_order_independent(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        data = ops.add_relationship(data, "a", "b", "spouse").data
        result = ops.add_relationship(data, "b", "a", "spouse")

        assert not result.success
        assert result.error == DUPLICATE_MESSAGE
        assert count(result.data, SP) == 1

    def test_self_link_rejected(self, ops, empty_doc):
        result = ops.add_relationship(empty_doc, "me", "me", "other")
        assert not result.success
        assert result.data is empty_doc

    def test_other_label_and_direction(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        data = ops.add_relationship(data, "a", "b", "other", "Godparent").data
        data = ops.add_relationship(data, "b", "a", "other").data

        first, second = data.relationships
        assert first.label == "Godparent"
        assert second.label is None
        assert "label" not in second.to_dict()

    def test_parent_child_respects_cap(self, ops, empty_doc, make_person):
        data = ops.add_parent(empty_doc, "me").data
        data = data.with_changes(persons=[*data.persons, make_person("x")])
        result = ops.add_relationship(data, "x", "me", "parent-child")
        assert not result.success
        assert result.error

    def test_second_father_rejected(self, ops, make_person, make_doc):
        data = make_doc(
            make_person("me"),
            make_person("dad", gender=Gender.MALE),
            make_person("dad2", gender=Gender.MALE),
            relationships=[Relationship(id="r1", type=PC, from_id="dad", to_id="me")],
        )
        assert not ops.add_relationship(data, "dad2", "me", PC).success

    def test_unknown_type_rejected(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        assert not ops.add_relationship(data, "a", "b", "cousin").success

    def test_delete_relationship(self, ops, make_person, make_doc):
        data = make_doc(make_person("a"), make_person("b"))
        data = ops.add_relationship(data, "a", "b", "spouse").data
        rid = data.relationships[0].id
        assert ops.delete_relationship(data, rid).data.relationships == []
        assert not ops.delete_relationship(data, "nope").success
