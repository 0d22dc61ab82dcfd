"""Data models for the family tree document."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


ROOT_PERSON_ID = "me"
ROOT_PERSON_NAME = "Me (X)"
SCHEMA_VERSION = 1


class Gender(str, Enum):
    """Gender used for display theming and placeholder defaults."""
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"
    UNKNOWN = "UNKNOWN"


class RelationshipType(str, Enum):
    """Kinds of edges between two persons."""
    PARENT_CHILD = "parent-child"
    SPOUSE = "spouse"
    OTHER = "other"


# Theme colours shown when a person has no colour override
GENDER_COLORS = {
    Gender.MALE: "#0ea5e9",
    Gender.FEMALE: "#f43f5e",
    Gender.OTHER: "#6366f1",
    Gender.UNKNOWN: "#94a3b8",
}

PRESET_COLORS = {
    "Default": None,
    "Red": "#ef4444",
    "Orange": "#f97316",
    "Amber": "#f59e0b",
    "Emerald": "#10b981",
    "Teal": "#14b8a6",
    "Blue": "#3b82f6",
    "Indigo": "#6366f1",
    "Violet": "#8b5cf6",
    "Pink": "#ec4899",
    "Slate": "#64748b",
    "Black": "#0f172a",
}


class _Record(BaseModel):
    """Immutable record serialized with camelCase field names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    def to_dict(self) -> dict:
        """Convert to the JSON document shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Position(_Record):
    """2D coordinate in document space."""
    x: float = 0.0
    y: float = 0.0

    def moved(self, dx: float, dy: float) -> "Position":
        """Return this position shifted by a delta."""
        return Position(x=self.x + dx, y=self.y + dy)


class Person(_Record):
    """Person node with profile and layout fields."""

    id: str
    name: str = ""
    gender: Gender = Gender.UNKNOWN
    color: Optional[str] = None
    is_deceased: Optional[bool] = Field(default=None, alias="isDeceased")
    birth_year: Optional[str] = Field(default=None, alias="birthYear")
    death_year: Optional[str] = Field(default=None, alias="deathYear")
    position: Position = Field(default_factory=Position)
    is_placeholder: Optional[bool] = Field(default=None, alias="isPlaceholder")

    @field_validator("birth_year", "death_year", mode="before")
    @classmethod
    def _year_as_text(cls, value):
        # Number inputs may have stored years as JSON numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_PERSON_ID


class Relationship(_Record):
    """Typed edge between two persons."""

    id: str
    type: RelationshipType
    from_id: str = Field(alias="fromId")  # parent, spouse 1, or source
    to_id: str = Field(alias="toId")      # child, spouse 2, or target
    label: Optional[str] = None

    def touches(self, person_id: str) -> bool:
        """True when the person is either endpoint."""
        return self.from_id == person_id or self.to_id == person_id

    def connects(self, a_id: str, b_id: str) -> bool:
        """True when this edge joins a and b in either direction."""
        return {self.from_id, self.to_id} == {a_id, b_id}


class FamilyData(_Record):
    """Document root: every person and relationship of one tree."""

    persons: list[Person]
    relationships: list[Relationship] = Field(default_factory=list)
    schema_version: int = Field(default=SCHEMA_VERSION, alias="schemaVersion")

    def get_person(self, person_id: str) -> Optional[Person]:
        """Get person by id."""
        for person in self.persons:
            if person.id == person_id:
                return person
        return None

    def person_ids(self) -> set[str]:
        return {p.id for p in self.persons}

    def with_changes(
        self,
        persons: Optional[list[Person]] = None,
        relationships: Optional[list[Relationship]] = None,
    ) -> "FamilyData":
        """Return a new snapshot with replaced collections."""
        return FamilyData(
            persons=list(self.persons if persons is None else persons),
            relationships=list(self.relationships if relationships is None else relationships),
            schemaVersion=self.schema_version,
        )

    @classmethod
    def from_dict(cls, payload: dict) -> "FamilyData":
        """Build a snapshot from the JSON document shape."""
        return cls.model_validate(payload)


def create_root_person() -> Person:
    """The non-deletable person every tree starts from."""
    return Person(
        id=ROOT_PERSON_ID,
        name=ROOT_PERSON_NAME,
        gender=Gender.UNKNOWN,
        position=Position(x=0, y=0),
    )


def create_empty_document() -> FamilyData:
    """A fresh document seeded with just the root person."""
    return FamilyData(persons=[create_root_person()], relationships=[])


def display_color(person: Person) -> str:
    """Colour override if set, else the gender theme colour."""
    if person.color:
        return person.color
    return GENDER_COLORS.get(person.gender, GENDER_COLORS[Gender.UNKNOWN])
