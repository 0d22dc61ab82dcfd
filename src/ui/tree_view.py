"""Mermaid rendering of a family document."""

from src.graph.family.queries import valid_relationships
from src.models import FamilyData, Person, RelationshipType, display_color


def _escape(text: str) -> str:
    """Make text safe inside a quoted Mermaid label."""
    return (text or "").replace('"', "#quot;").replace("|", "#124;")


def node_label(person: Person) -> str:
    """Name plus a life-span line when any year is known."""
    name = person.name or "Unnamed"
    if person.is_deceased:
        name += " †"
    born = person.birth_year or ""
    died = person.death_year if person.is_deceased else ""
    if born or died:
        span = f"{born} - {died}".strip() if died else born
        return f"{_escape(name)}<br/>{_escape(span)}"
    return _escape(name)


def generate_mermaid(data: FamilyData) -> str:
    """Generate Mermaid diagram code from a family document."""
    if not data.persons:
        return ""

    # Mermaid ids must be plain identifiers, so persons get positional ids
    node_ids = {p.id: f"P{i}" for i, p in enumerate(data.persons)}

    lines = ["graph TD"]
    for person in data.persons:
        lines.append(f'    {node_ids[person.id]}["{node_label(person)}"]')

    for rel in valid_relationships(data):
        a, b = node_ids[rel.from_id], node_ids[rel.to_id]
        if rel.type == RelationshipType.PARENT_CHILD:
            lines.append(f"    {a} --> {b}")
        elif rel.type == RelationshipType.SPOUSE:
            lines.append(f"    {a} -.- {b}")
        elif rel.label:
            lines.append(f"    {a} -.->|{_escape(rel.label)}| {b}")
        else:
            lines.append(f"    {a} -.-> {b}")

    for person in data.persons:
        lines.append(f"    style {node_ids[person.id]} fill:{display_color(person)},color:#fff")

    return "\n".join(lines)
