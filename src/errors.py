"""Error types for the family tree editor."""


class FamilyTreeError(Exception):
    """Base error for the family tree editor."""


class InvalidDocumentError(FamilyTreeError):
    """Imported or loaded JSON does not describe a family document."""


class PersistenceError(FamilyTreeError):
    """A document file could not be read or written."""
