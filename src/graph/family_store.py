"""
Family document storage.

Keeps the current tree in a local JSON file and handles JSON export and
import of whole documents.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from src.config import settings
from src.errors import InvalidDocumentError, PersistenceError
from src.models import ROOT_PERSON_ID, SCHEMA_VERSION, FamilyData


logger = logging.getLogger(__name__)

INVALID_FILE_MESSAGE = "Invalid JSON file provided."


def export_json(data: FamilyData) -> str:
    """Serialize a document to pretty-printed JSON."""
    payload = data.to_dict()
    payload["schemaVersion"] = SCHEMA_VERSION
    return json.dumps(payload, indent=2, ensure_ascii=False)


def decode_upload(content: Union[bytes, str]) -> str:
    """Decode uploaded file content as strict UTF-8."""
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidDocumentError(INVALID_FILE_MESSAGE) from e


def import_json(text: str) -> FamilyData:
    """Parse and validate a JSON document.

    Raises InvalidDocumentError unless the whole document is usable;
    nothing is partially accepted.
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidDocumentError(INVALID_FILE_MESSAGE) from e

    if not isinstance(payload, dict) or not isinstance(payload.get("persons"), list):
        raise InvalidDocumentError("Document must contain a 'persons' list.")

    version = payload.get("schemaVersion", SCHEMA_VERSION)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise InvalidDocumentError(f"Unsupported document version: {version}")

    if payload.get("relationships") is None:
        payload = {**payload, "relationships": []}

    try:
        data = FamilyData.from_dict(payload)
    except ValidationError as e:
        raise InvalidDocumentError(f"Document records are malformed: {e.error_count()} error(s)") from e
    _check_ids(data)
    return data


def _check_ids(data: FamilyData) -> None:
    """Require exactly one root person and unique record ids."""
    person_ids = [p.id for p in data.persons]
    if person_ids.count(ROOT_PERSON_ID) != 1:
        raise InvalidDocumentError(f"Document must contain exactly one '{ROOT_PERSON_ID}' person.")
    if len(set(person_ids)) != len(person_ids):
        raise InvalidDocumentError("Document contains duplicate person ids.")
    rel_ids = [r.id for r in data.relationships]
    if len(set(rel_ids)) != len(rel_ids):
        raise InvalidDocumentError("Document contains duplicate relationship ids.")


def export_filename(on: Optional[date] = None) -> str:
    """Download name for an exported tree."""
    return f"kingraph_tree_{(on or date.today()).isoformat()}.json"


class FamilyStore:
    """Persist the family document as a JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else settings.storage.document_path
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> Optional[FamilyData]:
        """Load the saved document, or None when there is none usable."""
        if not self.path.exists():
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return import_json(f.read())
        except (InvalidDocumentError, OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to parse saved data at %s: %s", self.path, e)
            return None

    def save(self, data: FamilyData) -> bool:
        """Write the document; failures are logged, never raised."""
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                f.write(export_json(data))
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Error saving family data to %s: %s", self.path, e)
            return False

    def export_json(self, data: FamilyData) -> str:
        return export_json(data)

    def import_json(self, text: str) -> FamilyData:
        return import_json(text)

    def export_to_file(self, data: FamilyData, directory: Union[str, Path, None] = None) -> Path:
        """Write a dated export file and return its path."""
        target_dir = Path(directory) if directory else self.path.parent
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / export_filename()
        try:
            target.write_text(export_json(data), encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Could not write {target}: {e}") from e
        logger.info("Exported tree to %s", target)
        return target

    def import_from_file(self, path: Union[str, Path]) -> FamilyData:
        """Read and validate an exported tree file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e
        return import_json(text)
