"""UI module for NiceGUI interface."""

from src.ui.editor import FamilyEditor
from src.ui.tree_view import generate_mermaid

__all__ = ["FamilyEditor", "generate_mermaid"]
