"""Main NiceGUI application."""

from nicegui import ui

from src.config import settings, setup_logging
from src.graph.family.graph import FamilyGraph
from src.graph.family_store import FamilyStore
from src.ui.editor import FamilyEditor


def create_app(graph: FamilyGraph = None):
    """Create the editor page around one shared document."""
    graph = graph or FamilyGraph(store=FamilyStore())

    @ui.page("/")
    def main_page():
        ui.label(settings.editor.title).classes("text-3xl font-black")
        ui.label("Heritage Browser · Auto-saved").classes("text-xs uppercase text-gray-500 mb-4")
        FamilyEditor(graph).render()

    return main_page


def run_app():
    """Start the editor web app."""
    setup_logging()
    create_app()
    ui.run(title=settings.editor.title, port=settings.editor.port, reload=False)


if __name__ in {"__main__", "__mp_main__"}:
    run_app()
