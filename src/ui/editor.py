"""Family tree editor component for NiceGUI."""

from typing import Optional

from nicegui import events, ui

from src.errors import InvalidDocumentError
from src.graph.family.graph import FamilyGraph
from src.graph.family.person import drag_targets
from src.graph.family.queries import other_relations_of
from src.graph.family_store import decode_upload, export_filename
from src.graph.models import MutationResult
from src.models import PRESET_COLORS, Gender, RelationshipType, ROOT_PERSON_ID
from src.ui.tree_view import generate_mermaid


NUDGE_STEP = 40


class FamilyEditor:
    """Tree diagram plus a sidebar to edit the selected person."""

    def __init__(self, graph: FamilyGraph):
        self.graph = graph
        self.selected_id: Optional[str] = ROOT_PERSON_ID
        self.group: set[str] = set()

    def render(self):
        """Render the editor layout."""
        with ui.row().classes("w-full gap-4 no-wrap"):
            with ui.card().classes("flex-1 p-4"):
                self._render_tree()
            with ui.card().classes("w-96 p-4"):
                self._render_sidebar()

    # ─────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────

    def _handle(self, result: MutationResult) -> MutationResult:
        """Surface rejections and redraw after edits."""
        if result.error:
            ui.notify(result.error, type="warning")
        # The presentation layer owns selection and must drop stale ids
        ids = self.graph.data.person_ids()
        if self.selected_id not in ids:
            self.selected_id = None
        self.group &= ids
        self._render_tree.refresh()
        self._render_sidebar.refresh()
        return result

    def _select(self, person_id: Optional[str]):
        self.selected_id = person_id
        self._render_sidebar.refresh()

    def _person_options(self, exclude: Optional[str] = None) -> dict:
        return {p.id: p.name or "Unnamed" for p in self.graph.data.persons if p.id != exclude}

    # ─────────────────────────────────────────
    # Tree
    # ─────────────────────────────────────────

    @ui.refreshable
    def _render_tree(self):
        with ui.row().classes("justify-between items-center w-full mb-2"):
            ui.label("🌳 Family Tree").classes("text-xl font-bold")
            with ui.row().classes("gap-1"):
                ui.button("Undo", on_click=self._undo).props("flat dense").set_enabled(self.graph.can_undo)
                ui.button("Redo", on_click=self._redo).props("flat dense").set_enabled(self.graph.can_redo)
        ui.mermaid(generate_mermaid(self.graph.data)).classes("w-full")

    def _undo(self):
        self.graph.undo()
        self._handle(MutationResult.ok(self.graph.data))

    def _redo(self):
        self.graph.redo()
        self._handle(MutationResult.ok(self.graph.data))

    # ─────────────────────────────────────────
    # Sidebar
    # ─────────────────────────────────────────

    @ui.refreshable
    def _render_sidebar(self):
        self._render_search()
        ui.select(
            options=self._person_options(),
            value=self.selected_id,
            label="Select Person",
            on_change=lambda e: self._select(e.value),
        ).classes("w-full")

        person = self.graph.get_person(self.selected_id) if self.selected_id else None
        with ui.tabs().classes("w-full") as tabs:
            tab_profile = ui.tab("Profile")
            tab_connect = ui.tab("Connect")
            tab_files = ui.tab("Files")
        with ui.tab_panels(tabs, value=tab_profile if person else tab_files).classes("w-full"):
            with ui.tab_panel(tab_profile):
                if person:
                    self._render_profile(person)
                else:
                    ui.label("Pick an ancestor to edit their details").classes("text-gray-500")
            with ui.tab_panel(tab_connect):
                if person:
                    self._render_connect(person)
            with ui.tab_panel(tab_files):
                self._render_files()

    def _render_search(self):
        results = ui.column().classes("w-full")

        def show(e):
            results.clear()
            with results:
                for match in self.graph.search(e.value or "")[:10]:
                    ui.button(match.name or "Unnamed", on_click=lambda _, pid=match.id: self._select(pid)) \
                        .props("flat dense no-caps")

        ui.input("Search by name", on_change=show).props("clearable").classes("w-full")

    def _render_profile(self, person):
        def save(**changes):
            self._handle(self.graph.update_person(person.model_copy(update=changes)))

        name = ui.input("Full Name", value=person.name).classes("w-full")
        name.on("blur", lambda: save(name=name.value or ""))
        ui.select(
            {g: g.value.title() for g in Gender},
            value=person.gender,
            label="Gender",
            on_change=lambda e: save(gender=Gender(e.value)),
        ).classes("w-full")
        with ui.row().classes("w-full no-wrap"):
            born = ui.input("Born", value=person.birth_year or "")
            born.on("blur", lambda: save(birth_year=born.value or None))
            died = ui.input("Passed", value=person.death_year or "")
            died.on("blur", lambda: save(death_year=died.value or None))
            died.set_enabled(bool(person.is_deceased))
        ui.switch("Deceased", value=bool(person.is_deceased),
                  on_change=lambda e: save(is_deceased=e.value))
        ui.select(
            {name: name for name in PRESET_COLORS},
            value=next((n for n, v in PRESET_COLORS.items() if v == person.color), "Default"),
            label="Color Theme",
            on_change=lambda e: save(color=PRESET_COLORS.get(e.value)),
        ).classes("w-full")

        ui.separator().classes("my-2")
        self._render_move(person)

        if person.id != ROOT_PERSON_ID:
            ui.button("🗑️ Remove from tree", on_click=lambda: self._confirm_delete(person)) \
                .classes("bg-red-400 w-full mt-2")

    def _render_move(self, person):
        ui.select(
            self._person_options(),
            value=list(self.group),
            multiple=True,
            label="Move together with",
            on_change=lambda e: setattr(self, "group", set(e.value or [])),
        ).classes("w-full")

        def nudge(dx, dy):
            self._handle(self.graph.move_nodes(drag_targets(person.id, self.group), dx, dy))

        with ui.row().classes("gap-1"):
            ui.button("←", on_click=lambda: nudge(-NUDGE_STEP, 0)).props("dense")
            ui.button("↑", on_click=lambda: nudge(0, -NUDGE_STEP)).props("dense")
            ui.button("↓", on_click=lambda: nudge(0, NUDGE_STEP)).props("dense")
            ui.button("→", on_click=lambda: nudge(NUDGE_STEP, 0)).props("dense")

    def _confirm_delete(self, person):
        with ui.dialog() as dialog, ui.card():
            ui.label(f"Delete {person.name or 'this person'}?").classes("text-lg font-bold")
            ui.label("This will remove the person and all their relationships.")

            def confirm():
                dialog.close()
                self._handle(self.graph.delete_person(person.id))

            with ui.row().classes("gap-2 mt-4"):
                ui.button("Cancel", on_click=dialog.close)
                ui.button("Delete", on_click=confirm).classes("bg-red-500")
        dialog.open()

    def _render_connect(self, person):
        parents = self.graph.get_parents(person.id)
        spouses = self.graph.get_spouses(person.id)

        ui.button("Add Parents", on_click=lambda: self._handle(self.graph.add_parent(person.id))) \
            .classes("w-full").set_enabled(len(parents) < 2)
        ui.button("Add Sibling", on_click=lambda: self._handle(self.graph.add_sibling(person.id))) \
            .classes("w-full")
        ui.button("Add Partner", on_click=lambda: self._handle(self.graph.add_spouse(person.id))) \
            .classes("w-full")

        partner = ui.select(
            {s.id: s.name or "Unnamed" for s in spouses},
            label="Child with (blank = new partner)",
            clearable=True,
        ).classes("w-full")
        ui.button(
            "New Child",
            on_click=lambda: self._handle(self.graph.add_child(person.id, partner.value or None)),
        ).classes("w-full")

        ui.separator().classes("my-2")
        ui.label("Link to someone").classes("font-bold")
        target = ui.select(self._person_options(exclude=person.id), label="Person").classes("w-full")
        kind = ui.select({t.value: t.value for t in RelationshipType},
                         value=RelationshipType.OTHER.value, label="Type").classes("w-full")
        label = ui.input("Label (e.g. Godparent)").classes("w-full")
        ui.button(
            "🔗 Link",
            on_click=lambda: self._handle(
                self.graph.add_relationship(person.id, target.value, kind.value, label.value or None)
            ) if target.value else ui.notify("Select a person first", type="warning"),
        ).classes("w-full")

        for rel, other in other_relations_of(self.graph.data, person.id):
            with ui.row().classes("items-center w-full"):
                ui.label(f"{rel.label or 'Related'}: {other.name}").classes("text-sm flex-1")
                ui.button("✕", on_click=lambda _, rid=rel.id: self._handle(self.graph.delete_relationship(rid))) \
                    .props("flat dense")

    def _render_files(self):
        ui.button("Download (.json)", on_click=self._export).classes("w-full")
        ui.upload(label="Restore from File", auto_upload=True, on_upload=self._import) \
            .props('accept=".json"').classes("w-full")
        ui.button("Wipe All Data", on_click=self._confirm_reset).classes("bg-red-400 w-full")

    def _export(self):
        ui.download(self.graph.export_json().encode("utf-8"), export_filename())

    async def _import(self, e: events.UploadEventArguments):
        try:
            text = decode_upload(e.content.read())
        except InvalidDocumentError as err:
            ui.notify(str(err), type="warning")
            return
        result = self._handle(self.graph.import_json(text))
        if result.success:
            persons = self.graph.data.persons
            self._select(persons[0].id if persons else None)

    def _confirm_reset(self):
        with ui.dialog() as dialog, ui.card():
            ui.label("Are you sure you want to delete your entire tree?").classes("font-bold")
            ui.label("This cannot be undone.")

            def confirm():
                dialog.close()
                self._handle(self.graph.reset())
                self._select(ROOT_PERSON_ID)

            with ui.row().classes("gap-2 mt-4"):
                ui.button("Cancel", on_click=dialog.close)
                ui.button("Wipe", on_click=confirm).classes("bg-red-500")
        dialog.open()
