"""Room lifecycle operations: add, rename and delete rooms.

Each operation reads what it needs once, validates, and only then touches
the workbook. Validation failures, empty selections and operator
cancellations leave the workbook untouched. A backend failure part way
through is reported to the operator; steps already applied stay applied.
"""

from typing import TYPE_CHECKING

from core.config import RegistryConfig
from core.workbook import WorkbookError
from models.dashboard import DashboardSync
from models.types import Accepted, Cancelled, Outcome, RoomEntry
from models.utils import non_blank_rows
from models.validation import RenameError, RoomValidationError, validate_new_rooms, validate_rename

if TYPE_CHECKING:
    from core.operator import ClickOperator
    from core.workbook import Workbook


def parse_add_rows(rows: list[list[str]]) -> list[RoomEntry]:
    """Turn non-blank add-table rows into RoomEntry values."""
    entries = []
    for row in non_blank_rows(rows):
        padded = row + [''] * (3 - len(row))
        entries.append(RoomEntry(name=padded[0], template=padded[1], kind=padded[2]))
    return entries


class RoomRegistry:
    """Coordinates validation, documents and the dashboard for room changes."""

    def __init__(self, workbook: 'Workbook', operator: 'ClickOperator', config: RegistryConfig):
        self.workbook = workbook
        self.operator = operator
        self.config = config
        self.dashboard = DashboardSync(workbook)

    def selected_rooms(self) -> list[str]:
        return [name for name, checked in self.workbook.read_selection() if checked]

    def add_rooms(self) -> Outcome:
        """Create the rooms listed in the add-rooms table."""
        try:
            entries = parse_add_rows(self.workbook.read_add_table())
            if not entries:
                self.operator.notify("No new rooms to add")
                return Outcome.NOTHING_TO_DO

            names = self.workbook.list_names()
            try:
                rooms = validate_new_rooms(entries, names, self.config, available_templates=names)
            except RoomValidationError as e:
                self.operator.alert(e.render())
                return Outcome.INVALID

            if not rooms:
                self.operator.notify("No new rooms to add")
                return Outcome.NOTHING_TO_DO

            # All documents exist before any dashboard row points at them
            for room in rooms:
                self.workbook.clone_template(room.template_id, room.name)
            self.dashboard.insert_linked_rows([room.name for room in rooms])
            self.workbook.clear_add_table()
        except WorkbookError as e:
            self.operator.alert(str(e))
            return Outcome.FAILED

        self.operator.success(f"Added {', '.join(room.name for room in rooms)}")
        return Outcome.APPLIED

    def request_new_name(self, old_name: str, existing_names: set[str],
                         assigned_names: set[str]) -> Accepted | Cancelled:
        """Prompt for a new name until it is valid or the operator cancels."""
        while True:
            response = self.operator.prompt_text(f"What do you want to rename {old_name} to?")
            if response is None:
                return Cancelled()
            try:
                return Accepted(validate_rename(old_name, response, existing_names, assigned_names))
            except RenameError as e:
                self.operator.alert(str(e))

    def collect_renames(self, old_names: list[str], existing_names: set[str]) -> dict[str, str] | None:
        """Ask for a new name for every room. Returns None if the operator cancels."""
        rename_map = {}
        for old_name in old_names:
            result = self.request_new_name(old_name, existing_names, set(rename_map.values()))
            if isinstance(result, Cancelled):
                return None
            rename_map[old_name] = result.name
        return rename_map

    def rename_rooms(self) -> Outcome:
        """Rename the rooms checked in the selection table."""
        try:
            selected = self.selected_rooms()
            if not selected:
                self.operator.notify("No rooms selected")
                return Outcome.NOTHING_TO_DO

            rename_map = self.collect_renames(selected, self.workbook.list_names())
            if rename_map is None:
                self.operator.notify("Rename cancelled, nothing was changed")
                return Outcome.CANCELLED

            for old_name, new_name in rename_map.items():
                handle = self.workbook.find_document(old_name)
                if handle is not None:
                    self.workbook.rename_document(handle, new_name)
            self.dashboard.relabel_rooms(rename_map)
            self.workbook.uncheck_selection()
        except WorkbookError as e:
            self.operator.alert(str(e))
            return Outcome.FAILED

        self.operator.success(', '.join(f"{old} → {new}" for old, new in rename_map.items()))
        return Outcome.APPLIED

    def delete_rooms(self) -> Outcome:
        """Delete the rooms checked in the selection table, after confirmation."""
        try:
            selected = self.selected_rooms()
            if not selected:
                self.operator.notify("No rooms selected")
                return Outcome.NOTHING_TO_DO

            if not self.operator.confirm(f"Do you really want to delete the rooms: {', '.join(selected)}?"):
                return Outcome.DECLINED

            for name in selected:
                handle = self.workbook.find_document(name)
                if handle is not None:
                    self.workbook.delete_document(handle)
            self.dashboard.remove_rooms(selected)
            self.workbook.uncheck_selection()
        except WorkbookError as e:
            self.operator.alert(str(e))
            return Outcome.FAILED

        self.operator.success(f"Deleted {', '.join(selected)}")
        return Outcome.APPLIED
