"""Dashboard synchronisation.

Keeps the dashboard rows in step with the room documents: inserting linked
rows for new rooms, relabelling rows after renames, and removing rows for
deleted rooms. Row positions are read once per call and never re-read while
a batch of edits is applied.
"""

from typing import TYPE_CHECKING

from core.workbook import WorkbookError
from models.types import DashboardCell
from models.utils import group_adjacent

if TYPE_CHECKING:
    from core.workbook import Workbook


class DashboardSync:
    """Applies room lifecycle changes to the dashboard of a workbook."""

    def __init__(self, workbook: 'Workbook'):
        self.workbook = workbook

    def insert_linked_rows(self, names: list[str]) -> int:
        """Insert one linked row per room just above the sum row.

        The documents must already exist; each row links to its document.

        Args:
            names: Room names, in the order the rows should appear

        Returns:
            The row of the first inserted room
        """
        if not names:
            return 0

        cells = []
        for name in names:
            handle = self.workbook.find_document(name)
            if handle is None:
                raise WorkbookError(f"No document found for room '{name}'")
            cells.append(DashboardCell(name, handle.link))

        _, sum_row = self.workbook.boundary_rows()
        self.workbook.insert_rows(sum_row, len(cells))
        self.workbook.write_cells(sum_row, cells)
        return sum_row

    def relabel_rooms(self, rename_map: dict[str, str]) -> int:
        """Rename room labels on the dashboard, keeping their links.

        The whole room band is read in one batch and the relabelled rows are
        written back in one batch. Rows with no rename are not written.

        Returns:
            Number of cells relabelled
        """
        material_row, sum_row = self.workbook.boundary_rows()
        first_row = material_row + 1
        cells = self.workbook.read_cells(first_row, sum_row - first_row)

        changes = {
            first_row + offset: DashboardCell(rename_map[cell.label], cell.link)
            for offset, cell in enumerate(cells)
            if cell.label in rename_map
        }
        if changes:
            self.workbook.update_cells(changes)
        return len(changes)

    def find_room_rows(self, names: list[str]) -> list[int]:
        """Return the sorted, de-duplicated dashboard rows of the named rooms.

        Each name resolves to its first match inside the room band; names
        without a row are skipped.
        """
        material_row, sum_row = self.workbook.boundary_rows()
        column = self.workbook.first_column()

        rows = set()
        for name in names:
            for index, label in enumerate(column):
                row = index + 1
                if label == name and material_row < row < sum_row:
                    rows.add(row)
                    break
        return sorted(rows)

    def remove_rooms(self, names: list[str]) -> list[tuple[int, int]]:
        """Delete the dashboard rows of the named rooms.

        Rows are deleted in contiguous groups, highest first.

        Returns:
            The (start, count) groups that were deleted, in deletion order
        """
        groups = group_adjacent(self.find_room_rows(names))
        for start, count in groups:
            self.workbook.delete_rows(start, count)
        return groups
