"""Workbook backends for the room registry.

A workbook holds the documents (one sheet per room plus templates), the
dashboard rows, and the two input tables. The registry only talks to the
Workbook interface; LocalWorkbook keeps everything in a JSON file and
core.sheets.SheetsWorkbook talks to Google Sheets.
"""

import copy
import json
from pathlib import Path

from core.config import RegistryConfig
from models.types import DashboardCell, DocumentHandle


class WorkbookError(Exception):
    """Raised when the workbook backend cannot complete a request."""


class Workbook:
    """Interface shared by the workbook backends.

    Row numbers are 1-based dashboard rows, as shown in a spreadsheet.
    """

    def __init__(self, config: RegistryConfig):
        self.config = config

    # Documents
    def list_names(self) -> set[str]:
        raise NotImplementedError

    def find_document(self, name: str) -> DocumentHandle | None:
        raise NotImplementedError

    def clone_template(self, template_id: str, name: str) -> DocumentHandle:
        raise NotImplementedError

    def rename_document(self, handle: DocumentHandle, new_name: str):
        raise NotImplementedError

    def delete_document(self, handle: DocumentHandle):
        raise NotImplementedError

    # Dashboard
    def boundary_rows(self) -> tuple[int, int]:
        """Return (material_row, sum_row)."""
        raise NotImplementedError

    def read_cells(self, first_row: int, count: int) -> list[DashboardCell]:
        raise NotImplementedError

    def write_cells(self, first_row: int, cells: list[DashboardCell]):
        raise NotImplementedError

    def update_cells(self, changes: dict[int, DashboardCell]):
        """Write only the given rows, in one batch. Other rows are left as they are."""
        raise NotImplementedError

    def insert_rows(self, position: int, count: int):
        raise NotImplementedError

    def delete_rows(self, position: int, count: int):
        raise NotImplementedError

    def first_column(self) -> list[str]:
        raise NotImplementedError

    # Input tables
    def read_add_table(self) -> list[list[str]]:
        raise NotImplementedError

    def append_add_row(self, row: list[str]):
        raise NotImplementedError

    def clear_add_table(self):
        raise NotImplementedError

    def read_selection(self) -> list[tuple[str, bool]]:
        """Return (room_name, checked) for every row of the selection table."""
        raise NotImplementedError

    def set_checked(self, names: list[str], checked: bool = True):
        raise NotImplementedError

    def uncheck_selection(self):
        checked = [name for name, is_checked in self.read_selection() if is_checked]
        if checked:
            self.set_checked(checked, False)

    def band_cells(self) -> list[DashboardCell]:
        """Read the room rows between the material and sum rows."""
        material_row, sum_row = self.boundary_rows()
        return self.read_cells(material_row + 1, sum_row - material_row - 1)


class LocalWorkbook(Workbook):
    """Workbook stored as a single JSON file.

    Named rows shift when rows are inserted or deleted above them, the same
    way spreadsheet named ranges do. Every mutation is written straight to
    disk.
    """

    def __init__(self, path: Path, config: RegistryConfig):
        super().__init__(config)
        self.path = Path(path)
        if not self.path.exists():
            raise WorkbookError(f"Workbook not found: {self.path}. Run 'init' to create one.")
        try:
            with open(self.path, 'r') as f:
                self.data = json.load(f)
        except (OSError, ValueError) as e:
            raise WorkbookError(f"Could not read workbook {self.path}: {e}") from e

    def _save(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump(self.data, f, indent=2)

    def _document(self, name: str) -> dict | None:
        for doc in self.data['documents']:
            if doc['name'] == name:
                return doc
        return None

    def _document_by_id(self, doc_id: int) -> dict:
        for doc in self.data['documents']:
            if doc['id'] == doc_id:
                return doc
        raise WorkbookError(f"Document {doc_id} no longer exists")

    @property
    def _rows(self) -> list[dict]:
        return self.data['dashboard']

    def list_names(self) -> set[str]:
        return {doc['name'] for doc in self.data['documents']}

    def find_document(self, name: str) -> DocumentHandle | None:
        doc = self._document(name)
        return DocumentHandle(doc['id'], doc['name']) if doc else None

    def clone_template(self, template_id: str, name: str) -> DocumentHandle:
        template = self._document(template_id)
        if template is None:
            raise WorkbookError(f"Template '{template_id}' not found")
        if self._document(name) is not None:
            raise WorkbookError(f"A document named '{name}' already exists")

        doc_id = self.data['next_id']
        self.data['next_id'] = doc_id + 1
        self.data['documents'].append({
            'id': doc_id,
            'name': name,
            'hidden': False,
            'tab_colour': self.config.tab_colour,
            'content': copy.deepcopy(template.get('content', {})),
        })
        self._save()
        return DocumentHandle(doc_id, name)

    def rename_document(self, handle: DocumentHandle, new_name: str):
        doc = self._document_by_id(handle.doc_id)
        doc['name'] = new_name
        self._save()

    def delete_document(self, handle: DocumentHandle):
        self._document_by_id(handle.doc_id)
        self.data['documents'] = [d for d in self.data['documents'] if d['id'] != handle.doc_id]
        self._save()

    def boundary_rows(self) -> tuple[int, int]:
        named = self.data.get('named_rows', {})
        try:
            return named[self.config.material_row_range], named[self.config.sum_row_range]
        except KeyError as e:
            raise WorkbookError(f"Named row {e} is missing from the dashboard") from e

    def _check_rows(self, first_row: int, count: int):
        if first_row < 1 or first_row + count - 1 > len(self._rows):
            raise WorkbookError(f"Rows {first_row}-{first_row + count - 1} are outside the dashboard")

    def read_cells(self, first_row: int, count: int) -> list[DashboardCell]:
        if count <= 0:
            return []
        self._check_rows(first_row, count)
        rows = self._rows[first_row - 1:first_row - 1 + count]
        return [DashboardCell(row.get('label', ''), row.get('link')) for row in rows]

    def write_cells(self, first_row: int, cells: list[DashboardCell]):
        if not cells:
            return
        self._check_rows(first_row, len(cells))
        for offset, cell in enumerate(cells):
            self._rows[first_row - 1 + offset] = {'label': cell.label, 'link': cell.link}
        self._save()

    def update_cells(self, changes: dict[int, DashboardCell]):
        if not changes:
            return
        for row in changes:
            self._check_rows(row, 1)
        for row, cell in changes.items():
            self._rows[row - 1].update({'label': cell.label, 'link': cell.link})
        self._save()

    def insert_rows(self, position: int, count: int):
        if position < 1 or position > len(self._rows) + 1:
            raise WorkbookError(f"Cannot insert rows at {position}")
        for _ in range(count):
            self._rows.insert(position - 1, {'label': '', 'link': None})
        named = self.data.setdefault('named_rows', {})
        for key, row in named.items():
            if row >= position:
                named[key] = row + count
        self._save()

    def delete_rows(self, position: int, count: int):
        self._check_rows(position, count)
        del self._rows[position - 1:position - 1 + count]
        last = position + count - 1
        named = self.data.setdefault('named_rows', {})
        for key in list(named):
            row = named[key]
            if position <= row <= last:
                del named[key]
            elif row > last:
                named[key] = row - count
        self._save()

    def first_column(self) -> list[str]:
        return [row.get('label', '') for row in self._rows]

    def read_add_table(self) -> list[list[str]]:
        return [list(row) for row in self.data.get('add_rooms', [])]

    def append_add_row(self, row: list[str]):
        self.data.setdefault('add_rooms', []).append(list(row))
        self._save()

    def clear_add_table(self):
        self.data['add_rooms'] = []
        self._save()

    def read_selection(self) -> list[tuple[str, bool]]:
        # The selection table lists the rooms on the dashboard
        selected = set(self.data.get('selected', []))
        return [(cell.label, cell.label in selected) for cell in self.band_cells() if cell.label]

    def set_checked(self, names: list[str], checked: bool = True):
        selected = [n for n in self.data.get('selected', []) if n not in names]
        if checked:
            selected.extend(names)
        self.data['selected'] = selected
        self._save()

    def uncheck_selection(self):
        # Also drops selections left behind by renamed or deleted rooms
        self.data['selected'] = []
        self._save()


def create_workbook(path: Path, config: RegistryConfig, templates: list[str]) -> dict:
    """Create a new local workbook with an empty dashboard and template documents.

    Templates are hidden documents named after the template plus its suffix,
    one per budgeting kind when kinds are configured.

    Args:
        path: Where to write the workbook JSON file
        config: Registry configuration
        templates: Base template names (e.g. ['Kitchen', 'Bathroom'])

    Returns:
        The workbook data that was written
    """
    documents = [{'id': 0, 'name': config.dashboard_sheet, 'hidden': False,
                  'tab_colour': None, 'content': {}}]
    suffixes = [suffix for _, suffix in config.budgeting_suffixes] or [config.template_suffix]
    for template in templates:
        for suffix in suffixes:
            documents.append({
                'id': len(documents),
                'name': f"{template}{suffix}",
                'hidden': True,
                'tab_colour': None,
                'content': {'template': template},
            })

    data = {
        'documents': documents,
        'next_id': len(documents),
        'dashboard': [
            {'label': 'Room', 'link': None},
            {'label': 'Material', 'link': None},
            {'label': 'Sum', 'link': None},
        ],
        'named_rows': {config.material_row_range: 2, config.sum_row_range: 3},
        'add_rooms': [],
        'selected': [],
    }

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
    return data
