"""Google Sheets workbook backend.

Implements the Workbook interface on top of the Google Sheets v4 REST API.
Each room is a sheet cloned from a template sheet, the dashboard is a sheet
whose first column holds linked room names, and the boundary rows and input
tables are located through named ranges.
"""

from urllib.parse import quote

import click
import requests

from core.config import RegistryConfig
from core.workbook import Workbook, WorkbookError
from models.types import DashboardCell, DocumentHandle

SHEETS_API_URL = 'https://sheets.googleapis.com/v4/spreadsheets'


def hex_to_rgb(colour: str) -> dict:
    """Convert '#rrggbb' into a Sheets API Color dict."""
    colour = colour.lstrip('#')
    red, green, blue = (int(colour[i:i + 2], 16) / 255 for i in (0, 2, 4))
    return {'red': red, 'green': green, 'blue': blue}


def cell_data(cell: DashboardCell) -> dict:
    """Build the CellData for a linked dashboard cell."""
    data = {'userEnteredValue': {'stringValue': cell.label}}
    if cell.link and cell.label:
        data['textFormatRuns'] = [{'startIndex': 0, 'format': {'link': {'uri': cell.link}, 'bold': False}}]
    return data


def parse_cell(value: dict) -> DashboardCell:
    """Read label and link from a CellData dict returned with grid data."""
    label = value.get('formattedValue', '')
    link = value.get('hyperlink')
    if not link:
        for run in value.get('textFormatRuns', []):
            uri = run.get('format', {}).get('link', {}).get('uri')
            if uri:
                link = uri
                break
    return DashboardCell(label, link)


class SheetsWorkbook(Workbook):
    """Workbook backed by a Google spreadsheet."""

    def __init__(self, spreadsheet_id: str, access_token: str, config: RegistryConfig,
                 session: requests.Session | None = None):
        super().__init__(config)
        self.spreadsheet_id = spreadsheet_id
        self.access_token = access_token
        self.base_url = f"{SHEETS_API_URL}/{spreadsheet_id}"
        self.session = session or requests.Session()

    def _request(self, method: str, endpoint: str = '', params: dict | None = None,
                 data: dict | None = None) -> dict:
        """Make a request to the Sheets API and return the decoded body."""
        url = f"{self.base_url}{endpoint}"
        headers = {'Authorization': f"Bearer {self.access_token}"}

        try:
            response = self.session.request(method, url, headers=headers, params=params,
                                            json=data, timeout=10)
            response.raise_for_status()
            return response.json() if response.content else {}
        except requests.RequestException as e:
            click.echo(f"API request error: {e}", err=True)
            if getattr(e, 'response', None) is not None:
                click.echo(f"Response body: {e.response.text}", err=True)
            raise WorkbookError(f"Google Sheets request failed: {e}") from e

    def _batch_update(self, updates: list[dict]) -> list[dict]:
        result = self._request('POST', ':batchUpdate', data={'requests': updates})
        return result.get('replies', [])

    def _metadata(self) -> dict:
        return self._request('GET', params={
            'fields': 'sheets.properties(sheetId,title,hidden),namedRanges(name,range)'
        })

    def _sheets(self) -> list[dict]:
        return [s['properties'] for s in self._metadata().get('sheets', [])]

    def _sheet(self, title: str) -> dict | None:
        for props in self._sheets():
            if props['title'] == title:
                return props
        return None

    def _dashboard_id(self) -> int:
        props = self._sheet(self.config.dashboard_sheet)
        if props is None:
            raise WorkbookError(f"Dashboard sheet '{self.config.dashboard_sheet}' not found")
        return props['sheetId']

    def _named_range(self, name: str) -> dict:
        for named in self._metadata().get('namedRanges', []):
            if named['name'] == name:
                return named['range']
        raise WorkbookError(f"Named range '{name}' not found")

    def _values(self, a1_range: str) -> list[list]:
        result = self._request('GET', f"/values/{quote(a1_range, safe='')}",
                               params={'valueRenderOption': 'UNFORMATTED_VALUE'})
        return result.get('values', [])

    def _dashboard_a1(self, first_row: int | str = '', last_row: int | str = '') -> str:
        return f"'{self.config.dashboard_sheet}'!A{first_row}:A{last_row}"

    # Documents

    def list_names(self) -> set[str]:
        return {props['title'] for props in self._sheets()}

    def find_document(self, name: str) -> DocumentHandle | None:
        props = self._sheet(name)
        return DocumentHandle(props['sheetId'], props['title']) if props else None

    def clone_template(self, template_id: str, name: str) -> DocumentHandle:
        template = self._sheet(template_id)
        if template is None:
            raise WorkbookError(f"Template '{template_id}' not found")

        replies = self._batch_update([{
            'duplicateSheet': {
                'sourceSheetId': template['sheetId'],
                'newSheetName': name,
                'insertSheetIndex': len(self._sheets()),
            }
        }])
        sheet_id = replies[0]['duplicateSheet']['properties']['sheetId']

        self._batch_update([{
            'updateSheetProperties': {
                'properties': {
                    'sheetId': sheet_id,
                    'hidden': False,
                    'tabColorStyle': {'rgbColor': hex_to_rgb(self.config.tab_colour)},
                },
                'fields': 'hidden,tabColorStyle',
            }
        }])
        return DocumentHandle(sheet_id, name)

    def rename_document(self, handle: DocumentHandle, new_name: str):
        self._batch_update([{
            'updateSheetProperties': {
                'properties': {'sheetId': handle.doc_id, 'title': new_name},
                'fields': 'title',
            }
        }])

    def delete_document(self, handle: DocumentHandle):
        self._batch_update([{'deleteSheet': {'sheetId': handle.doc_id}}])

    # Dashboard

    def boundary_rows(self) -> tuple[int, int]:
        material = self._named_range(self.config.material_row_range)
        total = self._named_range(self.config.sum_row_range)
        return material.get('startRowIndex', 0) + 1, total.get('startRowIndex', 0) + 1

    def read_cells(self, first_row: int, count: int) -> list[DashboardCell]:
        if count <= 0:
            return []
        result = self._request('GET', params={
            'ranges': self._dashboard_a1(first_row, first_row + count - 1),
            'includeGridData': 'true',
            'fields': 'sheets.data.rowData.values(formattedValue,hyperlink,textFormatRuns)',
        })
        sheets = result.get('sheets', [])
        data = sheets[0].get('data', [{}]) if sheets else [{}]
        row_data = data[0].get('rowData', []) if data else []

        cells = []
        for index in range(count):
            values = row_data[index].get('values', []) if index < len(row_data) else []
            cells.append(parse_cell(values[0]) if values else DashboardCell(''))
        return cells

    def write_cells(self, first_row: int, cells: list[DashboardCell]):
        if not cells:
            return
        self._batch_update([{
            'updateCells': {
                'rows': [{'values': [cell_data(cell)]} for cell in cells],
                'fields': 'userEnteredValue,textFormatRuns',
                'start': {'sheetId': self._dashboard_id(), 'rowIndex': first_row - 1, 'columnIndex': 0},
            }
        }])

    def update_cells(self, changes: dict[int, DashboardCell]):
        if not changes:
            return
        sheet_id = self._dashboard_id()
        self._batch_update([{
            'updateCells': {
                'rows': [{'values': [cell_data(cell)]}],
                'fields': 'userEnteredValue,textFormatRuns',
                'start': {'sheetId': sheet_id, 'rowIndex': row - 1, 'columnIndex': 0},
            }
        } for row, cell in sorted(changes.items())])

    def insert_rows(self, position: int, count: int):
        self._batch_update([{
            'insertDimension': {
                'range': {
                    'sheetId': self._dashboard_id(),
                    'dimension': 'ROWS',
                    'startIndex': position - 1,
                    'endIndex': position - 1 + count,
                },
                'inheritFromBefore': position > 1,
            }
        }])

    def delete_rows(self, position: int, count: int):
        self._batch_update([{
            'deleteDimension': {
                'range': {
                    'sheetId': self._dashboard_id(),
                    'dimension': 'ROWS',
                    'startIndex': position - 1,
                    'endIndex': position - 1 + count,
                }
            }
        }])

    def first_column(self) -> list[str]:
        return ['' if not row else str(row[0]) for row in self._values(self._dashboard_a1())]

    # Input tables

    def read_add_table(self) -> list[list[str]]:
        return [['' if v is None else str(v) for v in row] for row in self._values(self.config.add_rooms_range)]

    def append_add_row(self, row: list[str]):
        grid = self._named_range(self.config.add_rooms_range)
        height = grid.get('endRowIndex', 0) - grid.get('startRowIndex', 0)
        existing = self._values(self.config.add_rooms_range)

        for index in range(height):
            if index >= len(existing) or ''.join(str(v) for v in existing[index]) == '':
                break
        else:
            raise WorkbookError("The add-rooms table is full")

        self._batch_update([{
            'updateCells': {
                'rows': [{'values': [{'userEnteredValue': {'stringValue': str(v)}} for v in row]}],
                'fields': 'userEnteredValue',
                'start': {
                    'sheetId': grid.get('sheetId', 0),
                    'rowIndex': grid.get('startRowIndex', 0) + index,
                    'columnIndex': grid.get('startColumnIndex', 0),
                },
            }
        }])

    def clear_add_table(self):
        self._request('POST', f"/values/{quote(self.config.add_rooms_range, safe='')}:clear")

    def read_selection(self) -> list[tuple[str, bool]]:
        name_col = self.config.selection_name_column
        check_col = self.config.selection_check_column
        selection = []
        for row in self._values(self.config.existing_rooms_range):
            name = str(row[name_col]) if len(row) > name_col and row[name_col] is not None else ''
            if not name:
                continue
            checked = len(row) > check_col and row[check_col] is True
            selection.append((name, checked))
        return selection

    def set_checked(self, names: list[str], checked: bool = True):
        grid = self._named_range(self.config.existing_rooms_range)
        name_col = self.config.selection_name_column
        updates = []
        for index, row in enumerate(self._values(self.config.existing_rooms_range)):
            if len(row) > name_col and str(row[name_col]) in names:
                updates.append({
                    'updateCells': {
                        'rows': [{'values': [{'userEnteredValue': {'boolValue': checked}}]}],
                        'fields': 'userEnteredValue',
                        'start': {
                            'sheetId': grid.get('sheetId', 0),
                            'rowIndex': grid.get('startRowIndex', 0) + index,
                            'columnIndex': grid.get('startColumnIndex', 0) + self.config.selection_check_column,
                        },
                    }
                })
        if updates:
            self._batch_update(updates)
