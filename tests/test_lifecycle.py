"""Tests for the room lifecycle operations in models/lifecycle.py

These run against a real local workbook in a temporary directory. A spy
(MagicMock wrapping the workbook) records every call so tests can assert
that aborted operations made no mutating calls at all.
"""

import pytest
from unittest.mock import MagicMock

from core.workbook import LocalWorkbook, WorkbookError
from models.lifecycle import RoomRegistry, parse_add_rows
from models.types import DashboardCell, Outcome, RoomEntry

MUTATING_CALLS = (
    'clone_template', 'rename_document', 'delete_document', 'insert_rows', 'delete_rows',
    'write_cells', 'update_cells', 'clear_add_table', 'append_add_row', 'set_checked', 'uncheck_selection',
)


def mutating_calls(spy: MagicMock) -> list[str]:
    return [name for name, _, _ in spy.method_calls if name in MUTATING_CALLS]


def add_rooms(registry: RoomRegistry, workbook: LocalWorkbook, *names: str):
    for name in names:
        workbook.append_add_row([name, 'Kitchen'])
    assert registry.add_rooms() is Outcome.APPLIED


@pytest.fixture
def registry(workbook, operator, registry_config):
    return RoomRegistry(workbook, operator, registry_config)


@pytest.fixture
def spy(workbook):
    return MagicMock(wraps=workbook)


class TestParseAddRows:
    """Test turning add-table rows into entries."""

    def test_skips_blank_rows_and_pads(self):
        rows = [['Den', 'Kitchen'], ['', '', ''], ['Hall', 'Kitchen', 'Hourly']]
        assert parse_add_rows(rows) == [
            RoomEntry('Den', 'Kitchen', ''),
            RoomEntry('Hall', 'Kitchen', 'Hourly'),
        ]


class TestAddRooms:
    """Test AddRooms."""

    def test_creates_documents_and_linked_rows(self, registry, workbook):
        workbook.append_add_row(['Den', 'Kitchen'])
        workbook.append_add_row(['Hall', 'Bathroom'])

        assert registry.add_rooms() is Outcome.APPLIED

        den = workbook.find_document('Den')
        hall = workbook.find_document('Hall')
        assert workbook.band_cells() == [
            DashboardCell('Den', den.link),
            DashboardCell('Hall', hall.link),
        ]
        assert workbook.boundary_rows() == (2, 5)
        assert workbook.read_add_table() == []

    def test_cloned_documents_are_visible_and_coloured(self, registry, workbook, registry_config):
        add_rooms(registry, workbook, 'Den')

        doc = workbook._document('Den')
        assert doc['hidden'] is False
        assert doc['tab_colour'] == registry_config.tab_colour
        assert doc['content'] == {'template': 'Kitchen'}

    def test_new_rows_go_below_existing_rooms(self, registry, workbook):
        add_rooms(registry, workbook, 'Den')
        add_rooms(registry, workbook, 'Hall', 'Attic')

        assert [c.label for c in workbook.band_cells()] == ['Den', 'Hall', 'Attic']

    def test_invalid_batch_changes_nothing(self, workbook, operator, registry_config, spy):
        workbook.append_add_row(['Den', 'Kitchen'])
        workbook.append_add_row(['Den', 'Bathroom'])
        workbook.append_add_row(['', 'Kitchen'])
        registry = RoomRegistry(spy, operator, registry_config)

        assert registry.add_rooms() is Outcome.INVALID

        assert mutating_calls(spy) == []
        operator.alert.assert_called_once_with("Name missing for room 3\nDuplicate room names: Den")
        assert len(workbook.read_add_table()) == 3

    def test_existing_room_rejected(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den')
        workbook.append_add_row(['Den', 'Kitchen'])

        assert registry.add_rooms() is Outcome.INVALID
        assert "Room 1: 'Den' already exists" in operator.alert.call_args[0][0]

    def test_unknown_template_rejected(self, registry, workbook, operator):
        workbook.append_add_row(['Den', 'Garage'])

        assert registry.add_rooms() is Outcome.INVALID
        operator.alert.assert_called_once_with("Template 'Garage (template)' not found for room 1")

    def test_nothing_to_add(self, registry, operator):
        assert registry.add_rooms() is Outcome.NOTHING_TO_DO
        operator.notify.assert_called_once_with("No new rooms to add")

    def test_clone_failure_inserts_no_rows(self, workbook, operator, registry_config, spy):
        workbook.append_add_row(['Den', 'Kitchen'])
        workbook.append_add_row(['Hall', 'Kitchen'])
        real_clone = workbook.clone_template

        def clone(template_id, name):
            if name == 'Hall':
                raise WorkbookError('quota exceeded')
            return real_clone(template_id, name)

        spy.clone_template.side_effect = clone
        registry = RoomRegistry(spy, operator, registry_config)

        assert registry.add_rooms() is Outcome.FAILED

        operator.alert.assert_called_once_with('quota exceeded')
        spy.insert_rows.assert_not_called()
        assert workbook.band_cells() == []
        assert len(workbook.read_add_table()) == 2


class TestRenameRooms:
    """Test RenameRooms."""

    def test_nothing_selected(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den')

        assert registry.rename_rooms() is Outcome.NOTHING_TO_DO
        operator.notify.assert_called_with("No rooms selected")

    def test_renames_documents_and_labels(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den', 'Hall')
        den_link = workbook.find_document('Den').link
        workbook.set_checked(['Den', 'Hall'])
        operator.prompt_text.side_effect = ['Study', ' Corridor ']

        assert registry.rename_rooms() is Outcome.APPLIED

        assert workbook.find_document('Den') is None
        assert workbook.find_document('Study').link == den_link
        assert workbook.band_cells()[0] == DashboardCell('Study', den_link)
        assert [c.label for c in workbook.band_cells()] == ['Study', 'Corridor']
        assert workbook.read_selection() == [('Study', False), ('Corridor', False)]

    def test_reprompts_until_valid(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den')
        workbook.set_checked(['Den'])
        operator.prompt_text.side_effect = ['  ', 'Kitchen (template)', 'Study']

        assert registry.rename_rooms() is Outcome.APPLIED

        assert operator.prompt_text.call_count == 3
        assert [c[0][0] for c in operator.alert.call_args_list] == [
            "Name missing for room Den",
            "Room Kitchen (template) already exists",
        ]

    def test_same_new_name_twice_rejected(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den', 'Hall')
        workbook.set_checked(['Den', 'Hall'])
        operator.prompt_text.side_effect = ['Study', 'Study', 'Office']

        assert registry.rename_rooms() is Outcome.APPLIED
        operator.alert.assert_called_once_with("You have already entered: Study")
        assert [c.label for c in workbook.band_cells()] == ['Study', 'Office']

    def test_chained_rename_rejected(self, registry, workbook, operator):
        """Renaming Den to Hall is refused while Hall still exists, even if Hall is renamed too."""
        add_rooms(registry, workbook, 'Den', 'Hall')
        workbook.set_checked(['Den', 'Hall'])
        operator.prompt_text.side_effect = ['Hall', 'Study', 'Office']

        assert registry.rename_rooms() is Outcome.APPLIED
        operator.alert.assert_called_once_with("Room Hall already exists")
        assert [c.label for c in workbook.band_cells()] == ['Study', 'Office']

    def test_cancel_discards_whole_batch(self, workbook, operator, registry_config, spy):
        registry = RoomRegistry(workbook, operator, registry_config)
        add_rooms(registry, workbook, 'Den', 'Hall', 'Attic')
        workbook.set_checked(['Den', 'Hall', 'Attic'])
        operator.prompt_text.side_effect = ['Study', None]
        registry = RoomRegistry(spy, operator, registry_config)

        assert registry.rename_rooms() is Outcome.CANCELLED

        assert operator.prompt_text.call_count == 2
        assert mutating_calls(spy) == []
        assert [c.label for c in workbook.band_cells()] == ['Den', 'Hall', 'Attic']
        assert workbook.find_document('Study') is None


class TestDeleteRooms:
    """Test DeleteRooms."""

    def test_nothing_selected(self, registry, operator):
        assert registry.delete_rooms() is Outcome.NOTHING_TO_DO
        operator.confirm.assert_not_called()

    def test_declined_changes_nothing(self, workbook, operator, registry_config, spy):
        registry = RoomRegistry(workbook, operator, registry_config)
        add_rooms(registry, workbook, 'Den', 'Hall')
        workbook.set_checked(['Hall'])
        operator.confirm.return_value = False
        registry = RoomRegistry(spy, operator, registry_config)

        assert registry.delete_rooms() is Outcome.DECLINED
        assert mutating_calls(spy) == []

    def test_deletes_documents_and_rows(self, registry, workbook, operator):
        add_rooms(registry, workbook, 'Den', 'Hall', 'Attic', 'Study')
        workbook.set_checked(['Hall', 'Attic', 'Den'])

        assert registry.delete_rooms() is Outcome.APPLIED

        operator.confirm.assert_called_once_with("Do you really want to delete the rooms: Den, Hall, Attic?")
        assert [c.label for c in workbook.band_cells()] == ['Study']
        assert workbook.find_document('Hall') is None
        assert workbook.boundary_rows() == (2, 4)
        assert workbook.read_selection() == [('Study', False)]

    def test_missing_document_still_removes_row(self, registry, workbook):
        add_rooms(registry, workbook, 'Den', 'Hall')
        workbook.delete_document(workbook.find_document('Den'))
        workbook.set_checked(['Den'])

        assert registry.delete_rooms() is Outcome.APPLIED
        assert [c.label for c in workbook.band_cells()] == ['Hall']
