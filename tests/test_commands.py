"""Tests for the CLI commands, driven through click's CliRunner.

Each test gets its own user config and local workbook in a temporary
directory, so nothing outside tmp_path is read or written.
"""

import json
import pytest
from unittest.mock import patch
from click.testing import CliRunner

from room_registry import cli


@pytest.fixture
def runner(tmp_path):
    """CliRunner with the user config pointed at a temporary workbook."""
    config_file = tmp_path / 'config.json'
    config_file.write_text(json.dumps({
        'backend': 'local',
        'workbook_path': str(tmp_path / 'workbook.json'),
        'registry': {},
    }))
    with patch('core.config.USER_CONFIG_FILE', config_file):
        yield CliRunner()


@pytest.fixture
def initialised(runner):
    result = runner.invoke(cli, ['init', '-t', 'Kitchen', '-t', 'Bathroom'])
    assert result.exit_code == 0
    return runner


def add(runner, *names):
    for name in names:
        assert runner.invoke(cli, ['stage', name, 'Kitchen']).exit_code == 0
    result = runner.invoke(cli, ['add-rooms'])
    assert result.exit_code == 0, result.output
    return result


class TestSetupCommands:
    """Test init, help and command suggestions."""

    def test_init_creates_workbook(self, initialised, tmp_path):
        data = json.loads((tmp_path / 'workbook.json').read_text())
        assert [d['name'] for d in data['documents']] == ['Dashboard', 'Kitchen (template)', 'Bathroom (template)']

    def test_init_refuses_to_overwrite(self, initialised):
        result = initialised.invoke(cli, ['init'])
        assert 'already exists' in result.output

    def test_help_lists_room_commands(self, runner):
        result = runner.invoke(cli, ['help'])
        assert result.exit_code == 0
        assert 'rename-rooms' in result.output

    def test_typo_suggests_command(self, runner):
        result = runner.invoke(cli, ['delete-room'])
        assert result.exit_code != 0
        assert 'delete-rooms' in result.output

    def test_missing_workbook(self, runner):
        result = runner.invoke(cli, ['rooms'])
        assert "Run 'init'" in result.output


class TestRoomCommands:
    """Test the room lifecycle through the CLI."""

    def test_room_commands_registered(self):
        for name in ('rooms', 'stage', 'select', 'add-rooms', 'rename-rooms', 'delete-rooms'):
            assert name in cli.commands

    def test_stage_and_add(self, initialised):
        result = add(initialised, 'Den', 'Hall')
        assert '✓ Added Den, Hall' in result.output

        listing = initialised.invoke(cli, ['rooms'])
        assert 'Rooms (2)' in listing.output
        assert '#gid=3' in listing.output

    def test_add_invalid_exits_non_zero(self, initialised):
        initialised.invoke(cli, ['stage', 'Den', 'Garage'])

        result = initialised.invoke(cli, ['add-rooms'])

        assert result.exit_code == 1
        assert "Template 'Garage (template)' not found for room 1" in result.output

    def test_add_nothing_queued(self, initialised):
        result = initialised.invoke(cli, ['add-rooms'])
        assert result.exit_code == 0
        assert 'No new rooms to add' in result.output

    def test_select_unknown_suggests(self, initialised):
        add(initialised, 'Kitchen upstairs')

        result = initialised.invoke(cli, ['select', 'Kitchen'])

        assert "No room named 'Kitchen'" in result.output
        assert 'Did you mean: Kitchen upstairs?' in result.output

    def test_rename(self, initialised):
        add(initialised, 'Den')
        initialised.invoke(cli, ['select', 'Den'])

        result = initialised.invoke(cli, ['rename-rooms'], input='Study\n')

        assert result.exit_code == 0
        assert 'Den → Study' in result.output
        assert 'Study' in initialised.invoke(cli, ['rooms']).output

    def test_rename_cancelled_at_prompt(self, initialised):
        add(initialised, 'Den', 'Hall')
        initialised.invoke(cli, ['select', 'Den', 'Hall'])

        # Input ends after the first answer, which aborts the second prompt
        result = initialised.invoke(cli, ['rename-rooms'], input='Study\n')

        assert 'nothing was changed' in result.output
        listing = initialised.invoke(cli, ['rooms']).output
        assert 'Den' in listing and 'Study' not in listing

    def test_delete_declined(self, initialised):
        add(initialised, 'Den')
        initialised.invoke(cli, ['select', 'Den'])

        result = initialised.invoke(cli, ['delete-rooms'], input='n\n')

        assert result.exit_code == 0
        assert 'Den' in initialised.invoke(cli, ['rooms']).output

    def test_delete_with_yes(self, initialised):
        add(initialised, 'Den', 'Hall')
        initialised.invoke(cli, ['select', 'Den'])

        result = initialised.invoke(cli, ['delete-rooms', '--yes'])

        assert '✓ Deleted Den' in result.output
        listing = initialised.invoke(cli, ['rooms']).output
        assert 'Rooms (1)' in listing and 'Hall' in listing

    def test_select_clear(self, initialised):
        add(initialised, 'Den')
        initialised.invoke(cli, ['select', 'Den'])
        initialised.invoke(cli, ['select', '--clear'])

        result = initialised.invoke(cli, ['delete-rooms'])

        assert 'No rooms selected' in result.output
