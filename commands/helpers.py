"""Shared helpers for the CLI commands."""

import click

from core.config import load_config, registry_config_from, workbook_path
from core.operator import ClickOperator
from core.workbook import LocalWorkbook, Workbook, WorkbookError
from models.lifecycle import RoomRegistry


def open_workbook(config: dict | None = None) -> Workbook | None:
    """Open the workbook backend selected in the user config.

    Args:
        config: User config dict (loaded from file if not given)

    Returns:
        A Workbook, or None if it could not be opened
    """
    config = config if config is not None else load_config()
    registry_config = registry_config_from(config.get('registry', {}))
    backend = config.get('backend', 'local')

    try:
        if backend == 'sheets':
            from core.sheets import SheetsWorkbook

            if not config.get('spreadsheet_id') or not config.get('access_token'):
                click.secho("✗ Google Sheets backend is not configured", fg='red')
                click.echo("Run 'configure --backend sheets' first.")
                return None
            return SheetsWorkbook(config['spreadsheet_id'], config['access_token'], registry_config)

        return LocalWorkbook(workbook_path(config), registry_config)
    except WorkbookError as e:
        click.secho(f"✗ {e}", fg='red')
        return None


def get_registry(assume_yes: bool = False) -> RoomRegistry | None:
    """Build a RoomRegistry on top of the configured workbook.

    This helper reduces boilerplate in the room commands.
    """
    config = load_config()
    workbook = open_workbook(config)
    if workbook is None:
        return None
    return RoomRegistry(workbook, ClickOperator(assume_yes=assume_yes), workbook.config)
