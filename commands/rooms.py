"""Room CLI commands.

This module provides CLI commands for listing, staging, selecting, adding,
renaming and deleting rooms.
"""

import click

from commands.helpers import get_registry, open_workbook
from core.workbook import WorkbookError
from models.types import Outcome
from models.utils import find_similar_strings


def _run(operation: str, action):
    """Run a registry operation, reporting unexpected errors and exit status."""
    try:
        outcome = action()
    except Exception as e:
        click.secho(f"✗ Error while trying to {operation}: {e}", fg='red')
        raise SystemExit(1)
    if outcome in (Outcome.INVALID, Outcome.FAILED):
        raise SystemExit(1)


@click.command(name='rooms')
def rooms_command():
    """List rooms on the dashboard with their links."""
    workbook = open_workbook()
    if workbook is None:
        return

    try:
        cells = workbook.band_cells()
        selection = dict(workbook.read_selection())
    except WorkbookError as e:
        click.secho(f"✗ {e}", fg='red')
        return

    click.echo()
    click.secho(f"=== Rooms ({len(cells)}) ===", fg='cyan', bold=True)
    click.echo()
    if not cells:
        click.echo("  (none)")
    width = max((len(cell.label) for cell in cells), default=0)
    for cell in cells:
        mark = click.style('[x]', fg='green') if selection.get(cell.label) else '[ ]'
        link = click.style(cell.link or 'no link', fg='white', dim=True)
        click.echo(f"  {mark} {cell.label:<{width}}  {link}")
    click.echo()


@click.command(name='stage')
@click.argument('name')
@click.argument('template')
@click.argument('kind', required=False, default='')
def stage_command(name: str, template: str, kind: str):
    """Queue a room in the add-rooms table.

    Nothing is created until 'add-rooms' runs.

    \b
    Examples:
      room-registry stage "Kitchen upstairs" Kitchen
      room-registry stage Bathroom Bathroom "Fixed price"
    """
    workbook = open_workbook()
    if workbook is None:
        return

    try:
        workbook.append_add_row([name, template, kind] if kind else [name, template])
    except WorkbookError as e:
        click.secho(f"✗ {e}", fg='red')
        return
    click.secho(f"✓ Queued {name}", fg='green')


@click.command(name='select')
@click.argument('names', nargs=-1)
@click.option('--clear', is_flag=True, help='Untick every room')
def select_command(names: tuple[str, ...], clear: bool):
    """Tick rooms in the selection table for rename-rooms/delete-rooms."""
    workbook = open_workbook()
    if workbook is None:
        return

    try:
        if clear:
            workbook.uncheck_selection()
            click.secho("✓ Selection cleared", fg='green')
            return

        known = [name for name, _ in workbook.read_selection()]
        unknown = [name for name in names if name not in known]
        for name in unknown:
            click.secho(f"✗ No room named '{name}'", fg='red')
            similar = find_similar_strings(name, known, limit=3)
            if similar:
                click.echo(f"  Did you mean: {', '.join(similar)}?")

        chosen = [name for name in names if name in known]
        if chosen:
            workbook.set_checked(chosen, True)
            click.secho(f"✓ Selected {', '.join(chosen)}", fg='green')
    except WorkbookError as e:
        click.secho(f"✗ {e}", fg='red')


@click.command(name='add-rooms')
def add_rooms_command():
    """Create every room queued in the add-rooms table.

    Each room gets a copy of its template sheet and a linked row just above
    the dashboard's sum row. If any queued room is invalid nothing is created
    and every problem is listed.
    """
    registry = get_registry()
    if registry is None:
        return
    _run('add rooms', registry.add_rooms)


@click.command(name='rename-rooms')
def rename_rooms_command():
    """Rename the rooms ticked in the selection table.

    You are asked for a new name for each room. Cancelling any prompt
    (Ctrl-C) abandons the whole rename and nothing is changed.
    """
    registry = get_registry()
    if registry is None:
        return
    _run('rename rooms', registry.rename_rooms)


@click.command(name='delete-rooms')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
def delete_rooms_command(yes: bool):
    """Delete the rooms ticked in the selection table.

    Removes both the room sheets and their dashboard rows.
    """
    registry = get_registry(assume_yes=yes)
    if registry is None:
        return
    _run('delete rooms', registry.delete_rooms)
