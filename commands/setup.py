"""
Setup and help commands for the Room Registry CLI.

Contains custom Click group class for coloured help output and typo suggestions.
"""

from dataclasses import dataclass
from pathlib import Path

import click
from core.config import (
    BACKENDS,
    USER_CONFIG_FILE,
    load_config,
    registry_config_from,
    save_config,
    workbook_path
)
from core.workbook import create_workbook
from models.utils import similarity_score


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"Error: No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  • {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name, command)
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_usage(self, ctx, formatter):
        """Format the usage line with colour."""
        formatter.write_paragraph()
        formatter.write_text(
            click.style('Usage: ', fg='cyan', bold=True) +
            click.style(f'{ctx.command_path} [OPTIONS] COMMAND [ARGS]...', fg='white')
        )

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            max_len = max(max(len(cmd[0]) for cmd in commands), 16)

            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


COMMAND_SECTIONS = [
    CommandSection(
        name="SETUP",
        commands=[
            ("configure", "Choose the workbook backend and save settings"),
            ("init [-t <template>]", "Create a local workbook with templates"),
            ("setup", "Show the current configuration"),
        ]
    ),
    CommandSection(
        name="ROOMS",
        commands=[
            ("rooms", "List rooms on the dashboard"),
            ("stage <name> <template> [kind]", "Queue a room in the add-rooms table"),
            ("add-rooms", "Create every queued room"),
            ("select <name>...", "Tick rooms in the selection table"),
            ("select --clear", "Untick every room"),
            ("rename-rooms", "Rename the ticked rooms"),
            ("delete-rooms [-y]", "Delete the ticked rooms"),
        ]
    ),
]


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.echo()
    click.secho("Room Registry - Quick Reference", fg='cyan', bold=True)
    click.echo()

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * (34 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("For detailed help on any command:", fg='cyan')
    click.echo(f"  room-registry {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command()
@click.option('--backend', type=click.Choice(BACKENDS), prompt='Workbook backend', default='local',
              help='Where rooms are stored')
@click.option('--workbook', 'workbook_file', type=click.Path(dir_okay=False), default=None,
              help='Local workbook file (local backend)')
@click.option('--spreadsheet-id', default=None, help='Google spreadsheet ID (sheets backend)')
@click.option('--access-token', default=None, help='OAuth access token (sheets backend)')
def configure_command(backend, workbook_file, spreadsheet_id, access_token):
    """Choose the workbook backend and save settings.

    Settings are stored in ~/.room_registry/config.json. The 'registry'
    section of that file can override sheet and range names and define
    budgeting options.
    """
    config = load_config()
    config['backend'] = backend

    if backend == 'local':
        if workbook_file:
            config['workbook_path'] = str(Path(workbook_file).expanduser().resolve())
    else:
        config['spreadsheet_id'] = spreadsheet_id or click.prompt('Spreadsheet ID')
        config['access_token'] = access_token or click.prompt('Access token', hide_input=True)

    save_config(config)
    click.secho(f"✓ Configuration saved to {USER_CONFIG_FILE}", fg='green')


@click.command()
def setup_command():
    """Show the current configuration."""
    config = load_config()
    registry = registry_config_from(config.get('registry', {}))
    backend = config.get('backend', 'local')

    click.echo()
    click.secho("=== Room Registry Configuration ===", fg='cyan', bold=True)
    click.echo()
    click.echo(f"Config file:     {USER_CONFIG_FILE}")
    click.echo(f"Backend:         {click.style(backend, fg='green')}")
    if backend == 'local':
        click.echo(f"Workbook:        {workbook_path(config)}")
    else:
        click.echo(f"Spreadsheet:     {config.get('spreadsheet_id', click.style('not set', fg='red'))}")
    click.echo(f"Dashboard sheet: {registry.dashboard_sheet}")
    click.echo(f"Boundary rows:   {registry.material_row_range} / {registry.sum_row_range}")
    if registry.budgeting_suffixes:
        click.echo("Budgeting options:")
        for kind, suffix in registry.budgeting_suffixes:
            click.echo(f"  {kind} → template name + '{suffix}'")
    else:
        click.echo(f"Template suffix: '{registry.template_suffix}'")
    click.echo()


@click.command(name='init')
@click.option('--template', '-t', 'templates', multiple=True, help='Template name (repeatable)')
@click.option('--force', is_flag=True, help='Overwrite an existing workbook')
def init_command(templates, force):
    """Create a local workbook with an empty dashboard and template sheets.

    \b
    Examples:
      room-registry init -t Kitchen -t Bathroom
    """
    config = load_config()
    path = workbook_path(config)

    if path.exists() and not force:
        click.secho(f"✗ Workbook already exists: {path}", fg='red')
        click.echo("Use --force to overwrite it.")
        return

    registry = registry_config_from(config.get('registry', {}))
    data = create_workbook(path, registry, list(templates))
    template_count = len(data['documents']) - 1
    click.secho(f"✓ Created workbook with {template_count} template sheets", fg='green')
    click.echo(f"  {path}")
