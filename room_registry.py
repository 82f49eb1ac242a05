#!/usr/bin/env python3
"""
Room Registry CLI
Add, rename and delete rooms: template sheets plus linked dashboard rows.
"""

import click

from commands.setup import ColouredGroup, help_command, setup_command, configure_command, init_command
from commands.rooms import (
    rooms_command,
    stage_command,
    select_command,
    add_rooms_command,
    rename_rooms_command,
    delete_rooms_command
)


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 999
    }
)
@click.version_option(version='0.1.0', prog_name='Room Registry')
def cli():
    """Room Registry CLI - Keep room sheets and the dashboard in step.

Stage rooms with 'stage', then create them with 'add-rooms'.
Tick rooms with 'select', then 'rename-rooms' or 'delete-rooms'.

Use 'help' for a quick reference of all commands."""
    pass


# Register setup and help commands
cli.add_command(help_command)
cli.add_command(setup_command, name='setup')
cli.add_command(configure_command, name='configure')
cli.add_command(init_command)

# Register room commands
cli.add_command(rooms_command)
cli.add_command(stage_command)
cli.add_command(select_command)
cli.add_command(add_rooms_command)
cli.add_command(rename_rooms_command)
cli.add_command(delete_rooms_command)


if __name__ == '__main__':
    cli()
