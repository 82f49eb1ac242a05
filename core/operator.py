"""Operator interaction through the terminal.

The room registry asks the operator for names and confirmations through
this small interface so it can be driven by click in the CLI and by mocks
in tests.
"""

import click


class ClickOperator:
    """Prompts, confirmations and notices on the terminal via click."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def prompt_text(self, message: str) -> str | None:
        """Ask for a line of text. Returns None if the operator cancels (Ctrl-C/Ctrl-D)."""
        try:
            return click.prompt(message, default='', show_default=False)
        except click.Abort:
            click.echo()
            return None

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        try:
            return click.confirm(message, default=False)
        except click.Abort:
            click.echo()
            return False

    def notify(self, message: str):
        click.secho(message, fg='yellow')

    def success(self, message: str):
        click.secho(f"✓ {message}", fg='green')

    def alert(self, message: str):
        click.secho(f"✗ {message}", fg='red')
