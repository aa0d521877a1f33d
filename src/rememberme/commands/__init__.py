"""Subcommand modules for rememberme.

register_commands() imports command groups lazily so ``rememberme --help``
stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the command groups on the root CLI group."""
    from rememberme.commands.dedupe import dedupe
    from rememberme.commands.garden import garden

    cli.add_command(garden)
    cli.add_command(dedupe)
