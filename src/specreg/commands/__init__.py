"""Subcommand modules for specreg.

Provides register_commands() which uses deferred imports to keep
``specreg --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``show`` group and the standalone ``check`` command."""
    from specreg.commands.check import check
    from specreg.commands.show import show

    cli.add_command(show)
    cli.add_command(check)
