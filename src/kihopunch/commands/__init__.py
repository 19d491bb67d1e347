"""Subcommand modules for kihopunch.

Provides register_commands() which uses deferred imports to keep
``kihopunch --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``get`` group and the start/stop commands on the root group."""
    from kihopunch.commands.get import get
    from kihopunch.commands.punch import start, stop

    cli.add_command(get)
    cli.add_command(start)
    cli.add_command(stop)
