"""Subcommand modules for flightlog.

Provides register_commands() which uses deferred imports to keep
``flightlog --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from flightlog.commands.costs import costs
    from flightlog.commands.ingest import ingest
    from flightlog.commands.policy import policy
    from flightlog.commands.record import record
    from flightlog.commands.sessions import sessions

    cli.add_command(record)
    cli.add_command(ingest)
    cli.add_command(sessions)
    cli.add_command(costs)
    cli.add_command(policy)
