"""Custom Click command class with --examples support.

When ``--examples`` is passed, the command prints usage examples and
exits. This keeps ``--help`` concise while making examples available.
"""

from __future__ import annotations

from typing import Any

import click

from flightlog.services.view import SORT_ORDERS


class FlightlogCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


def view_options(func: Any) -> Any:
    """Attach the shared filter/sort options for session listings."""
    options = [
        click.option("--tail", default=None, help="Exact tail number."),
        click.option("--search", default=None, help="Substring of the tail number."),
        click.option(
            "--state",
            type=click.Choice(["completed", "in_progress", "arrived_only"]),
            default=None,
            help="Filter by session state.",
        ),
        click.option("--month", default=None, help="Calendar month (UTC), YYYY-MM."),
        click.option(
            "--sort",
            type=click.Choice(SORT_ORDERS),
            default="newest",
            help="Order by first known timestamp, or by tail number.",
        ),
        click.option("--limit", default=None, type=click.IntRange(min=0), help="Max rows."),
        click.option(
            "--timeout",
            default=None,
            type=click.FloatRange(min=0, min_open=True),
            help="Seconds to wait for the event source.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
