"""Command: bulk-append events from a JSON file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from flightlog.commands._base import FlightlogCommand

if TYPE_CHECKING:
    from flightlog.commands._context import AppContext


@click.command(
    cls=FlightlogCommand,
    examples="""\
  flightlog ingest events.json
  flightlog --json ingest export/flight_log.json""",
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def ingest(app: AppContext, path: Path) -> None:
    """Append every valid record in a JSON file to the log.

    The file holds a list of objects with tail_number, status, timestamp
    and optional direction. Invalid records are reported and skipped.
    """
    from flightlog.services.ingest import IngestService

    app.emit(IngestService(app.ledger).ingest_file(path))
