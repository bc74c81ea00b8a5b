"""Ledger — the single dependency injected into every service.

Owns the database engine and the event source. The engine is created
lazily so ``--help`` and ``policy`` never touch the database. A custom
:class:`EventSource` can be supplied to read from somewhere other than
the local SQLite log; appends always go to the local store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from flightlog.infrastructure.database.engine import init_database
from flightlog.infrastructure.store import EventSource, SourceUnavailableError, SqlEventStore

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from flightlog.config.settings import FlightlogSettings

logger = logging.getLogger(__name__)


class Ledger:
    """Access point for the event log and its settings."""

    def __init__(self, settings: FlightlogSettings, *, source: EventSource | None = None) -> None:
        self.settings = settings
        self._source = source
        self._engine: Engine | None = None
        self._store: SqlEventStore | None = None

    @property
    def engine(self) -> Engine:
        """The SQLite engine, opened and initialized on first access.

        Raises:
            SourceUnavailableError: if the data directory or database file
                cannot be created or is not a usable SQLite database.
        """
        if self._engine is None:
            try:
                self._engine = init_database(self.settings.root, self.settings.store.db_name)
            except (SQLAlchemyError, OSError) as exc:
                logger.debug("Cannot open event log under %s: %s", self.settings.root, exc)
                msg = f"Event log unavailable under {self.settings.root}: {exc}"
                raise SourceUnavailableError(msg) from exc
            logger.debug("Opened event log under %s", self.settings.root)
        return self._engine

    @property
    def store(self) -> SqlEventStore:
        """The local append-only store."""
        if self._store is None:
            self._store = SqlEventStore(self.engine)
        return self._store

    @property
    def source(self) -> EventSource:
        """Where snapshots are read from (defaults to the local store)."""
        return self._source if self._source is not None else self.store

    @property
    def fetch_timeout(self) -> float:
        return self.settings.store.fetch_timeout

    def close(self) -> None:
        """Dispose of the engine, if one was opened."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._store = None
