"""Database engine setup for SQLite with WAL mode.

The event log lives at {root}/.flightlog/flightlog.db by default.
SQLAlchemy Core (not ORM) is used because flightlog is a short-lived
CLI process that only appends and scans one table.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from flightlog.config.discovery import DATA_DIRNAME
from flightlog.infrastructure.database.schema import metadata


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(root: Path, db_name: str = "flightlog.db") -> Engine:
    """Initialize the event log database under ``{root}/.flightlog/``.

    Idempotent — safe to call on an existing database.
    """
    data_dir = root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / db_name)
    metadata.create_all(engine)
    return engine
