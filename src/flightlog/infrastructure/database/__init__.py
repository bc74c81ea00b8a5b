"""SQLite event log engine and schema via SQLAlchemy Core."""

from flightlog.infrastructure.database.engine import create_db_engine, init_database
from flightlog.infrastructure.database.schema import flight_log, metadata

__all__ = [
    "create_db_engine",
    "flight_log",
    "init_database",
    "metadata",
]
