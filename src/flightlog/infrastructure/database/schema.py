"""SQLAlchemy Core table definitions for the flightlog database.

One append-only table holds the raw status log. Timestamps are stored
as ISO-8601 text exactly as received; validation happens when a
snapshot is reconstructed, not on the way in.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

flight_log = Table(
    "flight_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tail_number", Text, nullable=False),
    Column("status", Text, nullable=False),  # departing | arriving
    Column("direction", Text),
    Column("timestamp", Text),  # ISO 8601, nullable so bad rows can be reported
    Column("recorded_at", Text, nullable=False),
)

Index("ix_flight_log_timestamp", flight_log.c.timestamp)
Index("ix_flight_log_tail_timestamp", flight_log.c.tail_number, flight_log.c.timestamp)
