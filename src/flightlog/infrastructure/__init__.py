"""Infrastructure layer — SQLite event log and snapshot fetching.

This layer depends on stdlib, third-party libs (SQLAlchemy) and config.
It must never import from domain, services, commands, or output.
The service layer bridges between raw records and domain models.
"""
