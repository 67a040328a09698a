"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the statement-ingest models used by ``statement_ingest``.
"""

from .statements import Base, StCategory, StTransaction

__all__ = [
    "Base",
    "StCategory",
    "StTransaction",
]
