"""DB helpers for tests: bootstrap a temporary SQLite DB and seed categories."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from db.client import create_schema, session_scope
from db.models.statements import StCategory


def bootstrap_sqlite_db(db_file: Path) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    A file-backed database lets every SQLAlchemy connection see the same
    state (in-memory SQLite databases are per-connection).
    """

    db_file.parent.mkdir(parents=True, exist_ok=True)
    url = f"sqlite+pysqlite:///{db_file}"
    create_schema(database_url=url)
    return url


def seed_categories(
    *, database_url: str, categories: Iterable[tuple[str, str, str]]
) -> None:
    """Insert ``(id, name, color)`` category rows."""

    with session_scope(database_url=database_url) as session:
        for cat_id, name, color in categories:
            session.add(StCategory(id=cat_id, name=name, color=color))
