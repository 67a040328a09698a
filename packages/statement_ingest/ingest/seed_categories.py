from __future__ import annotations

# Seeder for the flat category list transactions are later assigned to.
#
# Usage (example):
#   statement-ingest seed-categories --database-url sqlite:///statements.db
#   statement-ingest seed-categories --file my_categories.json
#
# Categories are upserted by id: existing rows get the new name/color, missing
# rows are inserted, and rows not mentioned are left alone. Transactions keep
# their category_id.
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from db.client import session_scope
from db.models.statements import StCategory

from ..logging_setup import get_logger

DEFAULT_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("groceries", "Groceries", "#10B981"),
    ("dining", "Dining", "#F59E0B"),
    ("transportation", "Transportation", "#3B82F6"),
    ("utilities", "Utilities", "#8B5CF6"),
    ("healthcare", "Healthcare", "#EC4899"),
    ("shopping", "Shopping", "#F97316"),
    ("entertainment", "Entertainment", "#EF4444"),
    ("housing", "Housing", "#6366F1"),
    ("education", "Education", "#06B6D4"),
    ("cash", "Cash", "#4F46E5"),
    ("income", "Income", "#059669"),
    ("other", "Other", "#6B7280"),
)

_logger = get_logger("statement_ingest.ingest.seed_categories")


def load_categories(path: Path) -> list[tuple[str, str, str]]:
    """Read ``[{"id", "name", "color"}, ...]`` from a JSON file."""

    with path.open("r", encoding="utf-8") as f:
        data: Any = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Seed JSON must be a list of category objects")
    out: list[tuple[str, str, str]] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError(f"Category entry must be an object, got {item!r}")
        cat_id = str(item.get("id") or item.get("name") or "").strip()
        if not cat_id:
            raise ValueError(f"Category without id or name: {item!r}")
        out.append((cat_id, str(item.get("name") or cat_id), str(item.get("color") or "gray")))
    return out


def upsert_categories(
    *, database_url: str | None, categories: Iterable[tuple[str, str, str]] = DEFAULT_CATEGORIES
) -> int:
    """Insert or update ``(id, name, color)`` rows; return how many were written."""

    count = 0
    with session_scope(database_url=database_url) as session:
        for cat_id, name, color in categories:
            row = session.get(StCategory, cat_id)
            if row is None:
                session.add(StCategory(id=cat_id, name=name, color=color))
            else:
                row.name = name
                row.color = color
            count += 1
    _logger.info("seed_categories:done count=%d", count)
    return count


__all__ = ["DEFAULT_CATEGORIES", "load_categories", "upsert_categories"]
