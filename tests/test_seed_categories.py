import json
from pathlib import Path

import pytest
from sqlalchemy import select

from db.client import session_scope
from db.models.statements import StCategory
from statement_ingest.ingest.seed_categories import (
    DEFAULT_CATEGORIES,
    load_categories,
    upsert_categories,
)
from tests.helpers.db import bootstrap_sqlite_db


def _categories(url: str) -> dict[str, tuple[str, str]]:
    with session_scope(database_url=url) as session:
        return {c.id: (c.name, c.color) for c in session.scalars(select(StCategory))}


def test_defaults_then_update_in_place(tmp_path: Path):
    url = bootstrap_sqlite_db(tmp_path / "seed.sqlite3")

    assert upsert_categories(database_url=url) == len(DEFAULT_CATEGORIES)
    assert upsert_categories(database_url=url, categories=[("other", "Misc", "#000000")]) == 1

    cats = _categories(url)
    assert len(cats) == len(DEFAULT_CATEGORIES)
    assert cats["other"] == ("Misc", "#000000")
    assert cats["groceries"] == ("Groceries", "#10B981")


def test_load_categories_defaults_missing_fields(tmp_path: Path):
    path = tmp_path / "cats.json"
    path.write_text(json.dumps([{"id": "fuel", "name": "Fuel"}, {"name": "Rent", "color": "red"}]))

    assert load_categories(path) == [("fuel", "Fuel", "gray"), ("Rent", "Rent", "red")]


@pytest.mark.parametrize("payload", [{"id": "x"}, [{"color": "red"}], ["fuel"], [{"id": "ok"}, 3]])
def test_load_categories_rejects_bad_payloads(tmp_path: Path, payload):
    path = tmp_path / "cats.json"
    path.write_text(json.dumps(payload))

    with pytest.raises(ValueError):
        load_categories(path)
