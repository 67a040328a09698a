"""Pytest configuration for test isolation.

The ingest pipeline reads its credential, model and database settings from
the environment. A developer shell (or a local ``.env`` loaded earlier) could
otherwise leak an ``OPENAI_API_KEY`` into tests and send statements to the
real API, so every test starts from a scrubbed environment. Cached SQLAlchemy
engines are disposed afterwards so per-test SQLite files can be removed.
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

_SCRUBBED_ENV = (
    "OPENAI_API_KEY",
    "STATEMENT_INGEST_OPENAI_MODEL",
    "STATEMENT_INGEST_ASSIST_TIMEOUT_SEC",
    "STATEMENT_INGEST_ASSIST_MAX_CHARS",
    "DATABASE_URL",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    yield
    from db.client import dispose_engines

    dispose_engines()
