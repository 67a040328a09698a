"""Runtime settings read from the environment.

Entry points load ``.env`` (via ``python-dotenv``) before calling
:meth:`Settings.from_env`; library code never reads a dotenv file itself.

Recognized variables
--------------------
- ``OPENAI_API_KEY``: credential for the assisted-extraction pass. When unset
  the pass is skipped without any network access.
- ``STATEMENT_INGEST_OPENAI_MODEL``: model name for the Responses API.
- ``STATEMENT_INGEST_ASSIST_TIMEOUT_SEC``: request timeout in seconds.
- ``STATEMENT_INGEST_ASSIST_MAX_CHARS``: statement prefix length sent upstream.
- ``DATABASE_URL``: SQLAlchemy URL for the transaction store.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_ASSIST_TIMEOUT_SEC = 20.0
DEFAULT_ASSIST_MAX_CHARS = 15000


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    s = value.strip()
    return s or None


def _positive_float(raw: str | None, default: float) -> float:
    try:
        value = float(raw) if raw else None
    except ValueError:
        value = None
    if value is None or not math.isfinite(value) or value <= 0:
        return default
    return value


def _positive_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw else None
    except ValueError:
        value = None
    if value is None or value <= 0:
        return default
    return value


@dataclass(frozen=True, slots=True)
class Settings:
    openai_api_key: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    assist_timeout_sec: float = DEFAULT_ASSIST_TIMEOUT_SEC
    assist_max_chars: int = DEFAULT_ASSIST_MAX_CHARS
    database_url: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Malformed or non-positive numeric values fall back to the defaults
        rather than failing the whole run.
        """

        env = os.environ if environ is None else environ
        return cls(
            openai_api_key=_clean(env.get("OPENAI_API_KEY")),
            openai_model=_clean(env.get("STATEMENT_INGEST_OPENAI_MODEL")) or DEFAULT_OPENAI_MODEL,
            assist_timeout_sec=_positive_float(
                env.get("STATEMENT_INGEST_ASSIST_TIMEOUT_SEC"), DEFAULT_ASSIST_TIMEOUT_SEC
            ),
            assist_max_chars=_positive_int(
                env.get("STATEMENT_INGEST_ASSIST_MAX_CHARS"), DEFAULT_ASSIST_MAX_CHARS
            ),
            database_url=_clean(env.get("DATABASE_URL")),
        )


__all__ = ["Settings"]
