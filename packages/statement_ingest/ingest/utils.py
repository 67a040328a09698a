"""Ingest utilities shared by the statement adapters and the pipeline.

- :func:`read_records`: tolerant delimited-text reader producing
  ``dict[str, str]`` rows keyed by the header row.
- :func:`decode_statement_bytes`: uploaded bytes to text.
- :func:`sanitize_file_name`: filename to an account-fallback token.
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Collection
from pathlib import PurePath

from ..logging_setup import get_logger
from ..models import UNKNOWN_ACCOUNT

_logger = get_logger("statement_ingest.ingest.utils")


class StructuralParseError(csv.Error):
    """The content is not delimited tabular data at all."""


def _is_blank(row: list[str]) -> bool:
    return all(not cell.strip() for cell in row)


def read_records(
    text: str,
    *,
    limit: int | None = None,
    known_columns: Collection[str] | None = None,
) -> list[dict[str, str]]:
    """Parse ``text`` as CSV with a header row, tolerating messy exports.

    Behavior
    --------
    - The first non-blank row is the header; cells and header names are
      trimmed, and unnamed header columns are ignored.
    - Rows may be shorter (missing cells become ``""``) or longer (overflow
      cells are dropped) than the header.
    - Blank rows are skipped. A row the ``csv`` module rejects is skipped and
      parsing continues with the next one.
    - ``limit`` caps the number of returned records.
    - ``known_columns``, when given, must share at least one name with the
      header.

    Raises
    ------
    StructuralParseError
        When the header has fewer than two named columns, or when fewer than
        half of the data rows have the header's column count, or when
        ``known_columns`` is given and no header name is among them.
    """

    reader = csv.reader(io.StringIO(text), skipinitialspace=True)
    header: list[str] | None = None
    rows: list[list[str]] = []
    while limit is None or len(rows) < limit:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            _logger.debug("read_records:row_skipped line=%d error=%s", reader.line_num, exc)
            continue
        if _is_blank(row):
            continue
        if header is None:
            header = [cell.strip() for cell in row]
            continue
        rows.append(row)

    if header is None:
        return []
    named = [name for name in header if name]
    if len(named) < 2:
        raise StructuralParseError(
            f"expected a delimited header with at least two columns, got {len(named)}"
        )
    if known_columns is not None and not any(name in known_columns for name in named):
        raise StructuralParseError(f"no recognized column in header {named!r}")
    consistent = sum(1 for row in rows if len(row) == len(header))
    if rows and consistent * 2 < len(rows):
        raise StructuralParseError(
            f"only {consistent} of {len(rows)} rows match the {len(header)}-column header"
        )

    records: list[dict[str, str]] = []
    for row in rows:
        record: dict[str, str] = {}
        for i, name in enumerate(header):
            if not name:
                continue
            record[name] = row[i].strip() if i < len(row) else ""
        records.append(record)
    return records


def decode_statement_bytes(file_bytes: bytes) -> str:
    """Decode uploaded statement bytes as UTF-8 (BOM stripped, errors replaced)."""

    return file_bytes.decode("utf-8-sig", errors="replace")


_TOKEN_INVALID_RE = re.compile(r"[^a-z0-9-]")


def sanitize_file_name(file_name: str) -> str:
    """Turn a filename into an account-fallback token.

    Lower-cases, drops the extension and replaces every character outside
    ``[a-z0-9-]`` with ``-``: ``"My Chase-Statement_2024.csv"`` becomes
    ``"my-chase-statement-2024"``. Empty names map to ``"unknown-account"``.
    """

    stem = PurePath(file_name.strip()).name.lower()
    if "." in stem:
        stem = stem.rsplit(".", 1)[0]
    token = _TOKEN_INVALID_RE.sub("-", stem)
    return token or UNKNOWN_ACCOUNT


__all__ = [
    "StructuralParseError",
    "read_records",
    "decode_statement_bytes",
    "sanitize_file_name",
]
