"""Account-number detection in raw statement text.

Two independent heuristics, chosen by the caller:

- :func:`extract_account_number_from_text` for loosely structured plaintext:
  the first 12-digit run anywhere in the text.
- :func:`extract_account_number_from_csv` for CSV-shaped text: a known
  account column in the first few rows, else an 8+-digit first cell.

Both are best effort and return ``None`` when nothing is found.
"""

from __future__ import annotations

import csv
import re

from .fields import ACCOUNT_ALIASES
from .ingest.utils import read_records
from .logging_setup import get_logger

ACCOUNT_NUMBER_RE = re.compile(r"\b\d{12}\b")
_LEADING_ACCOUNT_RE = re.compile(r"^\d{8,}$")

# Only the head of the file is inspected; account columns repeat per row.
_CSV_SCAN_ROWS = 5

_logger = get_logger("statement_ingest.accounts")


def extract_account_number_from_text(text: str) -> str | None:
    match = ACCOUNT_NUMBER_RE.search(text)
    return match.group(0) if match else None


def find_account_numbers(text: str) -> list[str]:
    """Return every distinct 12-digit run in ``text``, in order of appearance."""

    return list(dict.fromkeys(ACCOUNT_NUMBER_RE.findall(text)))


def extract_account_number_from_csv(text: str) -> str | None:
    """Look for an account number in the first rows of CSV-shaped ``text``.

    Malformed input is not an error here: it is logged and reported as "no
    account found".
    """

    try:
        records = read_records(text, limit=_CSV_SCAN_ROWS)
    except csv.Error as exc:
        _logger.warning("accounts:csv_scan_failed error=%s", exc)
        return None

    for record in records:
        for name in ACCOUNT_ALIASES:
            value = record.get(name)
            if value:
                return value

    if records:
        first_value = next(iter(records[0].values()), "")
        if _LEADING_ACCOUNT_RE.match(first_value):
            return first_value
    return None


__all__ = [
    "ACCOUNT_NUMBER_RE",
    "extract_account_number_from_text",
    "extract_account_number_from_csv",
    "find_account_numbers",
]
