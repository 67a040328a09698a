"""Column-name resolution for heterogeneous statement exports.

Issuers spell the same column many ways ("Date", "Trans Date",
"transaction_date", ...). :func:`resolve_field` picks the first known
spelling present in a row; the alias tuples below are ordered by preference.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

ACCOUNT_ALIASES: tuple[str, ...] = (
    "Account No",
    "Account Number",
    "AccountNumber",
    "Account",
    "acc_no",
    "account_no",
)

DATE_ALIASES: tuple[str, ...] = (
    "date",
    "transaction_date",
    "trans_date",
    "Date",
    "Trans Date",
    "Transaction Date",
    "Posting Date",
    "Post Date",
)

DESCRIPTION_ALIASES: tuple[str, ...] = (
    "description",
    "desc",
    "narrative",
    "details",
    "Description",
    "Details",
    "Narrative",
    "Merchant",
    "Transaction Details",
)

AMOUNT_ALIASES: tuple[str, ...] = (
    "amount",
    "value",
    "Amount",
    "Transaction Amount",
    "Amount (USD)",
    "Value",
)

TYPE_ALIASES: tuple[str, ...] = (
    "type",
    "transaction_type",
    "dc",
    "Type",
    "Transaction Type",
    "Dr/Cr",
    "CR/DR",
)

# Matched literally; these override any sign decided from type or description.
DEPOSITS_COLUMN = "Deposits"
WITHDRAWALS_COLUMN = "Withdrawals"

# Any of these in a header marks the text as a statement table.
KNOWN_COLUMNS: frozenset[str] = frozenset(
    (
        *ACCOUNT_ALIASES,
        *DATE_ALIASES,
        *DESCRIPTION_ALIASES,
        *AMOUNT_ALIASES,
        *TYPE_ALIASES,
        DEPOSITS_COLUMN,
        WITHDRAWALS_COLUMN,
    )
)


def resolve_field(record: Mapping[str, Any], candidate_names: Sequence[str]) -> str:
    """Return the first of ``candidate_names`` that is a key of ``record``.

    Falls back to the record's first key (insertion order) when none match,
    and to ``""`` for an empty record.
    """

    for name in candidate_names:
        if name in record:
            return name
    return next(iter(record), "")


def find_field(record: Mapping[str, Any], candidate_names: Sequence[str]) -> str | None:
    """Like :func:`resolve_field` but without the first-column fallback."""

    for name in candidate_names:
        if name in record:
            return name
    return None


__all__ = [
    "ACCOUNT_ALIASES",
    "DATE_ALIASES",
    "DESCRIPTION_ALIASES",
    "AMOUNT_ALIASES",
    "TYPE_ALIASES",
    "DEPOSITS_COLUMN",
    "WITHDRAWALS_COLUMN",
    "KNOWN_COLUMNS",
    "resolve_field",
    "find_field",
]
