"""Prompt construction for the assisted-extraction pass.

The statement type is derived from filename substrings only to give the
model some context; it has no effect on how the reply is parsed.
"""

from __future__ import annotations

from collections.abc import Sequence

# Checked in order; the first substring found in the lower-cased filename wins.
_STATEMENT_TYPES: tuple[tuple[str, str], ...] = (
    ("savings", "savings account"),
    ("amex", "Amex credit card"),
    ("sampath", "Sampath credit card"),
    ("credit", "credit card"),
)

STATEMENT_BEGIN = "BEGIN_STATEMENT"
STATEMENT_END = "END_STATEMENT"


def classify_statement_type(file_name: str) -> str:
    lowered = file_name.lower()
    for needle, label in _STATEMENT_TYPES:
        if needle in lowered:
            return label
    return "unknown"


def truncate_statement(text: str, max_chars: int) -> str:
    return text[:max_chars]


def build_system_instructions() -> str:
    return (
        "You are a financial data extraction expert. You read bank and credit card "
        "statements and return their transactions as a JSON array. Output JSON only."
    )


def build_extraction_prompt(
    statement_text: str,
    *,
    statement_type: str,
    account_hints: Sequence[str] = (),
) -> str:
    """Build the user prompt asking for ``{date, description, amount, accountNumber}`` items."""

    hint_line = ""
    if account_hints:
        hint_line = (
            "Account numbers seen in this statement: " + ", ".join(account_hints) + ".\n"
        )
    return (
        f"Extract all transactions from the following {statement_type} statement.\n"
        "\n"
        "For each transaction, extract:\n"
        "1. Date (in YYYY-MM-DD format)\n"
        "2. Description\n"
        "3. Amount (positive for income/credits, negative for expenses/debits)\n"
        "4. Account number (if present in the transaction details)\n"
        "\n"
        "Return the data as a JSON array of objects with these fields: "
        "date, description, amount, accountNumber.\n"
        "Only return the JSON array, nothing else.\n"
        f"{hint_line}"
        "\n"
        f"{STATEMENT_BEGIN}\n{statement_text}\n{STATEMENT_END}"
    )


__all__ = [
    "STATEMENT_BEGIN",
    "STATEMENT_END",
    "classify_statement_type",
    "truncate_statement",
    "build_system_instructions",
    "build_extraction_prompt",
]
