"""Line-scanner fallback for statements that are not delimited tables.

Some issuers (typically credit-card PDFs pasted or converted to text) lay a
transaction out over three consecutive lines::

    23/03/25
    NIHAL STORES & DISTRIBUTO, KANDY
    10,405.75

The scanner walks the lines looking for a day-first date token, takes the
next line as the description and the one after as the amount source. Lines
holding a 12-digit run are account headers: they switch the current account
and are never treated as transactions. Anything else is skipped; the scanner
has no failure mode beyond returning fewer (or zero) transactions.
"""

from __future__ import annotations

import re

from ...accounts import ACCOUNT_NUMBER_RE, extract_account_number_from_text
from ...logging_setup import get_logger
from ...models import UNKNOWN_DESCRIPTION, NormalizedTransaction
from ...normalizers import (
    DAY_MONTH_RE,
    YearPolicy,
    current_year_policy,
    date_from_parts,
    has_line_credit_marker,
    signed_amount,
)

_AMOUNT_RE = re.compile(r"[\d,]+\.\d{2}")

_logger = get_logger("statement_ingest.ingest.line_scanner")


def parse_unstructured(
    text: str,
    account_fallback: str,
    *,
    year_policy: YearPolicy = current_year_policy,
) -> list[NormalizedTransaction]:
    """Extract ``date / description / amount`` line triplets from ``text``."""

    lines = text.splitlines()
    account = extract_account_number_from_text(text) or account_fallback
    out: list[NormalizedTransaction] = []

    i = 0
    while i < len(lines):
        line = lines[i]
        header = ACCOUNT_NUMBER_RE.search(line)
        if header is not None:
            account = header.group(0)
            i += 1
            continue

        date_match = DAY_MONTH_RE.search(line)
        if date_match is None or i + 2 >= len(lines):
            i += 1
            continue

        description = lines[i + 1].strip()
        amount_match = _AMOUNT_RE.search(lines[i + 2])
        date = date_from_parts(*date_match.groups(), year_policy=year_policy)
        if amount_match is None or date is None:
            i += 1
            continue

        magnitude = float(amount_match.group(0).replace(",", ""))
        out.append(
            NormalizedTransaction(
                date=date,
                description=description or UNKNOWN_DESCRIPTION,
                amount=signed_amount(magnitude, is_credit=has_line_credit_marker(description)),
                account_id=account,
            )
        )
        # The description and amount lines are consumed with the date line.
        i += 3

    _logger.info(
        "line_scanner:done lines=%d transactions=%d account=%s", len(lines), len(out), account
    )
    return out


__all__ = ["parse_unstructured"]
