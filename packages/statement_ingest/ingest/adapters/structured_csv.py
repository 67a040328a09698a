"""Adapter mapping delimited statement exports to normalized transactions.

Rows are read with :func:`~statement_ingest.ingest.utils.read_records` and
each column of interest is located with
:func:`~statement_ingest.fields.resolve_field` against the alias lists in
:mod:`statement_ingest.fields`.

Sign inference
--------------
Later rules override earlier ones:

1. A type/indicator column (only when one actually exists) reading credit
   (``credit``, ``cr``, ``c``) marks a credit.
2. Otherwise description keywords (``payment``, ``refund``, ``credit``,
   ``deposit``) mark a credit; a debit type value does not prevent this.
3. A positive ``Deposits`` cell forces a credit of that value.
4. A positive ``Withdrawals`` cell forces a debit of that value. When both
   columns are positive, Withdrawals wins.

Rows whose final amount is zero or not a number are dropped
(:attr:`AmountFilterPolicy.DROP_ZERO_AND_NAN`).

Failure mode
------------
Text that is not tabular at all, or whose header names none of the known
columns, is handed to the line scanner
(:func:`~statement_ingest.ingest.adapters.line_scanner.parse_unstructured`)
and its result returned instead; this function never raises for bad input.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from ...accounts import extract_account_number_from_csv
from ...fields import (
    ACCOUNT_ALIASES,
    AMOUNT_ALIASES,
    DATE_ALIASES,
    DEPOSITS_COLUMN,
    DESCRIPTION_ALIASES,
    KNOWN_COLUMNS,
    TYPE_ALIASES,
    WITHDRAWALS_COLUMN,
    find_field,
    resolve_field,
)
from ...logging_setup import get_logger
from ...models import (
    UNKNOWN_DESCRIPTION,
    AmountFilterPolicy,
    NormalizedTransaction,
)
from ...normalizers import (
    YearPolicy,
    classify_type_value,
    current_year_policy,
    has_credit_keyword,
    normalize_amount,
    normalize_date,
    signed_amount,
)
from ..utils import StructuralParseError, read_records
from .line_scanner import parse_unstructured

_logger = get_logger("statement_ingest.ingest.structured_csv")


def _infer_credit(
    record: Mapping[str, str], description: str, amount: float
) -> tuple[bool, float]:
    """Return ``(is_credit, magnitude)`` per the precedence in the module docs."""

    # Only a credit reading of the type column is decisive; debit or blank
    # values still let description keywords mark a credit.
    type_field = find_field(record, TYPE_ALIASES)
    is_credit = type_field is not None and classify_type_value(record.get(type_field)) is True
    if not is_credit:
        is_credit = has_credit_keyword(description)

    deposits = normalize_amount(record.get(DEPOSITS_COLUMN)) if DEPOSITS_COLUMN in record else 0.0
    if deposits > 0:
        is_credit, amount = True, deposits
    withdrawals = (
        normalize_amount(record.get(WITHDRAWALS_COLUMN)) if WITHDRAWALS_COLUMN in record else 0.0
    )
    if withdrawals > 0:
        is_credit, amount = False, withdrawals

    return is_credit, amount


def to_transactions(
    records: list[dict[str, str]],
    *,
    statement_account: str,
    year_policy: YearPolicy = current_year_policy,
) -> Iterator[NormalizedTransaction]:
    """Map parsed rows to transactions, dropping zero/NaN amounts."""

    policy = AmountFilterPolicy.DROP_ZERO_AND_NAN
    for record in records:
        account_field = find_field(record, ACCOUNT_ALIASES)
        account = (record.get(account_field) if account_field else None) or statement_account

        date_raw = record.get(resolve_field(record, DATE_ALIASES))
        description = record.get(resolve_field(record, DESCRIPTION_ALIASES)) or UNKNOWN_DESCRIPTION
        amount_field = resolve_field(record, AMOUNT_ALIASES)
        if amount_field not in AMOUNT_ALIASES and (
            DEPOSITS_COLUMN in record or WITHDRAWALS_COLUMN in record
        ):
            # Split-column exports carry the value only in Deposits/Withdrawals.
            amount = 0.0
        else:
            amount = normalize_amount(record.get(amount_field))

        is_credit, amount = _infer_credit(record, description, amount)
        final = signed_amount(amount, is_credit=is_credit)
        if not policy.keeps(final):
            continue

        yield NormalizedTransaction(
            date=normalize_date(date_raw, year_policy=year_policy),
            description=description,
            amount=final,
            account_id=account,
        )


def parse_structured(
    text: str,
    account_fallback: str,
    *,
    year_policy: YearPolicy = current_year_policy,
) -> list[NormalizedTransaction]:
    """Parse delimited statement ``text`` into normalized transactions.

    ``account_fallback`` is used when neither an account column nor an
    embedded account number can be found.
    """

    statement_account = extract_account_number_from_csv(text) or account_fallback
    try:
        records = read_records(text, known_columns=KNOWN_COLUMNS)
    except StructuralParseError as exc:
        _logger.info("structured_csv:not_tabular fallback=line_scanner reason=%s", exc)
        return parse_unstructured(text, account_fallback, year_policy=year_policy)

    out = list(
        to_transactions(records, statement_account=statement_account, year_policy=year_policy)
    )
    _logger.info(
        "structured_csv:done rows=%d transactions=%d account=%s",
        len(records),
        len(out),
        statement_account,
    )
    return out


__all__ = ["parse_structured", "to_transactions"]
