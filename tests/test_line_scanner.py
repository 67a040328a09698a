import textwrap
from datetime import UTC, date, datetime

from statement_ingest import UNKNOWN_DESCRIPTION, parse_unstructured


def _dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


SAMPATH_TEXT = _dedent(
    """
    SAMPATH BANK CREDIT CARD STATEMENT
    Card account 123456789012
    23/03/25
    NIHAL STORES & DISTRIBUTO, KANDY
    10,405.75
    28-03-2025
    VENUS PHARMACY, KANDY
    1,750.00
    01/04/25
    PAYMENT RECEIVED - CEFT
    250,000.00
    """
)


def test_triplets_are_extracted_with_signs_and_account():
    rows = parse_unstructured(SAMPATH_TEXT, "fallback")

    assert [(r.date.date(), r.description, r.amount) for r in rows] == [
        (date(2025, 3, 23), "NIHAL STORES & DISTRIBUTO, KANDY", -10405.75),
        (date(2025, 3, 28), "VENUS PHARMACY, KANDY", -1750.0),
        (date(2025, 4, 1), "PAYMENT RECEIVED - CEFT", 250000.0),
    ]
    assert {r.account_id for r in rows} == {"123456789012"}


def test_account_header_lines_switch_accounts():
    text = _dedent(
        """
        111111111111
        01/02/24
        SHOP A
        5.00
        222222222222
        02/02/24
        SHOP B
        6.00
        """
    )

    rows = parse_unstructured(text, "fallback")

    assert [r.account_id for r in rows] == ["111111111111", "222222222222"]


def test_fallback_account_when_no_header():
    text = "01/02/24\nSHOP\n5.00\n"
    (row,) = parse_unstructured(text, "my-file")
    assert row.account_id == "my-file"


def test_year_less_dates_use_current_year():
    text = "15/03\nSHOP\n5.00\n"
    (row,) = parse_unstructured(text, "acct")
    assert row.date.year == datetime.now(UTC).year
    assert (row.date.month, row.date.day) == (3, 15)


def test_incomplete_triplets_are_skipped():
    text = _dedent(
        """
        01/02/24
        NO AMOUNT HERE
        n/a
        02/02/24
        SHOP
        """
    )

    assert parse_unstructured(text, "acct") == []


def test_blank_description_uses_sentinel():
    text = "01/02/24\n\n5.00\n"
    (row,) = parse_unstructured(text, "acct")
    assert row.description == UNKNOWN_DESCRIPTION


def test_prose_yields_nothing():
    assert parse_unstructured("nothing to see here\nat all", "acct") == []
