"""Value normalization shared by the statement parsers.

Dates
-----
:func:`normalize_date` tries, in order:

1. a direct parse (ISO-8601, month-first US forms, named-month forms);
2. the day-first ``DD/MM/YY[YY]`` or ``DD-MM-YY[YY]`` pattern, where a
   two-digit year is prefixed with ``20`` and a missing year is supplied by
   a *year policy* (:func:`current_year_policy` by default);
3. the current date/time.

Amounts
-------
:func:`normalize_amount` keeps only digits, ``.`` and ``-`` and parses the
remainder, yielding ``0.0`` when nothing parseable is left. Sign inference
is the caller's job; the helpers here only classify hints (type column
values and description keywords).
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, datetime

type YearPolicy = Callable[[int, int], int]
"""``(day, month) -> year`` used when a date token carries no year."""


def current_year_policy(day: int, month: int) -> int:
    """Assume the current calendar year for year-less dates."""

    return utcnow().year


def utcnow() -> datetime:
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Month-first forms accepted by the direct parse. Day-first strings that fail
# here (e.g. "15/03/24") fall through to the day-first pattern below.
_DIRECT_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%Y/%m/%d",
    "%d %b %Y",
    "%d %B %Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%B %d %Y",
)

DAY_MONTH_RE = re.compile(r"(?<!\d)(\d{1,2})[/-](\d{1,2})(?:[/-](\d{4}|\d{2}))?(?!\d)")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_date_direct(value: str | None) -> datetime | None:
    """Parse a self-describing date string, or return ``None``."""

    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    try:
        return _as_utc(datetime.fromisoformat(s))
    except ValueError:
        pass
    for fmt in _DIRECT_FORMATS:
        try:
            return datetime.strptime(s, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return None


def date_from_parts(
    day: str,
    month: str,
    year: str | None,
    *,
    year_policy: YearPolicy = current_year_policy,
) -> datetime | None:
    """Build a UTC midnight from day/month/year tokens of a day-first date."""

    try:
        d = int(day)
        m = int(month)
        if year is None:
            y = year_policy(d, m)
        elif len(year) == 2:
            y = int("20" + year)
        else:
            y = int(year)
        return datetime(y, m, d, tzinfo=UTC)
    except ValueError:
        return None


def parse_day_month_date(
    value: str | None, *, year_policy: YearPolicy = current_year_policy
) -> datetime | None:
    """Find a ``DD/MM/YY[YY]`` or ``DD-MM-YY[YY]`` token in ``value``."""

    if not value:
        return None
    match = DAY_MONTH_RE.search(value)
    if match is None:
        return None
    day, month, year = match.groups()
    return date_from_parts(day, month, year, year_policy=year_policy)


def normalize_date(
    value: str | None, *, year_policy: YearPolicy = current_year_policy
) -> datetime:
    """Return a best-effort UTC datetime for ``value``; never fails."""

    parsed = parse_date_direct(value)
    if parsed is None:
        parsed = parse_day_month_date(value, year_policy=year_policy)
    if parsed is None:
        parsed = utcnow()
    return parsed


# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


def normalize_amount(value: object) -> float:
    """Strip everything but digits, ``.`` and ``-`` and parse as float.

    Returns ``0.0`` when the cleaned text is not a number (e.g. ``""``,
    ``"1.2.3"`` or a lone ``"-"``).
    """

    if value is None:
        return 0.0
    cleaned = _NON_NUMERIC_RE.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def signed_amount(amount: float, *, is_credit: bool) -> float:
    return abs(amount) if is_credit else -abs(amount)


# ---------------------------------------------------------------------------
# Credit/debit hints
# ---------------------------------------------------------------------------

CREDIT_KEYWORDS: tuple[str, ...] = ("payment", "refund", "credit", "deposit")

# The line scanner also honours a standalone "CR" marker.
_LINE_CREDIT_RE = re.compile(r"\bcr\b|credit|payment|refund|deposit", re.IGNORECASE)


def has_credit_keyword(description: str | None) -> bool:
    if not description:
        return False
    lowered = description.lower()
    return any(k in lowered for k in CREDIT_KEYWORDS)


def has_line_credit_marker(description: str | None) -> bool:
    if not description:
        return False
    return _LINE_CREDIT_RE.search(description) is not None


def classify_type_value(value: str | None) -> bool | None:
    """Map a type/indicator cell to ``True`` (credit), ``False`` (debit) or ``None``.

    Accepts full words ("Credit", "DEBIT CARD") and the short markers
    ``cr``/``c`` and ``dr``/``d``.
    """

    if value is None:
        return None
    v = value.strip().lower()
    if not v:
        return None
    if "credit" in v or v in {"cr", "c"}:
        return True
    if "debit" in v or v in {"dr", "d"}:
        return False
    return None


__all__ = [
    "YearPolicy",
    "current_year_policy",
    "utcnow",
    "DAY_MONTH_RE",
    "parse_date_direct",
    "date_from_parts",
    "parse_day_month_date",
    "normalize_date",
    "normalize_amount",
    "signed_amount",
    "CREDIT_KEYWORDS",
    "has_credit_keyword",
    "has_line_credit_marker",
    "classify_type_value",
]
