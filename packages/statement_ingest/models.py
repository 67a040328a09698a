"""Data models and type aliases for ``statement_ingest``.

Parsed statement rows are kept as opaque string mappings: column names vary
wildly between issuers, and the field resolver exists precisely to tolerate
unknown shapes. Only the parser output (:class:`NormalizedTransaction`) has a
fixed structure.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

UNKNOWN_ACCOUNT = "unknown-account"
UNKNOWN_DESCRIPTION = "Unknown transaction"

# ---------------------------------------------------------------------------
# Raw rows
# ---------------------------------------------------------------------------

type StatementRecord = Mapping[str, str]
"""One delimited row keyed by header name. Values are trimmed strings."""


# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------


def to_iso_instant(value: datetime) -> str:
    """Serialize ``value`` as a UTC ISO-8601 instant (``...T00:00:00.000Z``)."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class NormalizedTransaction:
    """A single normalized transaction candidate.

    Attributes
    ----------
    date:
        Timezone-aware point in time (UTC).
    description:
        Free text; ``"Unknown transaction"`` when nothing usable was found.
    amount:
        Signed amount. Positive is a credit (income), negative a debit.
    account_id:
        Best-effort issuer/account identifier.
    category_id:
        Always ``None`` when produced by a parser; categorization happens
        downstream.
    statement_id:
        Batch identifier shared by every transaction of one upload. Parsers
        leave it unset; the pipeline stamps it.
    """

    date: datetime
    description: str
    amount: float
    account_id: str
    category_id: str | None = None
    statement_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": to_iso_instant(self.date),
            "description": self.description,
            "amount": self.amount,
            "categoryId": self.category_id,
            "accountId": self.account_id,
            "statementId": self.statement_id,
        }


@dataclass(frozen=True, slots=True)
class StoredTransaction:
    """A transaction as read back from a :class:`TransactionStore`."""

    id: str
    transaction: NormalizedTransaction

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, **self.transaction.to_dict()}


@dataclass(frozen=True, slots=True)
class StatementParseResult:
    """Outcome of processing one statement file.

    ``statement_id`` and ``strategy`` are informational extras; the public
    summary produced by :meth:`to_dict` carries only ``success``,
    ``transactionsCount`` and ``error``.
    """

    success: bool
    transactions_count: int | None = None
    error: str | None = None
    statement_id: str | None = None
    strategy: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": self.success}
        if self.transactions_count is not None:
            out["transactionsCount"] = self.transactions_count
        if self.error is not None:
            out["error"] = self.error
        return out


# ---------------------------------------------------------------------------
# Amount filtering policies
# ---------------------------------------------------------------------------


class AmountFilterPolicy(enum.Enum):
    """Which parsed amounts are discarded before emission.

    The structured parser treats zero as "no information" and drops it; the
    assisted-extraction pass keeps legitimate zero-amount rows and only drops
    values that are not numbers. Each path names its policy
    explicitly.
    """

    DROP_ZERO_AND_NAN = "drop-zero-and-nan"
    DROP_NAN_ONLY = "drop-nan-only"

    def keeps(self, amount: float) -> bool:
        if not math.isfinite(amount):
            return False
        if self is AmountFilterPolicy.DROP_ZERO_AND_NAN:
            return amount != 0
        return True


# ---------------------------------------------------------------------------
# Language-model payload items
# ---------------------------------------------------------------------------


class ExtractedItem(BaseModel):
    """One element of the JSON array returned by the assisted-extraction pass.

    The upstream model is untrusted: every field is optional and untyped so
    that validation never rejects an item outright. Coercion into
    :class:`NormalizedTransaction` happens in the adapter.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    date: Any = None
    description: Any = None
    amount: Any = None
    accountNumber: Any = None


__all__ = [
    "UNKNOWN_ACCOUNT",
    "UNKNOWN_DESCRIPTION",
    "StatementRecord",
    "NormalizedTransaction",
    "StoredTransaction",
    "StatementParseResult",
    "AmountFilterPolicy",
    "ExtractedItem",
    "to_iso_instant",
]
