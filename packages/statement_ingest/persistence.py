# ruff: noqa: I001
"""Persistence collaborators for normalized transactions.

The parsing core never keeps transactions itself; it hands every batch to a
:class:`TransactionStore`. Two implementations are provided:

- :class:`SqlTransactionStore`: SQLAlchemy ORM over ``st_transactions``
  (models in ``db.models.statements``, sessions from ``db.client``). Each
  call runs in its own ``session_scope`` so a bulk insert is all-or-nothing.
- :class:`InMemoryTransactionStore`: instance-scoped list used for dry runs
  and tests.

Stores assign transaction ids (uuid4 hex).
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import delete, select, update

from db.client import session_scope
from db.models.statements import StTransaction
from .models import NormalizedTransaction, StoredTransaction


class TransactionStore(Protocol):
    """Create/find/delete operations the pipeline and its callers rely on."""

    def create_many(self, transactions: Sequence[NormalizedTransaction]) -> list[str]:
        """Insert all ``transactions`` atomically and return their new ids."""
        ...

    def find_all(self) -> list[StoredTransaction]:
        """Return every stored transaction, newest date first."""
        ...

    def find_by_statement(self, statement_id: str) -> list[StoredTransaction]: ...

    def update_category(self, transaction_id: str, category_id: str | None) -> bool: ...

    def delete(self, transaction_id: str) -> int: ...

    def delete_by_statement(self, statement_id: str) -> int: ...

    def delete_by_account(self, account_id: str) -> int: ...

    def clear(self) -> int: ...


def _new_id() -> str:
    return uuid.uuid4().hex


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored as UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _require_statement_id(tx: NormalizedTransaction) -> str:
    if not tx.statement_id:
        raise ValueError("transactions must be stamped with a statement_id before persisting")
    return tx.statement_id


def _newest_first(rows: Iterable[StoredTransaction]) -> list[StoredTransaction]:
    return sorted(rows, key=lambda r: r.transaction.date, reverse=True)


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------


def _to_stored(row: StTransaction) -> StoredTransaction:
    return StoredTransaction(
        id=row.id,
        transaction=NormalizedTransaction(
            date=_utc(row.date),
            description=row.description,
            amount=row.amount,
            account_id=row.account_id,
            category_id=row.category_id,
            statement_id=row.statement_id,
        ),
    )


class SqlTransactionStore:
    """Transaction store backed by the shared workspace database."""

    def __init__(self, *, database_url: str | None = None) -> None:
        self._database_url = database_url

    def create_many(self, transactions: Sequence[NormalizedTransaction]) -> list[str]:
        ids: list[str] = []
        rows: list[StTransaction] = []
        for tx in transactions:
            tx_id = _new_id()
            ids.append(tx_id)
            rows.append(
                StTransaction(
                    id=tx_id,
                    date=_utc(tx.date),
                    description=tx.description,
                    amount=tx.amount,
                    category_id=tx.category_id,
                    account_id=tx.account_id,
                    statement_id=_require_statement_id(tx),
                )
            )
        if not rows:
            return ids
        with session_scope(database_url=self._database_url) as session:
            session.add_all(rows)
        return ids

    def find_all(self) -> list[StoredTransaction]:
        stmt = select(StTransaction).order_by(StTransaction.date.desc())
        with session_scope(database_url=self._database_url) as session:
            return [_to_stored(r) for r in session.scalars(stmt)]

    def find_by_statement(self, statement_id: str) -> list[StoredTransaction]:
        stmt = (
            select(StTransaction)
            .where(StTransaction.statement_id == statement_id)
            .order_by(StTransaction.date.desc())
        )
        with session_scope(database_url=self._database_url) as session:
            return [_to_stored(r) for r in session.scalars(stmt)]

    def update_category(self, transaction_id: str, category_id: str | None) -> bool:
        stmt = (
            update(StTransaction)
            .where(StTransaction.id == transaction_id)
            .values(category_id=category_id)
        )
        with session_scope(database_url=self._database_url) as session:
            return session.execute(stmt).rowcount > 0

    def _delete_where(self, *criteria) -> int:
        stmt = delete(StTransaction)
        if criteria:
            stmt = stmt.where(*criteria)
        with session_scope(database_url=self._database_url) as session:
            return session.execute(stmt).rowcount

    def delete(self, transaction_id: str) -> int:
        return self._delete_where(StTransaction.id == transaction_id)

    def delete_by_statement(self, statement_id: str) -> int:
        return self._delete_where(StTransaction.statement_id == statement_id)

    def delete_by_account(self, account_id: str) -> int:
        return self._delete_where(StTransaction.account_id == account_id)

    def clear(self) -> int:
        return self._delete_where()


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class InMemoryTransactionStore:
    """Non-durable store; each instance owns its own rows."""

    def __init__(self) -> None:
        self._rows: list[StoredTransaction] = []

    def create_many(self, transactions: Sequence[NormalizedTransaction]) -> list[str]:
        staged: list[StoredTransaction] = []
        for tx in transactions:
            _require_statement_id(tx)
            staged.append(StoredTransaction(id=_new_id(), transaction=tx))
        # Validate the whole batch before touching state.
        self._rows.extend(staged)
        return [r.id for r in staged]

    def find_all(self) -> list[StoredTransaction]:
        return _newest_first(self._rows)

    def find_by_statement(self, statement_id: str) -> list[StoredTransaction]:
        return _newest_first(r for r in self._rows if r.transaction.statement_id == statement_id)

    def update_category(self, transaction_id: str, category_id: str | None) -> bool:
        for i, row in enumerate(self._rows):
            if row.id == transaction_id:
                updated = replace(row.transaction, category_id=category_id)
                self._rows[i] = StoredTransaction(id=row.id, transaction=updated)
                return True
        return False

    def _remove(self, predicate) -> int:
        before = len(self._rows)
        self._rows = [r for r in self._rows if not predicate(r)]
        return before - len(self._rows)

    def delete(self, transaction_id: str) -> int:
        return self._remove(lambda r: r.id == transaction_id)

    def delete_by_statement(self, statement_id: str) -> int:
        return self._remove(lambda r: r.transaction.statement_id == statement_id)

    def delete_by_account(self, account_id: str) -> int:
        return self._remove(lambda r: r.transaction.account_id == account_id)

    def clear(self) -> int:
        return self._remove(lambda r: True)


__all__ = [
    "TransactionStore",
    "SqlTransactionStore",
    "InMemoryTransactionStore",
]
