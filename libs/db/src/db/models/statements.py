from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Reference: st_categories
# ---------------------------


class StCategory(Base):
    __tablename__ = "st_categories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    color: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )


# ---------------------------
# Core: st_transactions
# ---------------------------


class StTransaction(Base):
    __tablename__ = "st_transactions"

    # Opaque string ids (uuid4 hex) assigned by the store on insert.
    id: Mapped[str] = mapped_column(String, primary_key=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    # Always NULL at ingest; set later by categorization.
    category_id: Mapped[str | None] = mapped_column(
        String,
        ForeignKey("st_categories.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
    )
    account_id: Mapped[str] = mapped_column(String, nullable=False)
    # Shared by every row of one upload; batch deletes key on it.
    statement_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
    )

    __table_args__ = (
        Index("ix_st_transactions_date", "date"),
        Index("ix_st_transactions_category_id", "category_id"),
        Index("ix_st_transactions_account_id", "account_id"),
        Index("ix_st_transactions_statement_id", "statement_id"),
    )


__all__ = [
    "Base",
    "StCategory",
    "StTransaction",
]
