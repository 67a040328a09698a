"""Statement ingestion pipeline.

Public API:
    - :func:`process_statement`
    - :func:`process_statements`
    - :data:`DEFAULT_STRATEGIES`

Fallback order is an explicit, ordered tuple of :class:`ParseStrategy`
values. The pipeline runs them in turn and keeps the first non-empty result:

1. ``assisted``: language-model extraction (empty when no credential is
   configured or anything goes wrong);
2. ``structured``: delimited parsing, which itself defers to the line scanner
   for non-tabular text.

Every transaction of one call is stamped with a shared ``statement_id`` and
handed to the :class:`~statement_ingest.persistence.TransactionStore` in a
single ``create_many`` call.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace

from .config import Settings
from .ingest.adapters.assisted import try_assisted_extraction
from .ingest.adapters.structured_csv import parse_structured
from .ingest.utils import decode_statement_bytes, sanitize_file_name
from .logging_setup import get_logger
from .models import UNKNOWN_ACCOUNT, NormalizedTransaction, StatementParseResult
from .persistence import TransactionStore

_logger = get_logger("statement_ingest.pipeline")


@dataclass(frozen=True, slots=True)
class StatementInput:
    """What a strategy gets to work with for one file."""

    text: str
    file_name: str
    account_fallback: str
    settings: Settings


@dataclass(frozen=True, slots=True)
class ParseStrategy:
    name: str
    run: Callable[[StatementInput], Sequence[NormalizedTransaction]]


def _run_assisted(inp: StatementInput) -> Sequence[NormalizedTransaction]:
    return try_assisted_extraction(inp.text, inp.file_name, settings=inp.settings)


def _run_structured(inp: StatementInput) -> Sequence[NormalizedTransaction]:
    return parse_structured(inp.text, inp.account_fallback)


ASSISTED = ParseStrategy("assisted", _run_assisted)
STRUCTURED = ParseStrategy("structured", _run_structured)

DEFAULT_STRATEGIES: tuple[ParseStrategy, ...] = (ASSISTED, STRUCTURED)


def new_statement_id() -> str:
    return f"statement-{uuid.uuid4().hex}"


def run_strategies(
    inp: StatementInput, strategies: Sequence[ParseStrategy]
) -> tuple[str | None, list[NormalizedTransaction]]:
    """Return ``(strategy_name, transactions)`` for the first non-empty strategy."""

    for strategy in strategies:
        found = list(strategy.run(inp))
        _logger.info(
            "pipeline:strategy name=%s file=%s transactions=%d",
            strategy.name,
            inp.file_name,
            len(found),
        )
        if found:
            return strategy.name, found
    return None, []


def stamp_batch(
    transactions: Iterable[NormalizedTransaction],
    *,
    statement_id: str,
    account_fallback: str,
) -> list[NormalizedTransaction]:
    """Attach the batch id and replace the unknown-account sentinel."""

    out: list[NormalizedTransaction] = []
    for tx in transactions:
        account = account_fallback if tx.account_id == UNKNOWN_ACCOUNT else tx.account_id
        out.append(replace(tx, account_id=account, statement_id=statement_id))
    return out


def process_statement(
    file_bytes: bytes,
    file_name: str,
    *,
    store: TransactionStore,
    strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
    settings: Settings | None = None,
) -> StatementParseResult:
    """Parse one uploaded statement and persist its transactions.

    Never raises: empty input and unexpected failures are reported through
    :class:`StatementParseResult`.
    """

    try:
        text = decode_statement_bytes(file_bytes or b"")
        if not text.strip():
            _logger.warning("pipeline:empty_file file=%s", file_name)
            return StatementParseResult(success=False, error="Empty file content")

        account_fallback = sanitize_file_name(file_name)
        inp = StatementInput(
            text=text,
            file_name=file_name,
            account_fallback=account_fallback,
            settings=settings or Settings.from_env(),
        )
        strategy_name, parsed = run_strategies(inp, strategies)

        statement_id = new_statement_id()
        stamped = stamp_batch(parsed, statement_id=statement_id, account_fallback=account_fallback)
        store.create_many(stamped)
    except Exception:
        _logger.exception("pipeline:failed file=%s", file_name)
        return StatementParseResult(success=False, error="Failed to process statement file")

    _logger.info(
        "pipeline:done file=%s statement_id=%s strategy=%s transactions=%d",
        file_name,
        statement_id,
        strategy_name,
        len(stamped),
    )
    return StatementParseResult(
        success=True,
        transactions_count=len(stamped),
        statement_id=statement_id,
        strategy=strategy_name,
    )


def process_statements(
    files: Iterable[tuple[bytes, str]],
    *,
    store: TransactionStore,
    strategies: Sequence[ParseStrategy] = DEFAULT_STRATEGIES,
    settings: Settings | None = None,
) -> list[StatementParseResult]:
    """Process ``(file_bytes, file_name)`` pairs one after another.

    Each file is independent: one failure neither stops nor rolls back the
    others.
    """

    settings = settings or Settings.from_env()
    return [
        process_statement(
            file_bytes, file_name, store=store, strategies=strategies, settings=settings
        )
        for file_bytes, file_name in files
    ]


__all__ = [
    "ParseStrategy",
    "StatementInput",
    "ASSISTED",
    "STRUCTURED",
    "DEFAULT_STRATEGIES",
    "new_statement_id",
    "run_strategies",
    "stamp_batch",
    "process_statement",
    "process_statements",
]
