"""Public interface for the ``statement_ingest`` package.

Symbol re-exports only; see :mod:`statement_ingest.pipeline` for the
orchestration and :mod:`statement_ingest.ingest.adapters` for the parsers.
"""

from .fields import resolve_field
from .ingest.adapters.assisted import try_assisted_extraction
from .ingest.adapters.line_scanner import parse_unstructured
from .ingest.adapters.structured_csv import parse_structured
from .models import (
    UNKNOWN_ACCOUNT,
    UNKNOWN_DESCRIPTION,
    AmountFilterPolicy,
    NormalizedTransaction,
    StatementParseResult,
    StoredTransaction,
)
from .persistence import InMemoryTransactionStore, SqlTransactionStore, TransactionStore
from .pipeline import DEFAULT_STRATEGIES, ParseStrategy, process_statement, process_statements

__all__ = [
    # Pipeline
    "process_statement",
    "process_statements",
    "ParseStrategy",
    "DEFAULT_STRATEGIES",
    # Parsers
    "resolve_field",
    "parse_structured",
    "parse_unstructured",
    "try_assisted_extraction",
    # Persistence
    "TransactionStore",
    "SqlTransactionStore",
    "InMemoryTransactionStore",
    # Models
    "NormalizedTransaction",
    "StoredTransaction",
    "StatementParseResult",
    "AmountFilterPolicy",
    "UNKNOWN_ACCOUNT",
    "UNKNOWN_DESCRIPTION",
]
