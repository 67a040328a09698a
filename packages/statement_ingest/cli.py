# ruff: noqa: I001
"""CLI for the ``statement_ingest`` package.

Command handlers (``cmd_*``) hold the logic and return an exit status; the
Typer commands below are thin wrappers. Environment variables (notably
``OPENAI_API_KEY`` and ``DATABASE_URL``) are loaded from a local ``.env``
with ``python-dotenv`` before any command runs.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv

from .config import Settings
from .logging_setup import configure_logging
from .persistence import InMemoryTransactionStore, SqlTransactionStore, TransactionStore

app = typer.Typer(add_completion=False, help="Normalize bank/credit-card statements.")


def _store_for(*, dry_run: bool, database_url: str | None) -> TransactionStore:
    if dry_run:
        return InMemoryTransactionStore()
    return SqlTransactionStore(database_url=database_url or Settings.from_env().database_url)


def _read_files(paths: list[Path]) -> list[tuple[bytes, str]]:
    files: list[tuple[bytes, str]] = []
    for p in paths:
        try:
            files.append((p.read_bytes(), p.name))
        except OSError as e:
            print(f"Error: cannot read '{p}': {e}", file=sys.stderr)
            # An unreadable file is reported as an empty upload.
            files.append((b"", p.name))
    return files


def cmd_ingest(paths: list[Path], *, dry_run: bool = False, database_url: str | None = None) -> int:
    """Process each file in order and print one JSON result line per file.

    Returns ``0`` when every file succeeded, ``1`` otherwise.
    """

    from .pipeline import process_statements

    store = _store_for(dry_run=dry_run, database_url=database_url)
    results = process_statements(_read_files(paths), store=store)
    for path, result in zip(paths, results, strict=True):
        out = {"file": path.name, **result.to_dict()}
        if result.statement_id:
            out["statementId"] = result.statement_id
        print(json.dumps(out))

    if dry_run:
        for row in store.find_all():
            print(json.dumps(row.to_dict()))
    return 0 if all(r.success for r in results) else 1


def cmd_list(*, statement_id: str | None = None, database_url: str | None = None) -> int:
    try:
        store = _store_for(dry_run=False, database_url=database_url)
        rows = store.find_by_statement(statement_id) if statement_id else store.find_all()
    except Exception as e:
        print(f"Error: failed to list transactions: {e}", file=sys.stderr)
        return 1
    for row in rows:
        print(json.dumps(row.to_dict()))
    return 0


def cmd_delete(
    *, statement_id: str | None = None, account_id: str | None = None, database_url: str | None = None
) -> int:
    try:
        store = _store_for(dry_run=False, database_url=database_url)
        if statement_id is not None:
            removed = store.delete_by_statement(statement_id)
        elif account_id is not None:
            removed = store.delete_by_account(account_id)
        else:
            removed = store.clear()
    except Exception as e:
        print(f"Error: delete failed: {e}", file=sys.stderr)
        return 1
    print(json.dumps({"deleted": removed}))
    return 0


def cmd_set_category(
    transaction_id: str, category_id: str | None, *, database_url: str | None = None
) -> int:
    try:
        store = _store_for(dry_run=False, database_url=database_url)
        updated = store.update_category(transaction_id, category_id)
    except Exception as e:
        print(f"Error: category update failed: {e}", file=sys.stderr)
        return 1
    if not updated:
        print(f"Error: no transaction with id '{transaction_id}'", file=sys.stderr)
        return 1
    print(json.dumps({"id": transaction_id, "categoryId": category_id}))
    return 0


def cmd_init_db(*, database_url: str | None = None) -> int:
    from db.client import create_schema

    try:
        create_schema(database_url=database_url or Settings.from_env().database_url)
    except Exception as e:
        print(f"Error: schema creation failed: {e}", file=sys.stderr)
        return 1
    return 0


def cmd_seed_categories(*, file: Path | None = None, database_url: str | None = None) -> int:
    from .ingest.seed_categories import DEFAULT_CATEGORIES, load_categories, upsert_categories

    try:
        categories = load_categories(file) if file is not None else DEFAULT_CATEGORIES
        count = upsert_categories(
            database_url=database_url or Settings.from_env().database_url, categories=categories
        )
    except Exception as e:
        print(f"Error: seeding categories failed: {e}", file=sys.stderr)
        return 1
    print(json.dumps({"seeded": count}))
    return 0


# ---- Typer commands ----------------------------------------------------------

DATABASE_URL_OPTION = typer.Option(None, help="Override DATABASE_URL (falls back to env var).")


@app.command("ingest")
def ingest_cmd(
    paths: Annotated[list[Path], typer.Argument(help="Statement files (CSV or plaintext).")],
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Parse into an in-memory store and print the transactions."
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(cmd_ingest(paths, dry_run=dry_run, database_url=database_url))


@app.command("list")
def list_cmd(
    statement_id: str | None = typer.Option(None, help="Only rows from this upload batch."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(cmd_list(statement_id=statement_id, database_url=database_url))


@app.command("delete-statement")
def delete_statement_cmd(
    statement_id: str,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(cmd_delete(statement_id=statement_id, database_url=database_url))


@app.command("delete-account")
def delete_account_cmd(
    account_id: str,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(cmd_delete(account_id=account_id, database_url=database_url))


@app.command("clear")
def clear_cmd(database_url: str | None = DATABASE_URL_OPTION) -> None:
    raise typer.Exit(cmd_delete(database_url=database_url))


@app.command("set-category")
def set_category_cmd(
    transaction_id: str,
    category_id: Annotated[
        str | None, typer.Argument(help="Category id; omit to clear the category.")
    ] = None,
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(
        cmd_set_category(transaction_id, category_id, database_url=database_url)
    )


@app.command("init-db")
def init_db_cmd(database_url: str | None = DATABASE_URL_OPTION) -> None:
    raise typer.Exit(cmd_init_db(database_url=database_url))


@app.command("seed-categories")
def seed_categories_cmd(
    file: Path | None = typer.Option(None, help="JSON list of {id, name, color} objects."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    raise typer.Exit(cmd_seed_categories(file=file, database_url=database_url))


@app.callback()
def _root() -> None:
    """Load ``.env`` from the working directory and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
