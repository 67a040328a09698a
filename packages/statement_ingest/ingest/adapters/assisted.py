"""Optional language-model extraction pass over raw statement text.

Public API:
    - :func:`try_assisted_extraction`

The model's reply is untrusted input. Every failure (no credential, HTTP or
network error, timeout, unexpected envelope, malformed JSON) collapses to an
empty list, which the pipeline reads as "try the next strategy". No client is
created and no network access happens when ``OPENAI_API_KEY`` is unset.
"""

from __future__ import annotations

import json
import math
import re
import time
from collections.abc import Sequence
from datetime import datetime
from typing import Any

from openai import OpenAI

from ... import prompting
from ...accounts import find_account_numbers
from ...config import Settings
from ...logging_setup import get_logger
from ...models import (
    UNKNOWN_ACCOUNT,
    UNKNOWN_DESCRIPTION,
    AmountFilterPolicy,
    ExtractedItem,
    NormalizedTransaction,
)
from ...normalizers import normalize_amount, parse_date_direct, utcnow

# Low temperature biases the model toward deterministic, well-formed output.
_TEMPERATURE: float = 0.2

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

_logger = get_logger("statement_ingest.ingest.assisted")


# ---- Internal helpers --------------------------------------------------------


def _create_client(settings: Settings) -> OpenAI:
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.assist_timeout_sec,
        max_retries=0,
    )


def _extract_response_text(resp: Any) -> str:
    """Locate the text output of a Responses API result.

    Prefer ``resp.output_text``; fall back to ``resp.output[0].content[0].text``
    (a string, or an object exposing ``value``). Raises ``ValueError`` when no
    text can be found.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        try:
            first = resp.output[0] if getattr(resp, "output", None) else None
            content = getattr(first, "content", None)
            if content:
                txt_obj = getattr(content[0], "text", None)
                if isinstance(txt_obj, str):
                    text = txt_obj
                else:
                    maybe_val = getattr(txt_obj, "value", None)
                    if isinstance(maybe_val, str):
                        text = maybe_val
        except (AttributeError, IndexError, TypeError):
            text = None
    if not text or not isinstance(text, str):
        raise ValueError("Unexpected Responses API shape; unable to locate text output")
    return text


def _decode_items(text: str) -> list[Any]:
    """Pull the JSON array out of ``text``, tolerating surrounding prose."""

    match = _JSON_ARRAY_RE.search(text)
    payload = match.group(0) if match else text
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ValueError("Model output did not contain a valid JSON array") from e
    if not isinstance(decoded, list):
        raise ValueError(f"Model output was {type(decoded).__name__}, expected a JSON array")
    return decoded


def _coerce_date(raw: Any) -> datetime:
    parsed = parse_date_direct(raw) if isinstance(raw, str) else None
    return parsed or utcnow()


def _coerce_amount(raw: Any) -> float:
    # bool is an int subclass; a boolean amount carries no value.
    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError:
            return math.nan
    if isinstance(raw, str):
        return normalize_amount(raw)
    return 0.0


def _coerce_account(raw: Any, hints: Sequence[str]) -> str:
    value = raw if raw else (hints[0] if hints else UNKNOWN_ACCOUNT)
    return str(value).strip() or UNKNOWN_ACCOUNT


def _to_transactions(items: list[Any], hints: Sequence[str]) -> list[NormalizedTransaction]:
    policy = AmountFilterPolicy.DROP_NAN_ONLY
    out: list[NormalizedTransaction] = []
    skipped = 0
    for raw_item in items:
        if not isinstance(raw_item, dict):
            skipped += 1
            continue
        item = ExtractedItem.model_validate(raw_item)
        amount = _coerce_amount(item.amount)
        if not policy.keeps(amount):
            skipped += 1
            continue
        description = str(item.description).strip() if item.description else ""
        out.append(
            NormalizedTransaction(
                date=_coerce_date(item.date),
                description=description or UNKNOWN_DESCRIPTION,
                amount=amount,
                account_id=_coerce_account(item.accountNumber, hints),
            )
        )
    if skipped:
        _logger.info("assisted_extraction:items_skipped count=%d", skipped)
    return out


def _extract(text: str, file_name: str, settings: Settings) -> list[NormalizedTransaction]:
    hints = find_account_numbers(text)
    statement_type = prompting.classify_statement_type(file_name)
    excerpt = prompting.truncate_statement(text, settings.assist_max_chars)
    user_content = prompting.build_extraction_prompt(
        excerpt, statement_type=statement_type, account_hints=hints
    )

    _logger.info(
        "assisted_extraction:request statement_type=%s chars=%d model=%s",
        statement_type,
        len(excerpt),
        settings.openai_model,
    )
    client = _create_client(settings)
    t0 = time.perf_counter()
    resp = client.responses.create(
        model=settings.openai_model,
        instructions=prompting.build_system_instructions(),
        input=user_content,
        temperature=_TEMPERATURE,
    )
    items = _decode_items(_extract_response_text(resp))
    out = _to_transactions(items, hints)
    _logger.info(
        "assisted_extraction:done items=%d transactions=%d latency_ms=%.2f",
        len(items),
        len(out),
        (time.perf_counter() - t0) * 1000.0,
    )
    return out


# ---- Public API --------------------------------------------------------------


def try_assisted_extraction(
    text: str,
    file_name: str,
    *,
    settings: Settings | None = None,
) -> list[NormalizedTransaction]:
    """Ask the language model for the statement's transactions.

    Returns an empty list on any failure; never raises.
    """

    settings = settings or Settings.from_env()
    if not settings.openai_api_key:
        _logger.info("assisted_extraction:skipped reason=no_credential")
        return []
    try:
        return _extract(text, file_name, settings)
    except Exception as e:  # noqa: BLE001 - any failure means "use the next strategy"
        _logger.warning(
            "assisted_extraction:failed error=%s detail=%s", e.__class__.__name__, e
        )
        return []


__all__ = ["try_assisted_extraction"]
