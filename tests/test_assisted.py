# ruff: noqa: E501
import json
from datetime import UTC, date, datetime

import pytest

import statement_ingest.ingest.adapters.assisted as assisted_mod
from statement_ingest import UNKNOWN_ACCOUNT, UNKNOWN_DESCRIPTION
from statement_ingest.config import Settings
from statement_ingest.ingest.adapters.assisted import try_assisted_extraction
from statement_ingest.prompting import STATEMENT_BEGIN, STATEMENT_END
from tests.helpers.openai_stub import OpenAIRecorder, StubResponse, make_openai_stub

KEYED = Settings(openai_api_key="sk-test", openai_model="test-model", assist_timeout_sec=5.0)

STATEMENT_TEXT = "Account 123456789012\n23/03/25\nCOFFEE\n4.50\n"


def _install(monkeypatch: pytest.MonkeyPatch, **kwargs) -> OpenAIRecorder:
    recorder = OpenAIRecorder()
    monkeypatch.setattr(assisted_mod, "OpenAI", make_openai_stub(recorder, **kwargs))
    return recorder


def test_no_credential_means_no_client(monkeypatch: pytest.MonkeyPatch):
    recorder = _install(monkeypatch, reply="[]")

    assert try_assisted_extraction(STATEMENT_TEXT, "stmt.csv", settings=Settings()) == []
    assert recorder.constructed == []
    assert recorder.calls == []


def test_credential_from_environment(monkeypatch: pytest.MonkeyPatch):
    reply = json.dumps([{"date": "2025-03-23", "description": "COFFEE", "amount": -4.5}])
    recorder = _install(monkeypatch, reply=reply)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    rows = try_assisted_extraction(STATEMENT_TEXT, "stmt.csv")

    assert len(rows) == 1
    assert recorder.constructed[0]["api_key"] == "sk-env"
    assert recorder.constructed[0]["max_retries"] == 0


def test_request_shape(monkeypatch: pytest.MonkeyPatch):
    recorder = _install(monkeypatch, reply="[]")

    try_assisted_extraction(STATEMENT_TEXT, "Amex_March.csv", settings=KEYED)

    assert recorder.constructed == [{"api_key": "sk-test", "timeout": 5.0, "max_retries": 0}]
    (call,) = recorder.calls
    assert call["model"] == "test-model"
    assert call["temperature"] == pytest.approx(0.2)
    assert "Amex credit card" in call["input"]
    assert "123456789012" in call["input"]
    assert STATEMENT_BEGIN in call["input"] and STATEMENT_END in call["input"]
    assert "JSON" in call["instructions"]


def test_statement_text_is_truncated(monkeypatch: pytest.MonkeyPatch):
    recorder = _install(monkeypatch, reply="[]")
    settings = Settings(openai_api_key="sk-test", assist_max_chars=10)

    try_assisted_extraction("A" * 10 + "TAIL-MARKER", "s.txt", settings=settings)

    (call,) = recorder.calls
    assert "A" * 10 in call["input"]
    assert "TAIL-MARKER" not in call["input"]


def test_prose_wrapped_json_is_decoded(monkeypatch: pytest.MonkeyPatch):
    reply = (
        "Sure! Here are the transactions:\n"
        '[{"date": "2025-03-23", "description": "COFFEE", "amount": -4.5, "accountNumber": "999"},'
        ' {"date": "2025-03-24", "description": "SALARY", "amount": "1,200.00"}]\n'
        "Let me know if you need anything else."
    )
    _install(monkeypatch, reply=reply)

    rows = try_assisted_extraction(STATEMENT_TEXT, "stmt.txt", settings=KEYED)

    assert [(r.date.date(), r.description, r.amount, r.account_id) for r in rows] == [
        (date(2025, 3, 23), "COFFEE", -4.5, "999"),
        (date(2025, 3, 24), "SALARY", 1200.0, "123456789012"),
    ]
    assert all(r.category_id is None and r.statement_id is None for r in rows)


def test_account_falls_back_to_unknown_without_hints(monkeypatch: pytest.MonkeyPatch):
    _install(monkeypatch, reply='[{"date": "2025-03-23", "description": "X", "amount": 1}]')

    (row,) = try_assisted_extraction("no numbers here", "stmt.txt", settings=KEYED)

    assert row.account_id == UNKNOWN_ACCOUNT


def test_zero_kept_nan_and_junk_dropped(monkeypatch: pytest.MonkeyPatch):
    reply = (
        "["
        '{"date": "2025-01-01", "description": "ZERO", "amount": 0},'
        '{"date": "2025-01-02", "description": "NAN", "amount": NaN},'
        '"not an object",'
        '{"description": "", "amount": -3}'
        "]"
    )
    _install(monkeypatch, reply=reply)

    before = datetime.now(UTC)
    rows = try_assisted_extraction(STATEMENT_TEXT, "stmt.txt", settings=KEYED)
    after = datetime.now(UTC)

    assert [(r.description, r.amount) for r in rows] == [("ZERO", 0.0), (UNKNOWN_DESCRIPTION, -3.0)]
    assert before <= rows[1].date <= after


def test_output_fallback_shape(monkeypatch: pytest.MonkeyPatch):
    class _Text:
        value = '[{"date": "2025-02-02", "description": "NESTED", "amount": 7}]'

    class _Content:
        text = _Text()

    class _Item:
        content = [_Content()]

    _install(monkeypatch, response=StubResponse(output_text=None, output=[_Item()]))

    (row,) = try_assisted_extraction(STATEMENT_TEXT, "stmt.txt", settings=KEYED)

    assert row.description == "NESTED"
    assert row.amount == 7.0


@pytest.mark.parametrize(
    "reply",
    [
        "I could not find any transactions.",
        "[{not json}]",
        '{"date": "2025-01-01", "amount": 1}',
        "",
    ],
)
def test_malformed_replies_yield_nothing(monkeypatch: pytest.MonkeyPatch, reply: str):
    _install(monkeypatch, reply=reply)

    assert try_assisted_extraction(STATEMENT_TEXT, "stmt.txt", settings=KEYED) == []


def test_client_errors_are_swallowed(monkeypatch: pytest.MonkeyPatch):
    recorder = _install(monkeypatch, error=TimeoutError("deadline exceeded"))

    assert try_assisted_extraction(STATEMENT_TEXT, "stmt.txt", settings=KEYED) == []
    assert len(recorder.calls) == 1
