import pytest

from statement_ingest.config import (
    DEFAULT_ASSIST_MAX_CHARS,
    DEFAULT_ASSIST_TIMEOUT_SEC,
    DEFAULT_OPENAI_MODEL,
    Settings,
)


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.openai_api_key is None
    assert settings.openai_model == DEFAULT_OPENAI_MODEL
    assert settings.assist_timeout_sec == DEFAULT_ASSIST_TIMEOUT_SEC
    assert settings.assist_max_chars == DEFAULT_ASSIST_MAX_CHARS
    assert settings.database_url is None


def test_values_are_read_and_trimmed():
    settings = Settings.from_env(
        {
            "OPENAI_API_KEY": "  sk-abc ",
            "STATEMENT_INGEST_OPENAI_MODEL": "gpt-4.1-mini",
            "STATEMENT_INGEST_ASSIST_TIMEOUT_SEC": "7.5",
            "STATEMENT_INGEST_ASSIST_MAX_CHARS": "2000",
            "DATABASE_URL": "sqlite:///x.db",
        }
    )

    assert settings == Settings(
        openai_api_key="sk-abc",
        openai_model="gpt-4.1-mini",
        assist_timeout_sec=7.5,
        assist_max_chars=2000,
        database_url="sqlite:///x.db",
    )


@pytest.mark.parametrize("raw", ["", "abc", "0", "-3", "nan", "inf", "-inf"])
def test_bad_numbers_fall_back_to_defaults(raw: str):
    settings = Settings.from_env(
        {"STATEMENT_INGEST_ASSIST_TIMEOUT_SEC": raw, "STATEMENT_INGEST_ASSIST_MAX_CHARS": raw}
    )

    assert settings.assist_timeout_sec == DEFAULT_ASSIST_TIMEOUT_SEC
    assert settings.assist_max_chars == DEFAULT_ASSIST_MAX_CHARS


def test_blank_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "   ")

    assert Settings.from_env().openai_api_key is None
