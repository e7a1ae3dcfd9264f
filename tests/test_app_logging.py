from __future__ import annotations

import logging

import app


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord("spamguard", logging.INFO, __file__, 1, message, None, None)


def test_bot_token_is_masked_by_default(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:SECRET-token")
    monkeypatch.setenv("API_HASH", "deadbeefcafe")

    secrets = app._collect_redaction_values({})
    formatter = app._RedactingFormatter(secrets, fmt="%(message)s")
    output = formatter.format(_record("POST https://api.telegram.org/bot123456:SECRET-token hash=deadbeefcafe"))

    assert "SECRET-token" not in output
    assert "deadbeefcafe" not in output
    assert output == "POST https://api.telegram.org/bot*** hash=***"


def test_redaction_can_be_disabled(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:SECRET-token")
    assert app._collect_redaction_values({"redact": {"enabled": False}}) == []


def test_configured_patterns_replace_defaults(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123456:SECRET-token")
    monkeypatch.setenv("OLLAMA_KEY", "ollama-secret")
    values = app._collect_redaction_values({"redact": {"patterns": ["OLLAMA_KEY"]}})
    assert values == ["ollama-secret"]
