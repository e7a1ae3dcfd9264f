"""Startup configuration for spamguard.

Credentials and endpoints come from the environment (optionally a .env file)
and are validated once by ``load_config``. Logging settings live in an
optional config.json so they can be tweaked without touching Python.
"""

from __future__ import annotations

import json
import os
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from core.config import CompletionConfig, RelayConfig, TelegramConfig
from core.errors import ConfigMissing

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")

COMPLETION_VARIABLES = ("COMPLETION_URL", "MODEL")
TELEGRAM_VARIABLES = ("TELEGRAM_BOT_TOKEN", "API_ID", "API_HASH")

# Env var names whose values are masked in log output unless config.json
# lists its own.
DEFAULT_REDACT_PATTERNS = ["TELEGRAM_BOT_TOKEN", "API_HASH"]


def load_environment() -> bool:
    """Load .env into the process environment. Returns False when none was found."""

    path = find_dotenv(usecwd=True)
    return bool(path) and load_dotenv(path)


def load_json_config(path: str = CONFIG_PATH) -> dict:
    """Load config.json if present; an absent file means defaults."""

    if not os.path.exists(path):
        return {}

    with open(path, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _parse_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigMissing(f"{name} must be a number, got {raw!r}") from exc


def _require(env: Mapping[str, str], names: tuple[str, ...]) -> None:
    missing = [name for name in names if not (env.get(name) or "").strip()]
    if missing:
        raise ConfigMissing(f"Missing required environment variables: {', '.join(missing)}")


def load_completion_config(env: Optional[Mapping[str, str]] = None) -> CompletionConfig:
    """Build the completion service settings from the environment."""

    if env is None:
        env = os.environ
    _require(env, COMPLETION_VARIABLES)

    timeout = _parse_number(env, "COMPLETION_TIMEOUT", 120.0, float)
    if timeout <= 0:
        raise ConfigMissing("COMPLETION_TIMEOUT must be positive")
    # At most one retry.
    max_attempts = min(2, max(1, _parse_number(env, "COMPLETION_MAX_ATTEMPTS", 2, int)))
    retry_backoff = max(0.0, _parse_number(env, "COMPLETION_RETRY_BACKOFF", 1.0, float))

    return CompletionConfig(
        url=env["COMPLETION_URL"].strip(),
        model=env["MODEL"].strip(),
        timeout=timeout,
        max_attempts=max_attempts,
        retry_backoff=retry_backoff,
    )


def load_config(env: Optional[Mapping[str, str]] = None) -> RelayConfig:
    """Build and validate the full relay configuration.

    Raises ConfigMissing naming every required variable that is absent so
    the process can fail fast at startup.
    """

    if env is None:
        env = os.environ
    _require(env, COMPLETION_VARIABLES + TELEGRAM_VARIABLES)

    try:
        api_id = int(env["API_ID"])
    except ValueError as exc:
        raise ConfigMissing(f"API_ID must be an integer, got {env['API_ID']!r}") from exc

    telegram = TelegramConfig(
        bot_token=env["TELEGRAM_BOT_TOKEN"].strip(),
        api_id=api_id,
        api_hash=env["API_HASH"].strip(),
        session_name=(env.get("SESSION_NAME") or "spamguard").strip(),
    )
    return RelayConfig(completion=load_completion_config(env), telegram=telegram)
