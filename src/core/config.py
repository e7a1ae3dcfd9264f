"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompletionConfig:
    """Completion service settings consumed by the HTTP adapter."""

    url: str
    model: str
    timeout: float = 120.0
    max_attempts: int = 2
    retry_backoff: float = 1.0


@dataclass(frozen=True)
class TelegramConfig:
    """Bot credentials for the Telethon client."""

    bot_token: str
    api_id: int
    api_hash: str
    session_name: str = "spamguard"


@dataclass(frozen=True)
class RelayConfig:
    """Everything the relay needs, validated once at process start."""

    completion: CompletionConfig
    telegram: TelegramConfig
