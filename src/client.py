"""Telegram client factory for spamguard.

We explicitly manage the client's lifecycle (start/run_until_disconnected)
so it is obvious when the session is created and when it ends. This avoids
implicit context-manager behavior for a long-running relay.
"""

from __future__ import annotations

import logging

from telethon import TelegramClient

from core.config import TelegramConfig


def build_client(config: TelegramConfig) -> TelegramClient:
    """Create a Telethon client for the bot account.

    Updates are handled one at a time so message N+1 is only processed after
    message N reached a terminal state.
    """

    logging.getLogger(__name__).info("Initializing Telegram client")

    return TelegramClient(
        config.session_name,
        config.api_id,
        config.api_hash,
        sequential_updates=True,
    )
