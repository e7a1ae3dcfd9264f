"""Telegram chat adapter.

Implements the core ChatPort on top of a Telethon client logged in as a bot.
"""

from __future__ import annotations

import logging
from typing import Optional

from telethon.errors import RPCError

from core.errors import PlatformActionError

LOGGER = logging.getLogger(__name__)


class TelegramChatGateway:
    """Send and delete messages through Telethon, mapping failures to PlatformActionError."""

    def __init__(self, client) -> None:
        self._client = client

    async def send_message(
        self, conversation_id: int, text: str, reply_to: Optional[int] = None
    ) -> None:
        try:
            # Plain text: the reason may echo the spammer's own markup.
            await self._client.send_message(
                conversation_id, text, reply_to=reply_to, parse_mode=None
            )
        except (RPCError, ValueError, ConnectionError) as e:
            raise PlatformActionError(f"send_message failed: {e}") from e

    async def delete_message(self, conversation_id: int, message_id: int) -> None:
        try:
            affected = await self._client.delete_messages(conversation_id, [message_id])
        except (RPCError, ValueError, ConnectionError) as e:
            raise PlatformActionError(f"delete_messages failed: {e}") from e

        # Basic groups answer without an error but affect nothing when the bot
        # lacks delete rights.
        if not any(getattr(item, "pts_count", 0) for item in affected or []):
            raise PlatformActionError("delete_messages affected no messages")
