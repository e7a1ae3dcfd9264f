"""Moderation executor: applies a decision to the originating chat."""

from __future__ import annotations

import logging
from typing import Optional

from core.errors import PlatformActionError
from core.models import Decision, InboundMessage, ModerationOutcome, SpamClassification
from core.policy import SPAM_THRESHOLD
from core.ports import ChatPort
from core.replies import format_delete_failed, format_deleted, format_suspected

LOGGER = logging.getLogger(__name__)


class ModerationExecutor:
    """Performs at most one delete and one send per message."""

    def __init__(self, chat: ChatPort) -> None:
        self._chat = chat

    async def execute(
        self,
        message: InboundMessage,
        decision: Decision,
        classification: SpamClassification,
    ) -> ModerationOutcome:
        if decision is Decision.CLEAN:
            # Clean messages get no reply on purpose.
            return ModerationOutcome(decision=decision)

        if decision is Decision.SUSPECTED_SPAM:
            text = format_suspected(classification, SPAM_THRESHOLD)
            sent = await self._send(message, text, reply_to=message.message_id)
            return ModerationOutcome(
                decision=decision,
                reply_text=text,
                reply_to=message.message_id,
                reply_sent=sent,
            )

        deleted = await self._delete(message)
        if deleted:
            text = format_deleted(classification)
        else:
            text = format_delete_failed(classification)
        # The original may be gone, so the status is never sent as a reply.
        sent = await self._send(message, text, reply_to=None)
        return ModerationOutcome(
            decision=decision,
            reply_text=text,
            reply_to=None,
            delete_requested=True,
            deleted=deleted,
            reply_sent=sent,
        )

    async def _delete(self, message: InboundMessage) -> bool:
        try:
            await self._chat.delete_message(message.conversation_id, message.message_id)
        except PlatformActionError as exc:
            LOGGER.warning(
                "Failed to delete spam message %s in chat %s: %s",
                message.message_id,
                message.conversation_id,
                exc,
            )
            return False
        LOGGER.info("Deleted spam message %s in chat %s", message.message_id, message.conversation_id)
        return True

    async def _send(self, message: InboundMessage, text: str, reply_to: Optional[int]) -> bool:
        try:
            await self._chat.send_message(message.conversation_id, text, reply_to=reply_to)
        except PlatformActionError as exc:
            LOGGER.error("Failed to send reply in chat %s: %s", message.conversation_id, exc)
            return False
        return True
