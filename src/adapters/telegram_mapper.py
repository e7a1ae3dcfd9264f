"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline.
"""

from __future__ import annotations

from telethon.tl.custom import Message

from core.models import InboundMessage


def sender_label(message: Message) -> str:
    """Return a readable sender label: @username, full name, or the raw id."""

    sender = getattr(message, "sender", None)
    username = getattr(sender, "username", None)
    if isinstance(username, str) and username:
        return f"@{username}"

    first = getattr(sender, "first_name", None)
    last = getattr(sender, "last_name", None)
    if first or last:
        return " ".join(part for part in [first, last] if part)

    title = getattr(sender, "title", None)
    if title:
        return str(title)

    # Fallback: always available, even for anonymous admins
    return f"id:{getattr(message, 'sender_id', None)}"


def build_inbound_message(message: Message) -> InboundMessage:
    """Build a core InboundMessage from a Telethon Message."""

    # raw_text is empty for media without a caption; the pipeline skips those.
    return InboundMessage(
        conversation_id=message.chat_id,
        message_id=message.id,
        sender=sender_label(message),
        text=message.raw_text or "",
    )
