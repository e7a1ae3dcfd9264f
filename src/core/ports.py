"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the completion service and the chat
platform so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Optional, Protocol

from core.models import ClassificationRequest


class CompletionPort(Protocol):
    """Completion operations required by the core pipeline."""

    def complete(self, request: ClassificationRequest) -> str:
        ...


class ChatPort(Protocol):
    """Chat platform operations required by the core pipeline.

    Both operations raise PlatformActionError on failure.
    """

    async def send_message(
        self, conversation_id: int, text: str, reply_to: Optional[int] = None
    ) -> None:
        ...

    async def delete_message(self, conversation_id: int, message_id: int) -> None:
        ...
