"""Core moderation pipeline.

This module is integration-agnostic. It only relies on ports for the
completion service and the chat platform, enabling other frontends or
adapters without changes here.

Each message runs through a strict order:
1) Fast-exit for messages without text
2) Classify via the completion service
3) Parse the model output into a SpamAssessment
4) Decide with the fixed threshold policy
5) Act on the chat (delete and/or reply)

A failure in steps 2-3 is answered with a single apology reply and the
pipeline moves on to the next message.
"""

from __future__ import annotations

import asyncio
import logging

from core.errors import PipelineError, PlatformActionError
from core.executor import ModerationExecutor
from core.models import InboundMessage, PipelineResult, PipelineState
from core.policy import decide, is_contradictory
from core.ports import ChatPort, CompletionPort
from core.prompt import build_request
from core.replies import APOLOGY_TEXT
from core.verdict import parse_assessment

LOGGER = logging.getLogger(__name__)


class ModerationProcessor:
    """Orchestrates classification, parsing, decision and moderation."""

    def __init__(self, model: str, completion: CompletionPort, chat: ChatPort) -> None:
        self._model = model
        self._completion = completion
        self._chat = chat
        self._executor = ModerationExecutor(chat)

    async def handle(self, message: InboundMessage) -> PipelineResult:
        """Process one inbound message and return its terminal state and outcome."""

        state = PipelineState.RECEIVED

        # Media-only messages without captions are ignored
        if not message.text.strip():
            return PipelineResult(state=PipelineState.DONE)

        LOGGER.info("Received message from %s: %s", message.sender, message.text)

        state = PipelineState.CLASSIFYING
        try:
            request = build_request(self._model, message.text)
            # The HTTP call blocks, so it runs off the event loop to keep the
            # Telegram connection alive while the model streams.
            raw = await asyncio.to_thread(self._completion.complete, request)
            LOGGER.info("Model response received (length: %s)", len(raw))

            state = PipelineState.PARSING
            assessment = parse_assessment(raw)
        except PipelineError as exc:
            LOGGER.error(
                "Spam check failed for message %s in chat %s during %s: %s",
                message.message_id,
                message.conversation_id,
                state.value,
                exc,
            )
            await self._apologize(message)
            return PipelineResult(state=PipelineState.ERROR_REPORTED)

        state = PipelineState.DECIDING
        classification = assessment.classification
        decision = decide(classification)
        if is_contradictory(classification):
            LOGGER.warning(
                "Contradictory verdict for message %s: is_spam=false with probability %.1f",
                message.message_id,
                classification.probability,
            )
        LOGGER.info(
            "Decision for message %s: %s (probability %.1f)",
            message.message_id,
            decision.value,
            classification.probability,
        )

        state = PipelineState.ACTING
        outcome = await self._executor.execute(message, decision, classification)
        LOGGER.debug("Message %s finished after %s", message.message_id, state.value)
        return PipelineResult(state=PipelineState.DONE, outcome=outcome)

    async def _apologize(self, message: InboundMessage) -> None:
        try:
            await self._chat.send_message(
                message.conversation_id, APOLOGY_TEXT, reply_to=message.message_id
            )
        except PlatformActionError as exc:
            LOGGER.error("Failed to send apology in chat %s: %s", message.conversation_id, exc)
