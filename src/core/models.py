"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class InboundMessage:
    """Minimal message context used by the moderation pipeline."""

    conversation_id: int
    message_id: int
    sender: str
    text: str


@dataclass(frozen=True)
class ClassificationRequest:
    """A rendered prompt for one message, never reused."""

    model: str
    prompt: str


@dataclass(frozen=True)
class StreamedChunk:
    """One decoded frame of the completion stream."""

    response: str
    done: bool
    model: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class SpamClassification:
    is_spam: bool
    probability: float
    reason: str


@dataclass(frozen=True)
class SpamIndicators:
    """Informational flags reported by the model. Never drive the decision."""

    excessive_caps: Optional[bool] = None
    suspicious_links: Optional[bool] = None
    aggressive_cta: Optional[bool] = None
    unrealistic_promises: Optional[bool] = None
    explanation: Optional[str] = None


@dataclass(frozen=True)
class SpamAssessment:
    """Structured verdict decoded from the model output."""

    classification: SpamClassification
    spam_indicators: Optional[SpamIndicators] = None
    context_usefulness: Optional[str] = None
    language_features: Optional[str] = None


class Decision(Enum):
    CLEAN = "clean"
    SUSPECTED_SPAM = "suspected_spam"
    CONFIRMED_SPAM = "confirmed_spam"


@dataclass(frozen=True)
class ModerationOutcome:
    """What the executor did for one message."""

    decision: Decision
    reply_text: Optional[str] = None
    reply_to: Optional[int] = None
    delete_requested: bool = False
    deleted: bool = False
    reply_sent: bool = False


class PipelineState(Enum):
    RECEIVED = "received"
    CLASSIFYING = "classifying"
    PARSING = "parsing"
    DECIDING = "deciding"
    ACTING = "acting"
    DONE = "done"
    ERROR_REPORTED = "error_reported"


@dataclass(frozen=True)
class PipelineResult:
    """Terminal state of one pipeline run and what the executor did, if anything."""

    state: PipelineState
    outcome: Optional[ModerationOutcome] = None
