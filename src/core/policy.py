"""Threshold policy turning a classification into a moderation decision."""

from __future__ import annotations

from core.models import Decision, SpamClassification

# Probability scale is 0-100.
SPAM_THRESHOLD = 70.0


def decide(classification: SpamClassification) -> Decision:
    """Return the decision for one classification.

    Probability only matters when the model says ``is_spam``; a non-spam
    verdict is clean whatever probability accompanies it.
    """

    if not classification.is_spam:
        return Decision.CLEAN
    if classification.probability >= SPAM_THRESHOLD:
        return Decision.CONFIRMED_SPAM
    return Decision.SUSPECTED_SPAM


def is_contradictory(classification: SpamClassification) -> bool:
    """True when the model says "not spam" with a spam-level probability."""

    return not classification.is_spam and classification.probability >= SPAM_THRESHOLD
