"""Parsing of model output into a structured spam assessment.

The model is asked for pure JSON but routinely wraps it in chatter
("Sure! {...} Hope that helps!"). ``sanitize`` trims that noise with a
best-effort heuristic and ``parse_assessment`` then decodes and validates the
result against a strict schema. Any shape violation is a
``MalformedVerdictError``; nothing is coerced or defaulted, so a broken
verdict can never turn into an implicit "not spam".
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from jsonschema import Draft7Validator

from core.errors import MalformedVerdictError
from core.models import SpamAssessment, SpamClassification, SpamIndicators

LOGGER = logging.getLogger(__name__)

verdict_schema = {
    "type": "object",
    "properties": {
        "classification": {
            "type": "object",
            "properties": {
                "is_spam": {"type": "boolean"},
                "probability": {"type": "number", "minimum": 0, "maximum": 100},
                "reason": {"type": "string"},
            },
            "required": ["is_spam", "probability", "reason"],
        },
        "spam_indicators": {
            "type": "object",
            "properties": {
                "excessive_caps": {"type": "boolean"},
                "suspicious_links": {"type": "boolean"},
                "aggressive_cta": {"type": "boolean"},
                "unrealistic_promises": {"type": "boolean"},
                "explanation": {"type": "string"},
            },
        },
        "context_usefulness": {"type": "string"},
        "language_features": {"type": "string"},
    },
    "required": ["classification"],
}

_verdict_validator = Draft7Validator(verdict_schema)


def sanitize(raw: str) -> str:
    """Cut the text down to the span between the first '{' and the last '}'."""

    result = raw.strip()
    if not result.startswith("{"):
        idx = result.find("{")
        if idx != -1:
            result = result[idx:]
    if not result.endswith("}"):
        idx = result.rfind("}")
        if idx != -1:
            result = result[: idx + 1]
    return result


def _describe(error) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return f"{path or '<root>'}: {error.message}"


def _build_assessment(payload: dict[str, Any]) -> SpamAssessment:
    raw_classification = payload["classification"]
    probability = float(raw_classification["probability"])
    # json.loads accepts NaN and Infinity, which the range check cannot reject.
    if not math.isfinite(probability):
        raise MalformedVerdictError(f"classification.probability is not finite: {probability}")
    classification = SpamClassification(
        is_spam=raw_classification["is_spam"],
        probability=probability,
        reason=raw_classification["reason"],
    )

    indicators = None
    raw_indicators = payload.get("spam_indicators")
    if raw_indicators is not None:
        indicators = SpamIndicators(
            excessive_caps=raw_indicators.get("excessive_caps"),
            suspicious_links=raw_indicators.get("suspicious_links"),
            aggressive_cta=raw_indicators.get("aggressive_cta"),
            unrealistic_promises=raw_indicators.get("unrealistic_promises"),
            explanation=raw_indicators.get("explanation"),
        )

    return SpamAssessment(
        classification=classification,
        spam_indicators=indicators,
        context_usefulness=payload.get("context_usefulness"),
        language_features=payload.get("language_features"),
    )


def parse_assessment(raw: str) -> SpamAssessment:
    """Decode raw model output into a ``SpamAssessment``.

    Raises ``MalformedVerdictError`` when the sanitized text is not a JSON
    object or does not match ``verdict_schema``.
    """

    cleaned = sanitize(raw)
    LOGGER.debug("Sanitized verdict: %s", cleaned)

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedVerdictError(f"verdict is not valid JSON: {exc}") from exc

    errors = sorted(_describe(error) for error in _verdict_validator.iter_errors(payload))
    if errors:
        details = "; ".join(errors)
        raise MalformedVerdictError(f"verdict does not match schema: {details}")

    return _build_assessment(payload)
