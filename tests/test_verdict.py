from __future__ import annotations

import json

import pytest

from core.errors import MalformedVerdictError
from core.verdict import parse_assessment, sanitize

VALID = json.dumps(
    {
        "spam_indicators": {
            "excessive_caps": True,
            "suspicious_links": True,
            "aggressive_cta": True,
            "unrealistic_promises": False,
            "explanation": "caps and a short link",
        },
        "context_usefulness": "none",
        "language_features": "imperative",
        "classification": {"is_spam": True, "probability": 92, "reason": "aggressive CTA"},
    },
    ensure_ascii=False,
)


def test_sanitize_is_idempotent_on_clean_json() -> None:
    assert sanitize(VALID) == VALID
    assert sanitize(sanitize(VALID)) == VALID


def test_sanitize_strips_surrounding_noise() -> None:
    raw = f"  Sure! {VALID} Hope that helps!\n"
    assert sanitize(raw) == VALID


def test_sanitize_leaves_text_without_braces_alone() -> None:
    assert sanitize("  no json here ") == "no json here"


def test_parse_extracts_object_from_chatter() -> None:
    assessment = parse_assessment(f"Sure! {VALID} Hope that helps!")
    assert assessment.classification.is_spam is True
    assert assessment.classification.probability == 92.0
    assert assessment.classification.reason == "aggressive CTA"
    assert assessment.spam_indicators is not None
    assert assessment.spam_indicators.suspicious_links is True
    assert assessment.language_features == "imperative"


def test_parse_accepts_classification_only() -> None:
    assessment = parse_assessment('{"classification":{"is_spam":false,"probability":10,"reason":"ok"}}')
    assert assessment.classification.is_spam is False
    assert assessment.spam_indicators is None
    assert assessment.context_usefulness is None


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json at all",
        "{broken",
        "[1, 2, 3]",
        "{}",
        '{"classification": "spam"}',
        '{"classification": {"probability": 90, "reason": "x"}}',
        '{"classification": {"is_spam": true, "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": 90}}',
        '{"classification": {"is_spam": "true", "probability": 90, "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": "90", "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": true, "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": 90, "reason": 5}}',
        '{"classification": {"is_spam": true, "probability": 150, "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": -1, "reason": "x"}}',
        '{"classification": {"is_spam": true, "probability": 90, "reason": "x"}, "spam_indicators": []}',
        '{"classification": {"is_spam": true, "probability": NaN, "reason": "x"}}',
    ],
)
def test_malformed_verdicts_raise(raw: str) -> None:
    with pytest.raises(MalformedVerdictError):
        parse_assessment(raw)


def test_error_names_the_offending_field() -> None:
    with pytest.raises(MalformedVerdictError, match="classification.probability"):
        parse_assessment('{"classification": {"is_spam": true, "probability": "high", "reason": "x"}}')
