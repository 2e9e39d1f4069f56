"""Coerce an arbitrary decoded model payload into the AssessmentResult contract.

normalize_result() never fails: missing or malformed fields are repaired
or defaulted. validate_result() is the strict counterpart used to
self-check normalizer output.
"""

import logging
import math
import re
from typing import Any

from models.responses import (
    MAX_SUGGESTIONS,
    AssessmentResult,
    level_for_score,
    suggestion_key,
)
from models.schemas.candidate import CandidateObject

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10
MIN_SUGGESTION_LENGTH = 8

PLACEHOLDER_REASONS = "Results normalized."

# Plain decimal or exponent notation only; no underscores, "nan" or "inf".
_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")
_INFINITY_RE = re.compile(r"^[+-]?Infinity$")

FALLBACK_SUGGESTIONS: tuple[str, ...] = (
    "Vary sentence openings to avoid repetition.",
    "Use idiomatic connectors (e.g., “that said”).",
    "Tighten article usage in complex sentences.",
)

# ---------------------------------------------------------------------------
# Generic tips that carry no information about the actual answers.
# Compared against suggestion_key() with trailing punctuation removed.
# ---------------------------------------------------------------------------
GENERIC_SUGGESTIONS: frozenset[str] = frozenset({
    "practice more",
    "practise more",
    "keep practicing",
    "keep practising",
    "keep it up",
    "keep learning",
    "study more",
    "read more",
    "read more books",
    "write more",
    "speak more",
    "improve your english",
    "improve your grammar",
    "improve your vocabulary",
    "learn more vocabulary",
    "watch english movies",
    "good job",
    "well done",
    "none",
    "n/a",
})


def _parse_numeric_string(text: str) -> float | None:
    text = text.strip()
    if _INFINITY_RE.match(text):
        return -math.inf if text.startswith("-") else math.inf
    if not _DECIMAL_RE.match(text):
        return None
    return float(text)


def _coerce_score(value: Any) -> int:
    """Numeric value or numeric string, rounded half up and clamped; else 0.

    Infinities clamp to the nearest bound; NaN counts as non-numeric.
    """
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        return max(MIN_SCORE, min(MAX_SCORE, value))
    elif isinstance(value, float):
        number = value
    elif isinstance(value, str):
        number = _parse_numeric_string(value)
    else:
        number = None

    if number is None or math.isnan(number):
        return MIN_SCORE
    if math.isinf(number):
        return MAX_SCORE if number > 0 else MIN_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, math.floor(number + 0.5)))


def _coerce_reasons(value: Any) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return PLACEHOLDER_REASONS


def _is_generic(key: str) -> bool:
    return key.rstrip(".!").strip() in GENERIC_SUGGESTIONS


def _coerce_suggestions(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return list(FALLBACK_SUGGESTIONS)

    kept: list[str] = []
    seen: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            continue
        text = item.strip()
        if len(text) < MIN_SUGGESTION_LENGTH:
            continue
        key = suggestion_key(text)
        if _is_generic(key) or key in seen:
            continue
        seen.add(key)
        kept.append(text)
        if len(kept) == MAX_SUGGESTIONS:
            break

    return kept or list(FALLBACK_SUGGESTIONS)


def normalize_result(payload: Any) -> dict:
    """Return a contract-valid result dict built from any decoded JSON value."""
    candidate = payload if isinstance(payload, CandidateObject) else CandidateObject(payload)

    score = _coerce_score(candidate.score)
    level = level_for_score(score)
    if candidate.level is not None and candidate.level != level:
        logger.debug("Model claimed level %r for score %d; using %r", candidate.level, score, level)

    return {
        "score": score,
        "level": level,
        "reasons": _coerce_reasons(candidate.reasons),
        "suggestions": _coerce_suggestions(candidate.suggestions),
    }


def validate_result(obj: Any) -> AssessmentResult:
    """Strictly validate ``obj`` against the contract.

    Raises pydantic.ValidationError; never repairs.
    """
    if isinstance(obj, AssessmentResult):
        obj = obj.model_dump()
    return AssessmentResult.model_validate(obj)
