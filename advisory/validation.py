"""
Normalize LLM advisory output into an AdvisoryResult.

The model is asked for camelCase keys; snake_case is accepted too. Numeric score is
clamped to [0, 100]. Anything structurally wrong (unknown risk level, non-numeric
score, non-list where a list is expected, empty summary) is rejected so the caller
can substitute the fallback.
"""

import json
import logging
import re

from core.models import AdvisoryResult, RiskLevel

logger = logging.getLogger("command_center.advisory.validation")

SCORE_MIN = 0
SCORE_MAX = 100


class AdvisoryValidationError(ValueError):
    pass


def strip_json_block(raw: str) -> str:
    """Remove markdown code fence if present so we can parse JSON."""
    s = raw.strip()
    if s.startswith("```"):
        s = re.sub(r"^```(?:json)?\s*", "", s)
        s = re.sub(r"\s*```\s*$", "", s)
    return s.strip()


def parse_advisory(raw: str) -> AdvisoryResult:
    """Parse raw model content. Raises AdvisoryValidationError on any problem."""
    try:
        data = json.loads(strip_json_block(raw))
    except json.JSONDecodeError as e:
        raise AdvisoryValidationError(f"response is not JSON: {e}") from e
    return normalize_advisory(data)


def _pick(d: dict, *keys):
    for k in keys:
        if k in d:
            return d[k]
    return None


def _section(data: dict, *keys) -> dict:
    value = _pick(data, *keys)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise AdvisoryValidationError(f"{keys[0]} must be an object")
    return value


def _string_list(section: dict, *keys) -> tuple:
    value = _pick(section, *keys)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise AdvisoryValidationError(f"{keys[0]} must be a list")
    items = (str(v).strip() for v in value if v is not None)
    return tuple(v for v in items if v)


def _risk_level(value) -> RiskLevel:
    if not isinstance(value, str):
        raise AdvisoryValidationError(f"overallRisk must be a string, got {type(value).__name__}")
    try:
        return RiskLevel(value.strip().lower())
    except ValueError:
        raise AdvisoryValidationError(f"unknown risk level {value!r}") from None


def _score(value) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AdvisoryValidationError(f"score must be a number, got {value!r}")
    if value != value:  # NaN
        raise AdvisoryValidationError("score is NaN")
    clamped = max(SCORE_MIN, min(SCORE_MAX, value))
    if clamped != value:
        logger.warning("advisory score clamped from %s to %s", value, clamped)
    return int(round(clamped))


def normalize_advisory(data) -> AdvisoryResult:
    if not isinstance(data, dict):
        raise AdvisoryValidationError(f"response must be an object, got {type(data).__name__}")

    risk = _section(data, "riskAssessment", "risk_assessment")
    recs = _section(data, "recommendations")
    alloc = _section(data, "resourceAllocation", "resource_allocation")

    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise AdvisoryValidationError("summary must be a non-empty string")

    return AdvisoryResult(
        overall_risk=_risk_level(_pick(risk, "overallRisk", "overall_risk")),
        score=_score(risk.get("score")),
        factors=_string_list(risk, "factors"),
        immediate=_string_list(recs, "immediate"),
        short_term=_string_list(recs, "shortTerm", "short_term"),
        long_term=_string_list(recs, "longTerm", "long_term"),
        priority=_string_list(alloc, "priority"),
        suggestions=_string_list(alloc, "suggestions"),
        summary=summary.strip(),
    )
