"""LLM-backed advisory analysis with deterministic fallback."""

from advisory.client import (
    EMPTY_PREDICTION,
    FALLBACK_ADVISORY,
    PREDICTION_UNAVAILABLE,
    AdvisoryClient,
    OpenAITransport,
)
from advisory.monitor import AdvisoryMonitor
from advisory.validation import AdvisoryValidationError, normalize_advisory, parse_advisory

__all__ = [
    "EMPTY_PREDICTION",
    "FALLBACK_ADVISORY",
    "PREDICTION_UNAVAILABLE",
    "AdvisoryClient",
    "AdvisoryMonitor",
    "AdvisoryValidationError",
    "OpenAITransport",
    "normalize_advisory",
    "parse_advisory",
]
