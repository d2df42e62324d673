"""
Advisory analysis over a feed snapshot, backed by OpenAI chat completions.

- Capability gate: nothing is sent unless OPENAI_API_KEY is configured.
- analyze() returns a validated AdvisoryResult or FALLBACK_ADVISORY; it never raises.
- predict() returns free text or a fixed "unavailable" string; it never raises.
- The snapshot is serialized before the first await, so later feed ticks cannot change
  what an in-flight call sees.
"""

import logging
from typing import Awaitable, Callable, Optional

from openai import AsyncOpenAI

from advisory.prompts import (
    ANALYSIS_SYSTEM,
    PREDICTION_SYSTEM,
    build_analysis_prompt,
    build_prediction_prompt,
)
from advisory.validation import AdvisoryValidationError, parse_advisory
from core.config import Settings, get_settings
from core.models import AdvisoryResult, RiskLevel, Snapshot

logger = logging.getLogger("command_center.advisory.client")

FALLBACK_ADVISORY = AdvisoryResult(
    overall_risk=RiskLevel.MEDIUM,
    score=50,
    factors=("Limited AI analysis available", "Manual review required"),
    immediate=("Review incidents manually", "Deploy available resources"),
    short_term=("Set up AI configuration", "Monitor situation closely"),
    long_term=("Implement AI-powered monitoring", "Enhance prediction capabilities"),
    priority=("Emergency services", "Medical teams"),
    suggestions=("Optimize resource distribution", "Maintain readiness levels"),
    summary="AI analysis currently unavailable. Please configure OpenAI API key for advanced insights.",
)

PREDICTION_UNAVAILABLE = "AI prediction service currently unavailable. Please check configuration."
EMPTY_PREDICTION = "Prediction unavailable"

# transport(system=, user=, model=, max_tokens=, temperature=) -> message content
Transport = Callable[..., Awaitable[Optional[str]]]


class OpenAITransport:
    """Default transport. The AsyncOpenAI client is created on first use."""

    def __init__(self, api_key: str):
        self._api_key = api_key
        self._client: Optional[AsyncOpenAI] = None

    async def __call__(self, *, system: str, user: str, model: str, max_tokens: int, temperature: float) -> Optional[str]:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key)
        response = await self._client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


def _jsonable(value):
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if value is None:
        return {}
    return value


class AdvisoryClient:
    def __init__(self, settings: Optional[Settings] = None, transport: Optional[Transport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.ai_configured

    def _get_transport(self) -> Transport:
        if self._transport is None:
            self._transport = OpenAITransport(self.settings.openai_api_key)
        return self._transport

    async def analyze(self, snapshot: Snapshot) -> AdvisoryResult:
        if not self.enabled:
            logger.debug("analyze skipped: no OPENAI_API_KEY")
            return FALLBACK_ADVISORY

        prompt = build_analysis_prompt(
            incidents=[i.to_dict() for i in snapshot.incidents],
            resources=[r.to_dict() for r in snapshot.resources],
            weather=snapshot.weather.to_dict() if snapshot.weather else None,
        )
        logger.info(
            "advisory analyze start incidents=%d resources=%d weather=%s",
            len(snapshot.incidents), len(snapshot.resources), snapshot.weather is not None,
        )
        try:
            raw = await self._get_transport()(
                system=ANALYSIS_SYSTEM,
                user=prompt,
                model=self.settings.openai_model,
                max_tokens=self.settings.analysis_max_tokens,
                temperature=self.settings.analysis_temperature,
            )
        except Exception as e:
            logger.exception("advisory analyze failed: %s", e)
            return FALLBACK_ADVISORY

        if not raw or not raw.strip():
            logger.warning("advisory analyze empty response")
            return FALLBACK_ADVISORY
        try:
            result = parse_advisory(raw)
        except AdvisoryValidationError as e:
            logger.warning("advisory response rejected err=%s raw_preview=%r", e, raw[:200])
            return FALLBACK_ADVISORY

        logger.info("advisory analyze done risk=%s score=%d", result.overall_risk.value, result.score)
        return result

    async def predict(self, incident_history, current_conditions) -> str:
        if not self.enabled:
            logger.debug("predict skipped: no OPENAI_API_KEY")
            return PREDICTION_UNAVAILABLE

        prompt = build_prediction_prompt(_jsonable(incident_history), _jsonable(current_conditions))
        try:
            raw = await self._get_transport()(
                system=PREDICTION_SYSTEM,
                user=prompt,
                model=self.settings.openai_model,
                max_tokens=self.settings.prediction_max_tokens,
                temperature=self.settings.prediction_temperature,
            )
        except Exception as e:
            logger.exception("advisory predict failed: %s", e)
            return PREDICTION_UNAVAILABLE

        text = (raw or "").strip()
        logger.info("advisory predict done text_len=%d", len(text))
        return text or EMPTY_PREDICTION

    async def aclose(self) -> None:
        close = getattr(self._transport, "aclose", None)
        if close is not None:
            await close()
