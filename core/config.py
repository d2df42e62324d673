"""Process configuration, read from the environment (and .env) once per process."""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-3.5-turbo"
    analysis_max_tokens: int = 1000
    prediction_max_tokens: int = 800
    analysis_temperature: float = 0.3
    prediction_temperature: float = 0.2
    tick_seconds: float = 5.0
    analysis_refresh_seconds: float = 30.0
    incident_retention: int = 10
    seismic_retention: int = 50
    new_incident_probability: float = 0.10
    resource_update_probability: float = 0.20
    weather_refresh_probability: float = 0.05
    log_level: str = "INFO"

    @property
    def ai_configured(self) -> bool:
        """Capability gate for the advisory client: a credential must be present."""
        return bool(self.openai_api_key and self.openai_api_key.strip())


def _int_env(name: str, default: int) -> int:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v.strip())
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v.strip())
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_dotenv(override=False)
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
        openai_model=os.environ.get("OPENAI_MODEL", "gpt-3.5-turbo"),
        analysis_max_tokens=_int_env("OPENAI_MAX_TOKENS", 1000),
        tick_seconds=max(0.1, _float_env("FEED_TICK_SECONDS", 5.0)),
        analysis_refresh_seconds=max(1.0, _float_env("ANALYSIS_REFRESH_SECONDS", 30.0)),
        incident_retention=max(1, _int_env("INCIDENT_RETENTION", 10)),
        seismic_retention=max(1, _int_env("SEISMIC_RETENTION", 50)),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )
