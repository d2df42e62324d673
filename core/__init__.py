"""Core feed models and process configuration."""

from core.models import (
    AdvisoryResult,
    GeoPoint,
    Incident,
    IncidentStatus,
    Prediction,
    Resource,
    ResourceStatus,
    RiskLevel,
    SeismicEvent,
    Severity,
    Snapshot,
    WeatherSample,
)
from core.config import Settings, get_settings

__all__ = [
    "AdvisoryResult",
    "GeoPoint",
    "Incident",
    "IncidentStatus",
    "Prediction",
    "Resource",
    "ResourceStatus",
    "RiskLevel",
    "SeismicEvent",
    "Severity",
    "Snapshot",
    "WeatherSample",
    "Settings",
    "get_settings",
]
