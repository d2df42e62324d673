"""
Rule-based predictive checks and dashboard aggregates over a feed snapshot.

These are threshold rules, independent of the LLM advisory client:
- High Wind Event: wind speed > 25 km/h
- Flash Flood Risk: humidity > 85% and temperature > 20 °C
- Flood Escalation: more than one "flood" incident within the last hour
- Aftershock Sequence: most recent seismic event magnitude > 1.5
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from core.models import (
    Incident,
    IncidentStatus,
    Prediction,
    Resource,
    ResourceStatus,
    SeismicEvent,
    Severity,
    Snapshot,
    WeatherSample,
)

HIGH_WIND_KMH = 25
FLOOD_HUMIDITY_PCT = 85
FLOOD_TEMPERATURE_C = 20
FLOOD_WINDOW = timedelta(hours=1)
FLOOD_MIN_INCIDENTS = 2
AFTERSHOCK_MAGNITUDE = 1.5

HIGH_WIND = Prediction(
    id="PRED001",
    type="High Wind Event",
    probability=78,
    timeframe="Next 6 hours",
    severity=Severity.MEDIUM,
    description="Strong winds may cause power outages and structural damage",
    recommended_actions=(
        "Pre-position utility crews",
        "Issue public safety advisory",
        "Check emergency shelter readiness",
    ),
)

FLASH_FLOOD = Prediction(
    id="PRED002",
    type="Flash Flood Risk",
    probability=65,
    timeframe="Next 12 hours",
    severity=Severity.HIGH,
    description="High humidity and temperature increase flood probability",
    recommended_actions=(
        "Monitor river levels",
        "Prepare evacuation routes",
        "Alert low-lying area residents",
    ),
)

FLOOD_ESCALATION = Prediction(
    id="PRED003",
    type="Flood Escalation",
    probability=84,
    timeframe="Next 3 hours",
    severity=Severity.CRITICAL,
    description="Multiple flood incidents suggest widespread flooding event",
    recommended_actions=(
        "Activate emergency coordination center",
        "Deploy all available water rescue teams",
        "Issue evacuation orders for flood zones",
    ),
)

AFTERSHOCK = Prediction(
    id="PRED004",
    type="Aftershock Sequence",
    probability=42,
    timeframe="Next 24 hours",
    severity=Severity.LOW,
    description="Minor aftershocks possible following recent seismic activity",
    recommended_actions=(
        "Monitor structural integrity",
        "Brief search and rescue teams",
        "Check emergency communication systems",
    ),
)


def recent_flood_incidents(incidents: Iterable[Incident], now: datetime) -> list[Incident]:
    return [
        i for i in incidents
        if "flood" in i.category.lower() and now - i.timestamp < FLOOD_WINDOW
    ]


def generate_predictions(
    weather: Optional[WeatherSample],
    seismic: Sequence[SeismicEvent],
    incidents: Sequence[Incident],
    now: datetime,
) -> list[Prediction]:
    predictions = []
    if weather is not None:
        if weather.wind_speed > HIGH_WIND_KMH:
            predictions.append(HIGH_WIND)
        if weather.humidity > FLOOD_HUMIDITY_PCT and weather.temperature > FLOOD_TEMPERATURE_C:
            predictions.append(FLASH_FLOOD)
    if len(recent_flood_incidents(incidents, now)) >= FLOOD_MIN_INCIDENTS:
        predictions.append(FLOOD_ESCALATION)
    if seismic and seismic[0].magnitude > AFTERSHOCK_MAGNITUDE:
        predictions.append(AFTERSHOCK)
    return predictions


def risk_factors(weather: Optional[WeatherSample], incidents: Sequence[Incident]) -> list[dict]:
    """Gauge values (0 - 100) for the predictive panel."""
    count = len(incidents)
    return [
        {
            "name": "Weather Conditions",
            "risk": min(90.0, (weather.wind_speed + weather.humidity) / 2) if weather else 0.0,
            "status": "High" if weather and weather.wind_speed > HIGH_WIND_KMH else "Normal",
        },
        {
            "name": "Incident Density",
            "risk": min(100, count * 10),
            "status": "High" if count > 5 else "Normal",
        },
        {
            "name": "Resource Availability",
            "risk": 100 - min(100, count * 15),
            "status": "Good" if count < 3 else "Limited",
        },
        {
            "name": "Communication Systems",
            "risk": 15,
            "status": "Operational",
        },
    ]


def resource_stats(resources: Sequence[Resource]) -> dict:
    total = len(resources)
    deployed = sum(1 for r in resources if r.status == ResourceStatus.DEPLOYED)
    return {
        "total": total,
        "deployed": deployed,
        "available": sum(1 for r in resources if r.status == ResourceStatus.AVAILABLE),
        "maintenance": sum(1 for r in resources if r.status == ResourceStatus.MAINTENANCE),
        "deployment_rate": round(deployed / total * 100, 1) if total else 0.0,
    }


def filter_incidents(incidents: Iterable[Incident], status: str = "all", search: str = "") -> list[Incident]:
    """Status filter ("all" passes everything) plus case-insensitive search over category and description."""
    term = (search or "").strip().lower()
    out = []
    for i in incidents:
        if status and status != "all" and i.status.value != status:
            continue
        if term and term not in i.category.lower() and term not in i.description.lower():
            continue
        out.append(i)
    return out


def filter_resources(resources: Iterable[Resource], resource_type: str = "all") -> list[Resource]:
    if not resource_type or resource_type == "all":
        return list(resources)
    return [r for r in resources if r.type == resource_type]


def dashboard_summary(snapshot: Snapshot) -> dict:
    return {
        "active_incidents": sum(1 for i in snapshot.incidents if i.status == IncidentStatus.ACTIVE),
        "critical_alerts": sum(1 for i in snapshot.incidents if i.severity == Severity.CRITICAL),
        "total_incidents": len(snapshot.incidents),
        "resources": resource_stats(snapshot.resources),
        "system_status": {
            "data_feeds": "operational" if snapshot.connected else "degraded",
            "agencies": "operational",
            "communications": "operational",
            "predictions": "operational",
        },
    }
