"""Feed state models: incidents, resources, weather, seismic readings and advisory output.

All models are frozen; the feed generator builds new instances instead of mutating.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    REPORTED = "reported"
    ACTIVE = "active"
    RESPONDING = "responding"
    RESOLVED = "resolved"
    CLOSED = "closed"
    MONITORING = "monitoring"


class ResourceStatus(str, Enum):
    AVAILABLE = "available"
    DEPLOYED = "deployed"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"
    STANDBY = "standby"


# Same four levels as incident severity
RiskLevel = Severity

RESOURCE_TYPES = ("ambulance", "fire_truck", "police_unit", "rescue_team", "coast_guard", "ndrf_team")


def format_timestamp(ts: datetime) -> str:
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def to_dict(self):
        return {"lat": round(self.lat, 6), "lng": round(self.lng, 6)}


@dataclass(frozen=True)
class Incident:
    id: str
    category: str
    severity: Severity
    location: GeoPoint
    description: str
    status: IncidentStatus
    timestamp: datetime
    resources_assigned: tuple = ()  # resource ids; may dangle

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "severity": self.severity.value,
            "location": self.location.to_dict(),
            "description": self.description,
            "status": self.status.value,
            "timestamp": format_timestamp(self.timestamp),
            "resources_assigned": list(self.resources_assigned),
        }


@dataclass(frozen=True)
class Resource:
    id: str
    type: str
    status: ResourceStatus
    location: GeoPoint
    capacity: int  # personnel
    assigned_to: Optional[str] = None  # incident id, weak reference

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError(f"resource {self.id} capacity must be positive, got {self.capacity}")

    def to_dict(self):
        d = {
            "id": self.id,
            "type": self.type,
            "status": self.status.value,
            "location": self.location.to_dict(),
            "capacity": self.capacity,
        }
        if self.assigned_to is not None:
            d["assigned_to"] = self.assigned_to
        return d


@dataclass(frozen=True)
class WeatherSample:
    temperature: float  # °C
    humidity: float  # percent, 0 - 100
    wind_speed: float  # km/h
    visibility: float  # km
    pressure: float  # hPa
    condition: str

    def __post_init__(self):
        object.__setattr__(self, "humidity", max(0.0, min(100.0, self.humidity)))

    def to_dict(self):
        return {
            "temperature": round(self.temperature, 1),
            "humidity": round(self.humidity, 1),
            "wind_speed": round(self.wind_speed, 1),
            "visibility": round(self.visibility, 1),
            "pressure": round(self.pressure, 1),
            "condition": self.condition,
        }


@dataclass(frozen=True)
class SeismicEvent:
    magnitude: float
    depth: float  # km
    location: str
    timestamp: datetime

    def to_dict(self):
        return {
            "magnitude": self.magnitude,
            "depth": self.depth,
            "location": self.location,
            "timestamp": format_timestamp(self.timestamp),
        }


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time copy of the feed. Collections are tuples so callers cannot mutate them."""
    incidents: tuple
    resources: tuple
    weather: Optional[WeatherSample]
    seismic: tuple
    connected: bool
    taken_at: datetime = field(compare=False)  # not part of equality

    def incident(self, incident_id: str) -> Optional[Incident]:
        return next((i for i in self.incidents if i.id == incident_id), None)

    def resource(self, resource_id: str) -> Optional[Resource]:
        return next((r for r in self.resources if r.id == resource_id), None)

    def to_dict(self):
        return {
            "incidents": [i.to_dict() for i in self.incidents],
            "resources": [r.to_dict() for r in self.resources],
            "weather": self.weather.to_dict() if self.weather else None,
            "seismic": [s.to_dict() for s in self.seismic],
            "connected": self.connected,
            "taken_at": format_timestamp(self.taken_at),
        }


@dataclass(frozen=True)
class AdvisoryResult:
    overall_risk: RiskLevel
    score: int  # 0 - 100
    factors: tuple = ()
    immediate: tuple = ()
    short_term: tuple = ()
    long_term: tuple = ()
    priority: tuple = ()
    suggestions: tuple = ()
    summary: str = ""

    def to_dict(self):
        return {
            "risk_assessment": {
                "overall_risk": self.overall_risk.value,
                "score": self.score,
                "factors": list(self.factors),
            },
            "recommendations": {
                "immediate": list(self.immediate),
                "short_term": list(self.short_term),
                "long_term": list(self.long_term),
            },
            "resource_allocation": {
                "priority": list(self.priority),
                "suggestions": list(self.suggestions),
            },
            "summary": self.summary,
        }


@dataclass(frozen=True)
class Prediction:
    """Rule-based forecast candidate (not produced by the LLM)."""
    id: str
    type: str
    probability: int  # percent
    timeframe: str
    severity: Severity
    description: str
    recommended_actions: tuple = ()

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "probability": self.probability,
            "timeframe": self.timeframe,
            "severity": self.severity.value,
            "description": self.description,
            "recommended_actions": list(self.recommended_actions),
        }
