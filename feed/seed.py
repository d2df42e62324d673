"""Fixed sample data the feed starts from (Tamil Nadu command-center demo)."""

from datetime import datetime, timedelta

from core.models import (
    GeoPoint,
    Incident,
    IncidentStatus,
    Resource,
    ResourceStatus,
    SeismicEvent,
    Severity,
)

CITIES = [
    {"name": "Chennai", "lat": 13.0827, "lng": 80.2707},
    {"name": "Coimbatore", "lat": 11.0168, "lng": 76.9558},
    {"name": "Madurai", "lat": 9.9252, "lng": 78.1198},
    {"name": "Trichy", "lat": 10.7905, "lng": 78.7047},
    {"name": "Salem", "lat": 11.3410, "lng": 77.7172},
    {"name": "Tuticorin", "lat": 8.7642, "lng": 78.1348},
    {"name": "Mysore Border", "lat": 12.2958, "lng": 76.6394},
]

SYNTHETIC_CATEGORIES = [
    "Medical Emergency",
    "Gas Leak",
    "Power Outage",
    "Road Closure",
    "Water Main Break",
    "Coastal Erosion",
    "Tree Fall",
    "Building Collapse",
]


def seed_incidents(now: datetime) -> list[Incident]:
    return [
        Incident(
            id="INC001",
            category="Cyclone Alert",
            severity=Severity.CRITICAL,
            location=GeoPoint(11.0168, 76.9558),
            description="Severe cyclonic storm approaching coastal areas. High winds and heavy rainfall expected.",
            status=IncidentStatus.ACTIVE,
            timestamp=now,
            resources_assigned=("RES001", "RES003"),
        ),
        Incident(
            id="INC002",
            category="Flash Flood",
            severity=Severity.HIGH,
            location=GeoPoint(13.0827, 80.2707),
            description="Heavy rainfall causing waterlogging in low-lying areas. Traffic severely affected.",
            status=IncidentStatus.ACTIVE,
            timestamp=now - timedelta(minutes=5),
            resources_assigned=("RES002",),
        ),
        Incident(
            id="INC003",
            category="Landslide Warning",
            severity=Severity.MEDIUM,
            location=GeoPoint(11.4064, 76.6932),
            description="Heavy rainfall triggering landslides in hilly areas. Road blockages reported.",
            status=IncidentStatus.RESPONDING,
            timestamp=now - timedelta(minutes=10),
            resources_assigned=("RES004",),
        ),
        Incident(
            id="INC004",
            category="Heat Wave",
            severity=Severity.MEDIUM,
            location=GeoPoint(11.3410, 77.7172),
            description="Extreme heat conditions affecting public health. Emergency cooling centers activated.",
            status=IncidentStatus.MONITORING,
            timestamp=now - timedelta(minutes=15),
        ),
    ]


def seed_resources() -> list[Resource]:
    return [
        Resource("RES001", "ambulance", ResourceStatus.DEPLOYED, GeoPoint(11.0168, 76.9558), 2, assigned_to="INC001"),
        Resource("RES002", "fire_truck", ResourceStatus.DEPLOYED, GeoPoint(13.0827, 80.2707), 6, assigned_to="INC002"),
        Resource("RES003", "rescue_team", ResourceStatus.DEPLOYED, GeoPoint(11.4064, 76.6932), 8, assigned_to="INC001"),
        Resource("RES004", "police_unit", ResourceStatus.DEPLOYED, GeoPoint(11.3410, 77.7172), 2, assigned_to="INC003"),
        Resource("RES005", "ambulance", ResourceStatus.AVAILABLE, GeoPoint(12.9716, 77.5946), 2),
        Resource("RES006", "coast_guard", ResourceStatus.AVAILABLE, GeoPoint(8.7642, 78.1348), 10),
        Resource("RES007", "ndrf_team", ResourceStatus.STANDBY, GeoPoint(10.7905, 78.7047), 15),
    ]


def seed_seismic(now: datetime) -> list[SeismicEvent]:
    """Most recent first."""
    return [
        SeismicEvent(magnitude=3.2, depth=12, location="Western Ghats, Tamil Nadu", timestamp=now - timedelta(hours=1)),
        SeismicEvent(magnitude=2.8, depth=8, location="Eastern Coast, Tamil Nadu", timestamp=now - timedelta(hours=2)),
    ]
