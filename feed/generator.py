"""
Simulated real-time feed.

FeedGenerator owns the incident, resource, weather and seismic collections and is the
only writer. Consumers read immutable Snapshots. While running, an asyncio task calls
tick() on a fixed interval; ticks never overlap because they run on one task.

Randomness and time are injected so tests can drive ticks deterministically:
- rng: object with random(), uniform(a, b), choice(seq) (random.Random satisfies it).
- clock: callable returning a timezone-aware datetime.
"""

import asyncio
import contextlib
import logging
import random
from dataclasses import replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Protocol, Sequence

from core.config import Settings, get_settings
from core.models import (
    GeoPoint,
    Incident,
    IncidentStatus,
    Resource,
    ResourceStatus,
    SeismicEvent,
    Severity,
    Snapshot,
    WeatherSample,
)
from feed.seed import CITIES, SYNTHETIC_CATEGORIES, seed_incidents, seed_resources, seed_seismic
from feed.weather import simulated_weather

logger = logging.getLogger("command_center.feed")

INCIDENT_JITTER_DEG = 0.025  # +/- around the chosen city
RESOURCE_JITTER_DEG = 0.005
RESOURCE_CHANGE_PROBABILITY = 0.3  # per resource, when a resource update fires
SIMULATED_RESOURCE_STATUSES = (ResourceStatus.AVAILABLE, ResourceStatus.DEPLOYED, ResourceStatus.MAINTENANCE)
ASSIGNABLE_STATUSES = (ResourceStatus.AVAILABLE, ResourceStatus.STANDBY)


class RandomSource(Protocol):
    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence): ...


class GeneratorState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class AssignmentError(Exception):
    """A mutation request failed its preconditions."""


class UnknownEntityError(AssignmentError):
    pass


class ResourceUnavailableError(AssignmentError):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FeedGenerator:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        rng: Optional[RandomSource] = None,
        clock: Optional[Callable[[], datetime]] = None,
        weather_source: Optional[Callable[[RandomSource], WeatherSample]] = None,
    ):
        self.settings = settings or get_settings()
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock or _utcnow
        self._weather_source = weather_source or simulated_weather

        now = self._clock()
        self._incidents: list[Incident] = seed_incidents(now)[: self.settings.incident_retention]
        self._resources: list[Resource] = seed_resources()
        self._seismic: list[SeismicEvent] = seed_seismic(now)[: self.settings.seismic_retention]
        self._weather: Optional[WeatherSample] = None
        self._next_seq = len(self._incidents) + 1
        self._ticks = 0
        self._task: Optional[asyncio.Task] = None
        self._state = GeneratorState.STOPPED

        self.connected = True
        self.refresh_weather()
        logger.info(
            "feed initialised incidents=%d resources=%d seismic=%d weather=%s",
            len(self._incidents), len(self._resources), len(self._seismic), self._weather is not None,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    @property
    def state(self) -> GeneratorState:
        return self._state

    @property
    def ticks(self) -> int:
        return self._ticks

    def current_snapshot(self) -> Snapshot:
        return Snapshot(
            incidents=tuple(self._incidents),
            resources=tuple(self._resources),
            weather=self._weather,
            seismic=tuple(self._seismic),
            connected=self.connected,
            taken_at=self._clock(),
        )

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def tick(self) -> None:
        """One simulation step. Each branch fires independently."""
        s = self.settings
        if self._rng.random() < s.new_incident_probability:
            incident = self._synthetic_incident()
            self._incidents = [incident] + self._incidents[: s.incident_retention - 1]
            logger.info("tick new incident id=%s category=%r severity=%s", incident.id, incident.category, incident.severity.value)
        if self._rng.random() < s.resource_update_probability:
            changed = self._shuffle_resources()
            logger.debug("tick resource update changed=%d", changed)
        if self._rng.random() < s.weather_refresh_probability:
            self.refresh_weather()
        self._ticks += 1

    def refresh_weather(self) -> None:
        """Replace the weather sample. A failing source keeps the previous sample."""
        try:
            sample = self._weather_source(self._rng)
        except Exception as e:
            logger.warning("weather refresh failed, keeping previous sample: %s", e)
            return
        if sample is None:
            logger.warning("weather source returned nothing, keeping previous sample")
            return
        self._weather = sample

    def _synthetic_incident(self) -> Incident:
        category = self._rng.choice(SYNTHETIC_CATEGORIES)
        severity = self._rng.choice(list(Severity))
        city = self._rng.choice(CITIES)
        location = GeoPoint(
            lat=city["lat"] + self._rng.uniform(-INCIDENT_JITTER_DEG, INCIDENT_JITTER_DEG),
            lng=city["lng"] + self._rng.uniform(-INCIDENT_JITTER_DEG, INCIDENT_JITTER_DEG),
        )
        incident_id = f"TN{self._next_seq:03d}"
        self._next_seq += 1
        return Incident(
            id=incident_id,
            category=category,
            severity=severity,
            location=location,
            description=f"Emergency reported in {city['name']} area through Tamil Nadu emergency services.",
            status=IncidentStatus.REPORTED,
            timestamp=self._clock(),
        )

    def _shuffle_resources(self) -> int:
        changed = 0
        updated = []
        for resource in self._resources:
            if self._rng.random() < RESOURCE_CHANGE_PROBABILITY:
                status = self._rng.choice(SIMULATED_RESOURCE_STATUSES)
                location = GeoPoint(
                    lat=resource.location.lat + self._rng.uniform(-RESOURCE_JITTER_DEG, RESOURCE_JITTER_DEG),
                    lng=resource.location.lng + self._rng.uniform(-RESOURCE_JITTER_DEG, RESOURCE_JITTER_DEG),
                )
                assigned_to = resource.assigned_to if status == ResourceStatus.DEPLOYED else None
                if resource.assigned_to and assigned_to is None:
                    self._detach(resource.id, resource.assigned_to)
                resource = replace(resource, status=status, location=location, assigned_to=assigned_to)
                changed += 1
            updated.append(resource)
        self._resources = updated
        return changed

    # ------------------------------------------------------------------
    # Mutation entrypoints (single writer)
    # ------------------------------------------------------------------
    def assign_resource(self, incident_id: str, resource_id: str) -> tuple[Incident, Resource]:
        """
        Assign an available (or standby) resource to an incident.
        After: resource is deployed with assigned_to=incident_id; incident lists resource_id once.
        """
        i_idx = self._index_of(self._incidents, incident_id)
        if i_idx is None:
            raise UnknownEntityError(f"incident {incident_id} not found")
        r_idx = self._index_of(self._resources, resource_id)
        if r_idx is None:
            raise UnknownEntityError(f"resource {resource_id} not found")
        resource = self._resources[r_idx]
        if resource.status not in ASSIGNABLE_STATUSES:
            raise ResourceUnavailableError(f"resource {resource_id} is {resource.status.value}")

        deployed = replace(resource, status=ResourceStatus.DEPLOYED, assigned_to=incident_id)
        incident = self._incidents[i_idx]
        if resource_id not in incident.resources_assigned:
            incident = replace(incident, resources_assigned=incident.resources_assigned + (resource_id,))
        self._resources = self._resources[:r_idx] + [deployed] + self._resources[r_idx + 1:]
        self._incidents = self._incidents[:i_idx] + [incident] + self._incidents[i_idx + 1:]
        logger.info("resource assigned resource_id=%s incident_id=%s", resource_id, incident_id)
        return incident, deployed

    def release_resource(self, resource_id: str) -> Resource:
        """Return a resource to available and drop it from any incident that lists it."""
        r_idx = self._index_of(self._resources, resource_id)
        if r_idx is None:
            raise UnknownEntityError(f"resource {resource_id} not found")
        resource = self._resources[r_idx]
        released = replace(resource, status=ResourceStatus.AVAILABLE, assigned_to=None)
        self._resources = self._resources[:r_idx] + [released] + self._resources[r_idx + 1:]
        self._detach(resource_id, None)
        logger.info("resource released resource_id=%s previous_incident=%s", resource_id, resource.assigned_to)
        return released

    def record_seismic_event(self, event: SeismicEvent) -> None:
        self._seismic = [event] + self._seismic[: self.settings.seismic_retention - 1]
        logger.info("seismic event recorded magnitude=%.1f location=%r", event.magnitude, event.location)

    def _detach(self, resource_id: str, incident_id: Optional[str]) -> None:
        """Remove resource_id from incident_id (or from every incident when None)."""
        updated = []
        for incident in self._incidents:
            if (incident_id is None or incident.id == incident_id) and resource_id in incident.resources_assigned:
                remaining = tuple(r for r in incident.resources_assigned if r != resource_id)
                incident = replace(incident, resources_assigned=remaining)
            updated.append(incident)
        self._incidents = updated

    @staticmethod
    def _index_of(items: list, item_id: str) -> Optional[int]:
        return next((n for n, item in enumerate(items) if item.id == item_id), None)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def start(self) -> None:
        """Stopped -> Running. Must be awaited inside a running event loop."""
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="feed-generator")
        self._state = GeneratorState.RUNNING
        logger.info("feed started interval=%.1fs", self.settings.tick_seconds)

    async def stop(self) -> None:
        """Running -> Stopped. Cancels the tick task."""
        task, self._task = self._task, None
        self._state = GeneratorState.STOPPED
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("feed stopped ticks=%d", self._ticks)

    async def _run(self) -> None:
        interval = self.settings.tick_seconds
        while True:
            await asyncio.sleep(interval)
            try:
                self.tick()
            except Exception:
                logger.exception("feed tick failed tick=%d", self._ticks)
