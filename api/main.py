"""
FastAPI backend: serves the simulated command-center feed, rule-based predictions and
the latest LLM advisory to the dashboard. The feed and the advisory refresh run on the
server's event loop (started in lifespan).
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from advisory.client import AdvisoryClient
from advisory.monitor import AdvisoryMonitor
from analytics.predictive import (
    dashboard_summary,
    filter_incidents,
    filter_resources,
    generate_predictions,
    resource_stats,
    risk_factors,
)
from core.config import get_settings
from feed.generator import FeedGenerator, ResourceUnavailableError, UnknownEntityError

load_dotenv(override=True)
settings = get_settings()

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("command_center.api")

# -----------------------------------------------------------------------------
# Feed + advisory (single in-process instance)
# -----------------------------------------------------------------------------
feed = FeedGenerator(settings=settings)
advisor = AdvisoryMonitor(AdvisoryClient(settings=settings))


@asynccontextmanager
async def lifespan(app: FastAPI):
    await feed.start()
    refresher: Optional[asyncio.Task] = None
    if advisor.enabled:
        refresher = asyncio.create_task(
            advisor.run_periodic(feed.current_snapshot, settings.analysis_refresh_seconds),
            name="advisory-refresh",
        )
    else:
        logger.info("advisory disabled: OPENAI_API_KEY not set")
    yield
    advisor.close()
    if refresher is not None:
        refresher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresher
    await feed.stop()
    await advisor.client.aclose()


app = FastAPI(title="Command Center Feed API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------
class AssignRequest(BaseModel):
    resource_id: str


# -----------------------------------------------------------------------------
# No-cache for dynamic API responses (avoid 304 for stale data)
# -----------------------------------------------------------------------------
NO_CACHE_HEADERS = {"Cache-Control": "no-store, no-cache, must-revalidate", "Pragma": "no-cache"}


def _json(content) -> JSONResponse:
    return JSONResponse(content=content, headers=NO_CACHE_HEADERS)


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@app.get("/health")
def health():
    return _json({
        "status": "ok",
        "ai_enabled": advisor.enabled,
        "feed_state": feed.state.value,
        "connected": feed.connected,
        "ticks": feed.ticks,
    })


@app.get("/snapshot")
def get_snapshot():
    """Full point-in-time feed state."""
    return _json(feed.current_snapshot().to_dict())


@app.get("/incidents")
def list_incidents(status: str = "all", q: str = ""):
    """Incidents newest first, optionally filtered by status and a search term."""
    incidents = filter_incidents(feed.current_snapshot().incidents, status=status, search=q)
    return _json({"count": len(incidents), "incidents": [i.to_dict() for i in incidents]})


@app.get("/resources")
def list_resources(type: str = "all"):
    snapshot = feed.current_snapshot()
    resources = filter_resources(snapshot.resources, resource_type=type)
    return _json({
        "count": len(resources),
        "resources": [r.to_dict() for r in resources],
        "stats": resource_stats(snapshot.resources),
    })


@app.get("/dashboard")
def get_dashboard():
    return _json(dashboard_summary(feed.current_snapshot()))


@app.get("/predictions")
def get_predictions():
    """Rule-based predictions (independent of the LLM advisory)."""
    snapshot = feed.current_snapshot()
    predictions = generate_predictions(snapshot.weather, snapshot.seismic, snapshot.incidents, snapshot.taken_at)
    return _json({
        "predictions": [p.to_dict() for p in predictions],
        "risk_factors": risk_factors(snapshot.weather, snapshot.incidents),
        "sources": {
            "weather_feeds": 1 if snapshot.weather else 0,
            "seismic_events": len(snapshot.seismic),
            "incidents": len(snapshot.incidents),
        },
    })


@app.get("/advisory")
def get_advisory():
    return _json(advisor.to_dict())


@app.post("/advisory/refresh")
async def refresh_advisory():
    """Run analysis now. No-op (enabled=false) when OPENAI_API_KEY is not configured."""
    if not advisor.enabled:
        logger.debug("advisory refresh requested while disabled")
        return _json(advisor.to_dict())
    await advisor.refresh(feed.current_snapshot())
    return _json(advisor.to_dict())


@app.post("/incidents/{incident_id}/assign")
def assign_resource(incident_id: str, body: AssignRequest):
    """Assign an available resource to an incident (resource becomes deployed)."""
    try:
        incident, resource = feed.assign_resource(incident_id, body.resource_id)
    except UnknownEntityError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ResourceUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _json({"incident": incident.to_dict(), "resource": resource.to_dict()})


@app.post("/resources/{resource_id}/release")
def release_resource(resource_id: str):
    try:
        resource = feed.release_resource(resource_id)
    except UnknownEntityError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _json({"resource": resource.to_dict()})
