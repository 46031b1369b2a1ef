"""
CrowdRisk - REST API

FastAPI application exposing incident reports, community verification,
point risk and route safety checks.

Run with: uvicorn src.api.main:app --reload
"""

import logging
from datetime import datetime
from typing import Any, Optional, List

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.core.config import settings
from src.core.exceptions import CrowdRiskError
from src.core.logging import setup_logging
from src.database.connection import init_db
from src.database.repository import IncidentRepository
from src.api.service import IncidentRiskService

setup_logging()
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"

# Raw request values; the service parses and validates them
Coordinate = Any

app = FastAPI(
    title="CrowdRisk",
    description="Disaster risk assessment from crowd-submitted, geotagged incident reports",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Pydantic Models
# ============================================================================

class HealthResponse(BaseModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    database: bool
    incident_count: Optional[int]


class LatLng(BaseModel):
    """Loose coordinate pair."""
    lat: Coordinate = None
    lng: Coordinate = None


class IncidentCreateRequest(BaseModel):
    """Request to report an incident."""
    type: Any = None
    severity: Any = "medium"
    lat: Coordinate = None
    lng: Coordinate = None
    description: Optional[str] = None


class IncidentResponse(BaseModel):
    """Incident with its verification aggregate."""
    id: str
    type: str
    severity: str
    description: Optional[str]
    lat: float
    lng: float
    createdAt: Optional[str]
    confirmations: int
    flags: int
    confirmVoters: List[str]
    flagVoters: List[str]
    verificationStatus: str
    isSimulation: bool


class VoteRequest(BaseModel):
    """Community vote on an incident."""
    userId: Any = None
    vote: Any = None


class VoteResponse(BaseModel):
    status: str
    incident: IncidentResponse


class PointRiskRequest(BaseModel):
    lat: Coordinate = None
    lng: Coordinate = None


class PointRiskResponse(BaseModel):
    riskLevel: str
    nearbyCount: int
    highCount: int


class RouteRequest(BaseModel):
    """Straight route between two points."""
    start: Any = None
    end: Any = None


class SampleSummaryResponse(BaseModel):
    lat: float
    lng: float
    nearbyCount: int
    highCount: int


class SampledRouteResponse(BaseModel):
    """Sampled-corridor route safety."""
    riskLevel: str
    totalIncidentsOnRoute: int
    highSeverityOnRoute: int
    sampleSummaries: List[SampleSummaryResponse]
    message: str


class CorridorIncidentResponse(BaseModel):
    id: str
    type: str
    severity: str
    location: LatLng
    distanceKm: float


class CorridorRouteResponse(BaseModel):
    """Corridor-distance route safety."""
    score: int = Field(description="0 (most dangerous) to 100 (no incidents)")
    label: str
    nearbyCount: int
    nearbyIncidents: List[CorridorIncidentResponse]
    message: str


class ClearSimulationsResponse(BaseModel):
    deletedCount: int
    message: str


# ============================================================================
# Dependencies
# ============================================================================

_service: Optional[IncidentRiskService] = None


def get_service() -> IncidentRiskService:
    """Lazily build the service on top of the configured database."""
    global _service
    if _service is None:
        logger.info(f"Starting incident service (env={settings.app_env})")
        _service = IncidentRiskService(IncidentRepository(init_db(settings.database_url)))
    return _service


@app.exception_handler(CrowdRiskError)
async def crowdrisk_error_handler(request: Request, exc: CrowdRiskError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        message = f"{location}: {errors[0].get('msg')}" if location else errors[0].get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


# ============================================================================
# System Routes
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"])
def health_check(service: IncidentRiskService = Depends(get_service)):
    """Check API and database health."""
    db_healthy = service.repository.db.check_connection()
    count = service.repository.count() if db_healthy else None

    return HealthResponse(
        status="healthy" if db_healthy else "degraded",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        database=db_healthy,
        incident_count=count,
    )


# ============================================================================
# Incident Routes
# ============================================================================

@app.get("/api/v1/incidents", response_model=List[IncidentResponse], tags=["Incidents"])
def list_incidents(service: IncidentRiskService = Depends(get_service)):
    """List all incidents, newest first."""
    return service.list_incidents()


@app.post("/api/v1/incidents", response_model=IncidentResponse, status_code=201, tags=["Incidents"])
def create_incident(
    request: IncidentCreateRequest,
    service: IncidentRiskService = Depends(get_service),
):
    """Report a new incident."""
    return service.report_incident(
        incident_type=request.type,
        lat=request.lat,
        lng=request.lng,
        severity=request.severity,
        description=request.description,
    )


@app.delete(
    "/api/v1/incidents/simulations",
    response_model=ClearSimulationsResponse,
    tags=["Incidents"],
)
def clear_simulations(service: IncidentRiskService = Depends(get_service)):
    """Delete every incident marked as simulation data."""
    deleted = service.clear_simulations()
    return ClearSimulationsResponse(deletedCount=deleted, message="Simulation incidents cleared")


@app.delete("/api/v1/incidents/{incident_id}", tags=["Incidents"])
def delete_incident(incident_id: str, service: IncidentRiskService = Depends(get_service)):
    """Permanently delete an incident (administrative)."""
    service.remove_incident(incident_id)
    return {"message": "Incident deleted"}


@app.post("/api/v1/incidents/{incident_id}/vote", response_model=VoteResponse, tags=["Verification"])
def vote_on_incident(
    incident_id: str,
    request: VoteRequest,
    service: IncidentRiskService = Depends(get_service),
):
    """
    Confirm or flag an incident.

    Each user may vote once per incident. A repeated vote returns
    status "alreadyVoted" and leaves the incident unchanged.
    """
    return service.vote_on_incident(incident_id, request.userId, request.vote)


# ============================================================================
# Risk Routes
# ============================================================================

@app.post("/api/v1/risk/check", response_model=PointRiskResponse, tags=["Risk"])
def check_point_risk(
    request: PointRiskRequest,
    service: IncidentRiskService = Depends(get_service),
):
    """Classify risk within 5 km of a point."""
    return service.check_point_risk(request.lat, request.lng)


@app.post("/api/v1/route/check", response_model=SampledRouteResponse, tags=["Route"])
def check_route_sampled(
    request: RouteRequest,
    service: IncidentRiskService = Depends(get_service),
):
    """Classify a straight route by incident density around sampled points."""
    return service.check_route_safety_a(request.start, request.end)


@app.post("/api/v1/route/corridor", response_model=CorridorRouteResponse, tags=["Route"])
def check_route_corridor(
    request: RouteRequest,
    service: IncidentRiskService = Depends(get_service),
):
    """Score a straight route by incidents within 2 km of it."""
    return service.check_route_safety_b(request.start, request.end)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.api.main:app", host=settings.api_host, port=settings.api_port)
