"""
CrowdRisk - Route Safety Evaluator

Two independent strategies over a straight start/end route:

- sampled corridor: incident density around points sampled along the route
- corridor distance: score from incidents within a fixed distance of the
  start-end segment

Routes are straight lines; road networks are not considered.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Any, Sequence, Set

from src.core.constants import (
    ROUTE_SAMPLE_STEPS,
    ROUTE_SAMPLE_RADIUS_KM,
    ROUTE_DANGEROUS_HIGH,
    ROUTE_DANGEROUS_TOTAL,
    ROUTE_RISKY_HIGH,
    ROUTE_RISKY_TOTAL,
    ROUTE_SAFE_MESSAGE,
    ROUTE_EMPTY_MESSAGE,
    ROUTE_WARNING_MESSAGE,
    CORRIDOR_THRESHOLD_KM,
    CORRIDOR_BASE_SCORE,
    CORRIDOR_PENALTY_PER_INCIDENT,
    CORRIDOR_RISKY_BELOW,
    CORRIDOR_MODERATE_BELOW,
)
from src.core.geo_utils import (
    GeoPoint,
    distance_between,
    interpolate_route,
    point_to_segment_distance,
)
from src.crowdsource.incident import Incident
from src.risk.classifier import ThresholdRule, classify

logger = logging.getLogger(__name__)


# =============================================================================
# SAMPLED CORRIDOR
# =============================================================================

class RouteRiskLevel(Enum):
    """Risk along a sampled route."""
    SAFE = "Safe"
    CAUTION = "Caution"
    RISKY = "Risky"
    DANGEROUS = "Dangerous"


SAMPLED_ROUTE_RULES = (
    ThresholdRule(RouteRiskLevel.SAFE, below={"total": 1}),
    ThresholdRule(
        RouteRiskLevel.DANGEROUS,
        at_least={"high": ROUTE_DANGEROUS_HIGH, "total": ROUTE_DANGEROUS_TOTAL},
    ),
    ThresholdRule(
        RouteRiskLevel.RISKY,
        at_least={"high": ROUTE_RISKY_HIGH, "total": ROUTE_RISKY_TOTAL},
    ),
)


@dataclass(frozen=True)
class SampleSummary:
    """Incident counts around one sampled route point."""
    point: GeoPoint
    nearby_count: int
    high_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lat": self.point.latitude,
            "lng": self.point.longitude,
            "nearbyCount": self.nearby_count,
            "highCount": self.high_count,
        }


@dataclass
class SampledRouteResult:
    """Result of the sampled-corridor route check."""
    risk_level: RouteRiskLevel
    total_incidents_on_route: int
    high_severity_on_route: int
    sample_summaries: List[SampleSummary] = field(default_factory=list)
    message: str = ROUTE_SAFE_MESSAGE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "riskLevel": self.risk_level.value,
            "totalIncidentsOnRoute": self.total_incidents_on_route,
            "highSeverityOnRoute": self.high_severity_on_route,
            "sampleSummaries": [s.to_dict() for s in self.sample_summaries],
            "message": self.message,
        }


def classify_sampled_route(total: int, high: int) -> RouteRiskLevel:
    """Map distinct on-route incident counts to a route risk level."""
    return classify(
        {"total": total, "high": high},
        SAMPLED_ROUTE_RULES,
        default=RouteRiskLevel.CAUTION,
    )


def evaluate_route_sampled(
    start: GeoPoint,
    end: GeoPoint,
    incidents: Sequence[Incident],
    steps: int = ROUTE_SAMPLE_STEPS,
    radius_km: float = ROUTE_SAMPLE_RADIUS_KM
) -> SampledRouteResult:
    """
    Classify a route by incident density around sampled points.

    Incidents near several samples are counted once: the on-route totals
    are the union of incident ids seen across all samples.

    Args:
        start: Route start
        end: Route end
        incidents: Snapshot of incidents
        steps: Interpolation steps (steps + 1 samples)
        radius_km: Search radius around each sample

    Returns:
        SampledRouteResult
    """
    if not incidents:
        return SampledRouteResult(
            risk_level=RouteRiskLevel.SAFE,
            total_incidents_on_route=0,
            high_severity_on_route=0,
            message=ROUTE_EMPTY_MESSAGE,
        )

    on_route: Set[str] = set()
    high_on_route: Set[str] = set()
    summaries = []

    for sample in interpolate_route(start, end, steps):
        nearby = 0
        high = 0
        for incident in incidents:
            if distance_between(sample, incident.location) <= radius_km:
                nearby += 1
                on_route.add(incident.id)
                if incident.is_high_severity:
                    high += 1
                    high_on_route.add(incident.id)
        summaries.append(SampleSummary(point=sample, nearby_count=nearby, high_count=high))

    total = len(on_route)
    high_total = len(high_on_route)
    level = classify_sampled_route(total, high_total)

    logger.debug(
        f"Sampled route check: {level.value} "
        f"(total={total}, high={high_total}, samples={len(summaries)})"
    )

    return SampledRouteResult(
        risk_level=level,
        total_incidents_on_route=total,
        high_severity_on_route=high_total,
        sample_summaries=summaries,
        message=ROUTE_SAFE_MESSAGE if level == RouteRiskLevel.SAFE else ROUTE_WARNING_MESSAGE,
    )


# =============================================================================
# CORRIDOR DISTANCE
# =============================================================================

class CorridorLabel(Enum):
    """Label derived from the corridor safety score."""
    SAFE = "Safe"
    MODERATE = "Moderate"
    RISKY = "Risky"


CORRIDOR_RULES = (
    ThresholdRule(CorridorLabel.RISKY, below={"score": CORRIDOR_RISKY_BELOW}),
    ThresholdRule(CorridorLabel.MODERATE, below={"score": CORRIDOR_MODERATE_BELOW}),
)


@dataclass(frozen=True)
class CorridorIncident:
    """An incident inside the route corridor."""
    incident: Incident
    distance_km: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.incident.id,
            "type": self.incident.type.value,
            "severity": self.incident.severity.value,
            "location": self.incident.location.to_dict(),
            "distanceKm": round(self.distance_km, 3),
        }


@dataclass
class CorridorRouteResult:
    """Result of the corridor-distance route check."""
    score: int
    label: CorridorLabel
    nearby_incidents: List[CorridorIncident] = field(default_factory=list)
    message: str = ""

    @property
    def nearby_count(self) -> int:
        return len(self.nearby_incidents)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "label": self.label.value,
            "nearbyCount": self.nearby_count,
            "nearbyIncidents": [c.to_dict() for c in self.nearby_incidents],
            "message": self.message,
        }


def corridor_score(
    nearby_count: int,
    penalty_per_incident: int = CORRIDOR_PENALTY_PER_INCIDENT
) -> int:
    """Safety score from 0 to 100 for a number of corridor incidents."""
    return max(0, CORRIDOR_BASE_SCORE - penalty_per_incident * nearby_count)


def classify_corridor_score(score: int) -> CorridorLabel:
    """Map a corridor score to its label."""
    return classify({"score": score}, CORRIDOR_RULES, default=CorridorLabel.SAFE)


def _corridor_message(label: CorridorLabel, nearby_count: int, threshold_km: float) -> str:
    if nearby_count == 0:
        return f"No reported incidents within {threshold_km:g} km of this route."
    noun = "incident" if nearby_count == 1 else "incidents"
    return (
        f"{nearby_count} reported {noun} within {threshold_km:g} km of this route. "
        f"Route rated {label.value.lower()}."
    )


def evaluate_route_corridor(
    start: GeoPoint,
    end: GeoPoint,
    incidents: Sequence[Incident],
    threshold_km: float = CORRIDOR_THRESHOLD_KM,
    penalty_per_incident: int = CORRIDOR_PENALTY_PER_INCIDENT
) -> CorridorRouteResult:
    """
    Score a route by incidents within threshold_km of the start-end segment.

    Args:
        start: Route start
        end: Route end
        incidents: Snapshot of incidents
        threshold_km: Corridor half-width in kilometers (inclusive)
        penalty_per_incident: Score deducted per corridor incident

    Returns:
        CorridorRouteResult with incidents ordered by distance
    """
    nearby = []
    for incident in incidents:
        distance = point_to_segment_distance(incident.location, start, end)
        if distance <= threshold_km:
            nearby.append(CorridorIncident(incident=incident, distance_km=distance))

    nearby.sort(key=lambda c: c.distance_km)

    score = corridor_score(len(nearby), penalty_per_incident)
    label = classify_corridor_score(score)

    logger.debug(f"Corridor route check: score={score} label={label.value} nearby={len(nearby)}")

    return CorridorRouteResult(
        score=score,
        label=label,
        nearby_incidents=nearby,
        message=_corridor_message(label, len(nearby), threshold_km),
    )
