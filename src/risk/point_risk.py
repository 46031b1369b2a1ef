"""
CrowdRisk - Point Risk Evaluator
Classifies danger at a single coordinate from nearby incident density and severity.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Iterable, Tuple

from src.core.constants import (
    POINT_RISK_RADIUS_KM,
    POINT_CRITICAL_NEARBY,
    POINT_CRITICAL_HIGH,
    POINT_HIGH_NEARBY,
    POINT_HIGH_HIGH,
    POINT_MODERATE_NEARBY,
)
from src.core.geo_utils import GeoPoint, distance_between
from src.crowdsource.incident import Incident
from src.risk.classifier import ThresholdRule, classify

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    """Risk around a single point."""
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    CRITICAL = "Critical"


POINT_RISK_RULES = (
    ThresholdRule(
        RiskLevel.CRITICAL,
        at_least={"nearby": POINT_CRITICAL_NEARBY, "high": POINT_CRITICAL_HIGH},
    ),
    ThresholdRule(
        RiskLevel.HIGH,
        at_least={"nearby": POINT_HIGH_NEARBY, "high": POINT_HIGH_HIGH},
    ),
    ThresholdRule(
        RiskLevel.MODERATE,
        at_least={"nearby": POINT_MODERATE_NEARBY},
    ),
)


@dataclass(frozen=True)
class PointRiskResult:
    """Risk classification at a point."""
    risk_level: RiskLevel
    nearby_count: int
    high_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "riskLevel": self.risk_level.value,
            "nearbyCount": self.nearby_count,
            "highCount": self.high_count,
        }


def count_nearby(
    target: GeoPoint,
    incidents: Iterable[Incident],
    radius_km: float = POINT_RISK_RADIUS_KM
) -> Tuple[int, int]:
    """
    Count incidents within radius_km of target (inclusive).

    High-severity incidents are counted in both totals.

    Returns:
        Tuple of (nearby_count, high_count)
    """
    nearby = 0
    high = 0
    for incident in incidents:
        if distance_between(target, incident.location) <= radius_km:
            nearby += 1
            if incident.is_high_severity:
                high += 1
    return nearby, high


def classify_point_risk(nearby_count: int, high_count: int) -> RiskLevel:
    """Map nearby/high counts to a risk level."""
    return classify(
        {"nearby": nearby_count, "high": high_count},
        POINT_RISK_RULES,
        default=RiskLevel.LOW,
    )


def evaluate_point_risk(
    target: GeoPoint,
    incidents: Iterable[Incident],
    radius_km: float = POINT_RISK_RADIUS_KM
) -> PointRiskResult:
    """
    Evaluate risk at a point from an incident snapshot.

    Args:
        target: Point to evaluate
        incidents: Snapshot of incidents
        radius_km: Search radius in kilometers

    Returns:
        PointRiskResult
    """
    nearby, high = count_nearby(target, incidents, radius_km)
    level = classify_point_risk(nearby, high)

    logger.debug(
        f"Point risk at ({target.latitude:.5f}, {target.longitude:.5f}): "
        f"{level.value} (nearby={nearby}, high={high})"
    )

    return PointRiskResult(risk_level=level, nearby_count=nearby, high_count=high)
