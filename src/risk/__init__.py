"""
CrowdRisk - Risk Module
Point risk and route safety evaluation over incident snapshots.
"""

from src.risk.classifier import ThresholdRule, classify
from src.risk.point_risk import (
    RiskLevel,
    PointRiskResult,
    evaluate_point_risk,
)
from src.risk.route_safety import (
    RouteRiskLevel,
    SampledRouteResult,
    evaluate_route_sampled,
    CorridorLabel,
    CorridorRouteResult,
    evaluate_route_corridor,
)

__all__ = [
    # Classifier
    "ThresholdRule",
    "classify",
    # Point risk
    "RiskLevel",
    "PointRiskResult",
    "evaluate_point_risk",
    # Route safety
    "RouteRiskLevel",
    "SampledRouteResult",
    "evaluate_route_sampled",
    "CorridorLabel",
    "CorridorRouteResult",
    "evaluate_route_corridor",
]
