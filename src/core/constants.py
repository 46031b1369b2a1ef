"""
CrowdRisk - Constants and Reference Data
Static values used throughout the application.
"""

from typing import Tuple

# =============================================================================
# GEOGRAPHY
# =============================================================================

# Mean Earth radius used by every distance calculation
EARTH_RADIUS_KM: float = 6371.0

LATITUDE_RANGE: Tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: Tuple[float, float] = (-180.0, 180.0)

# =============================================================================
# POINT RISK
# =============================================================================

# Incidents at exactly this distance still count as nearby
POINT_RISK_RADIUS_KM: float = 5.0

POINT_CRITICAL_NEARBY: int = 8
POINT_CRITICAL_HIGH: int = 3
POINT_HIGH_NEARBY: int = 5
POINT_HIGH_HIGH: int = 1
POINT_MODERATE_NEARBY: int = 2

# =============================================================================
# ROUTE SAFETY - SAMPLED CORRIDOR
# =============================================================================

# 25 steps -> 26 sample points including both endpoints
ROUTE_SAMPLE_STEPS: int = 25
ROUTE_SAMPLE_RADIUS_KM: float = 5.0

ROUTE_DANGEROUS_HIGH: int = 5
ROUTE_DANGEROUS_TOTAL: int = 20
ROUTE_RISKY_HIGH: int = 2
ROUTE_RISKY_TOTAL: int = 10

ROUTE_SAFE_MESSAGE = "No significant incident clusters close to this route."
ROUTE_EMPTY_MESSAGE = "No incidents in the system. Route currently looks safe."
ROUTE_WARNING_MESSAGE = (
    "There are incident clusters near this route. "
    "Consider re-checking or adjusting the path."
)

# =============================================================================
# ROUTE SAFETY - CORRIDOR DISTANCE
# =============================================================================

CORRIDOR_THRESHOLD_KM: float = 2.0
CORRIDOR_BASE_SCORE: int = 100
CORRIDOR_PENALTY_PER_INCIDENT: int = 15

# Scores strictly below these values fall into the band
CORRIDOR_RISKY_BELOW: int = 40
CORRIDOR_MODERATE_BELOW: int = 70

# =============================================================================
# VERIFICATION
# =============================================================================

VERIFIED_MIN_CONFIRMATIONS: int = 3
SUSPICIOUS_MIN_FLAGS: int = 2
