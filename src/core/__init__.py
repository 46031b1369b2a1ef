"""
CrowdRisk - Core Utilities
Central configuration, logging, errors and geospatial primitives.
"""

from src.core.config import settings
from src.core.exceptions import (
    CrowdRiskError,
    InvalidInputError,
    IncidentNotFoundError,
    StorageUnavailableError,
)
from src.core.geo_utils import (
    GeoPoint,
    haversine_distance,
    distance_between,
    point_to_segment_distance,
    interpolate_route,
)
from src.core.coordinates import parse_coordinate, parse_point

__all__ = [
    "settings",
    "CrowdRiskError",
    "InvalidInputError",
    "IncidentNotFoundError",
    "StorageUnavailableError",
    "GeoPoint",
    "haversine_distance",
    "distance_between",
    "point_to_segment_distance",
    "interpolate_route",
    "parse_coordinate",
    "parse_point",
]
