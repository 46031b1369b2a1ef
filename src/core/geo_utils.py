"""
CrowdRisk - Geospatial Utilities
Distance calculations over latitude/longitude coordinates.
"""

import math
from typing import Dict, List
from dataclasses import dataclass

from src.core.constants import EARTH_RADIUS_KM


@dataclass(frozen=True)
class GeoPoint:
    """Geographic point with latitude and longitude in decimal degrees."""
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Args:
        lat1, lon1: First point coordinates in decimal degrees
        lat2, lon2: Second point coordinates in decimal degrees

    Returns:
        Distance in kilometers
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_between(p1: GeoPoint, p2: GeoPoint) -> float:
    """Great-circle distance in kilometers between two GeoPoints."""
    return haversine_distance(p1.latitude, p1.longitude, p2.latitude, p2.longitude)


def point_to_segment_distance(
    point: GeoPoint,
    seg_start: GeoPoint,
    seg_end: GeoPoint
) -> float:
    """
    Approximate distance from a point to the segment seg_start-seg_end.

    Coordinates are projected onto a local tangent plane in kilometers:
    longitude (radians) is scaled by R * cos(mean latitude of the segment)
    and latitude (radians) by R, then the point is projected onto the
    segment with the projection parameter clamped to [0, 1].

    This is a short-segment approximation. It is accurate at city scale;
    the error grows with segment length and with latitude, and it does not
    handle segments crossing the antimeridian.

    Args:
        point: Point to measure from
        seg_start: First endpoint of the segment
        seg_end: Second endpoint of the segment

    Returns:
        Approximate distance in kilometers
    """
    lat0 = math.radians((seg_start.latitude + seg_end.latitude) / 2)
    kx = EARTH_RADIUS_KM * math.cos(lat0)
    ky = EARTH_RADIUS_KM

    ax, ay = math.radians(seg_start.longitude) * kx, math.radians(seg_start.latitude) * ky
    bx, by = math.radians(seg_end.longitude) * kx, math.radians(seg_end.latitude) * ky
    px, py = math.radians(point.longitude) * kx, math.radians(point.latitude) * ky

    abx, aby = bx - ax, by - ay
    ab2 = abx * abx + aby * aby

    if ab2 == 0:
        return math.hypot(px - ax, py - ay)

    t = ((px - ax) * abx + (py - ay) * aby) / ab2
    t = max(0.0, min(1.0, t))

    cx = ax + t * abx
    cy = ay + t * aby

    return math.hypot(px - cx, py - cy)


def interpolate_route(
    start: GeoPoint,
    end: GeoPoint,
    steps: int
) -> List[GeoPoint]:
    """
    Sample a straight route by linear blending of latitude and longitude.

    This is a plain blend of degrees, not great-circle interpolation.

    Args:
        start: Route start
        end: Route end
        steps: Number of intervals; steps + 1 points are returned

    Returns:
        List of sampled points from start to end inclusive
    """
    if steps < 1:
        raise ValueError("steps must be >= 1")

    points = []
    for i in range(steps + 1):
        t = i / steps
        points.append(GeoPoint(
            latitude=start.latitude + (end.latitude - start.latitude) * t,
            longitude=start.longitude + (end.longitude - start.longitude) * t,
        ))
    return points
