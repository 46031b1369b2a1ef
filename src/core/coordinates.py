"""
CrowdRisk - Coordinate Parsing
Single validation boundary for coordinates arriving from outside the core.
"""

import math
from typing import Any, Mapping, Optional

from src.core.constants import LATITUDE_RANGE, LONGITUDE_RANGE
from src.core.exceptions import InvalidInputError
from src.core.geo_utils import GeoPoint


def parse_coordinate(value: Any, field: str = "coordinate") -> float:
    """
    Parse a coordinate given as a number or numeric string.

    Args:
        value: Raw value (int, float or str)
        field: Field name used in the error message

    Returns:
        Finite float value

    Raises:
        InvalidInputError: If the value is missing, non-numeric or not finite
    """
    # bool is an int subclass
    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number", field=field)

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise InvalidInputError(
                f"{field} must be a number, got {value!r}", field=field
            )
    else:
        raise InvalidInputError(f"{field} must be a number", field=field)

    if not math.isfinite(number):
        raise InvalidInputError(f"{field} must be finite", field=field)

    return number


def parse_point(
    lat: Any,
    lng: Any,
    prefix: Optional[str] = None
) -> GeoPoint:
    """
    Parse and range-check a latitude/longitude pair.

    Args:
        lat: Raw latitude
        lng: Raw longitude
        prefix: Optional field prefix for error messages (e.g. "start")

    Returns:
        Validated GeoPoint
    """
    lat_field = f"{prefix}.lat" if prefix else "lat"
    lng_field = f"{prefix}.lng" if prefix else "lng"

    latitude = parse_coordinate(lat, lat_field)
    longitude = parse_coordinate(lng, lng_field)

    if not LATITUDE_RANGE[0] <= latitude <= LATITUDE_RANGE[1]:
        raise InvalidInputError(
            f"{lat_field} must be between -90 and 90", field=lat_field
        )
    if not LONGITUDE_RANGE[0] <= longitude <= LONGITUDE_RANGE[1]:
        raise InvalidInputError(
            f"{lng_field} must be between -180 and 180", field=lng_field
        )

    return GeoPoint(latitude=latitude, longitude=longitude)


def parse_point_mapping(data: Optional[Mapping[str, Any]], prefix: str) -> GeoPoint:
    """Parse a {"lat": ..., "lng": ...} mapping such as a route endpoint."""
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"{prefix} must be an object with lat/lng", field=prefix)
    return parse_point(data.get("lat"), data.get("lng"), prefix=prefix)
