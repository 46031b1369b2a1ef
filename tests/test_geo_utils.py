"""
Tests for geospatial primitives and coordinate parsing
"""
import math

import pytest

from src.core.coordinates import parse_coordinate, parse_point, parse_point_mapping
from src.core.exceptions import InvalidInputError
from src.core.geo_utils import (
    GeoPoint,
    haversine_distance,
    distance_between,
    point_to_segment_distance,
    interpolate_route,
)

KM_PER_DEGREE = 6371.0 * math.pi / 180


class TestHaversine:
    """Test suite for great-circle distance."""

    def test_zero_distance(self):
        for lat, lng in [(0, 0), (16.5449, 81.5212), (-33.9, 151.2), (89.9, -179.9)]:
            assert haversine_distance(lat, lng, lat, lng) == 0

    def test_symmetric(self):
        d1 = haversine_distance(16.5449, 81.5212, 17.6868, 83.2185)
        d2 = haversine_distance(17.6868, 83.2185, 16.5449, 81.5212)
        assert d1 == d2

    def test_one_degree_latitude(self):
        assert haversine_distance(0, 0, 1, 0) == pytest.approx(KM_PER_DEGREE)

    def test_known_city_scale_distance(self):
        """Incident ~1 km from the Bhimavaram query point."""
        d = distance_between(GeoPoint(16.5449, 81.5212), GeoPoint(16.5500, 81.5300))
        assert 0.9 <= d <= 1.1

    def test_antipodal_points(self):
        assert haversine_distance(0, 0, 0, 180) == pytest.approx(math.pi * 6371.0)


class TestSegmentDistance:
    """Test suite for point-to-segment distance."""

    def setup_method(self):
        self.a = GeoPoint(16.50, 81.50)
        self.b = GeoPoint(16.60, 81.50)

    def test_degenerate_segment_matches_haversine(self):
        p = GeoPoint(16.5449, 81.5212)
        a = GeoPoint(16.5500, 81.5300)
        assert point_to_segment_distance(p, a, a) == pytest.approx(
            distance_between(p, a), rel=1e-3
        )

    def test_point_on_segment(self):
        assert point_to_segment_distance(GeoPoint(16.55, 81.50), self.a, self.b) == pytest.approx(0, abs=1e-9)

    def test_perpendicular_distance(self):
        expected = math.radians(0.01) * 6371.0 * math.cos(math.radians(16.55))
        d = point_to_segment_distance(GeoPoint(16.55, 81.51), self.a, self.b)
        assert d == pytest.approx(expected)

    def test_projection_clamped_to_endpoint(self):
        """Beyond the end the distance is measured to the endpoint."""
        d = point_to_segment_distance(GeoPoint(16.62, 81.50), self.a, self.b)
        assert d == pytest.approx(0.02 * KM_PER_DEGREE)

    def test_direction_independent(self):
        p = GeoPoint(16.57, 81.52)
        assert point_to_segment_distance(p, self.a, self.b) == pytest.approx(
            point_to_segment_distance(p, self.b, self.a)
        )


class TestInterpolateRoute:
    """Test suite for straight-line route sampling."""

    def test_sample_count_and_endpoints(self):
        start, end = GeoPoint(16.50, 81.50), GeoPoint(16.60, 81.70)
        points = interpolate_route(start, end, 25)

        assert len(points) == 26
        assert points[0] == start
        assert points[-1] == end

    def test_linear_blend(self):
        points = interpolate_route(GeoPoint(10.0, 20.0), GeoPoint(20.0, 40.0), 4)
        assert points[2].latitude == pytest.approx(15.0)
        assert points[2].longitude == pytest.approx(30.0)

    def test_invalid_steps(self):
        with pytest.raises(ValueError):
            interpolate_route(GeoPoint(0, 0), GeoPoint(1, 1), 0)


class TestCoordinateParsing:
    """Test suite for the coordinate validation boundary."""

    def test_numbers_and_numeric_strings(self):
        assert parse_coordinate(16.5) == 16.5
        assert parse_coordinate(81) == 81.0
        assert parse_coordinate(" 16.5449 ") == 16.5449

    @pytest.mark.parametrize("value", [None, "abc", "", True, [], {}, float("nan"), "inf", float("-inf")])
    def test_rejects_invalid_values(self, value):
        with pytest.raises(InvalidInputError):
            parse_coordinate(value, "lat")

    def test_parse_point_range_check(self):
        with pytest.raises(InvalidInputError):
            parse_point(91, 0)
        with pytest.raises(InvalidInputError):
            parse_point(0, -180.5)

    def test_parse_point(self):
        assert parse_point("16.5449", 81.5212) == GeoPoint(16.5449, 81.5212)

    def test_parse_point_mapping(self):
        point = parse_point_mapping({"lat": "16.5", "lng": "81.5"}, "start")
        assert point == GeoPoint(16.5, 81.5)

    def test_parse_point_mapping_missing(self):
        with pytest.raises(InvalidInputError) as exc_info:
            parse_point_mapping(None, "end")
        assert exc_info.value.field == "end"

        with pytest.raises(InvalidInputError) as exc_info:
            parse_point_mapping({"lat": 16.5}, "start")
        assert exc_info.value.field == "start.lng"
