import pytest

from kwikmaps.services.geospatial import haversine_km, km_to_miles, round_distance


def test_haversine_identical_points_is_zero():
    assert haversine_km(47.6062, -122.3321, 47.6062, -122.3321) == 0


def test_haversine_one_degree_longitude_at_equator():
    assert haversine_km(0.0, 0.0, 0.0, 1.0) == pytest.approx(111.19, abs=0.01)


def test_haversine_is_symmetric():
    forward = haversine_km(40.7128, -74.0060, 34.0522, -118.2437)
    backward = haversine_km(34.0522, -118.2437, 40.7128, -74.0060)

    assert forward == pytest.approx(backward)
    assert forward == pytest.approx(3936, rel=0.01)


def test_km_to_miles_and_display_rounding():
    assert km_to_miles(100.0) == pytest.approx(62.1371)
    assert round_distance(111.1949) == 111.2
    assert round_distance(0.0) == 0.0
