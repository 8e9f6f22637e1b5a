import math

import numpy as np
import pytest

from cleanair.spatial.geodesy import (
    haversine_m,
    haversine_many_m,
    interpolate,
    lon_delta,
    move_in_direction,
    planar_bearing_deg,
)


def test_haversine_one_degree_on_equator() -> None:
    # 2 * pi * R / 360
    assert haversine_m(0.0, 0.0, 0.0, 1.0) == pytest.approx(111_194.9, rel=1e-4)
    assert haversine_m(30.0, 78.0, 30.0, 78.0) == 0.0


def test_haversine_many_matches_scalar() -> None:
    lats = np.array([30.0, 30.01, 29.95])
    lons = np.array([78.0, 78.02, 77.99])
    many = haversine_many_m(30.0, 78.0, lats, lons)
    for i in range(3):
        assert many[i] == pytest.approx(haversine_m(30.0, 78.0, float(lats[i]), float(lons[i])))
    assert haversine_many_m(30.0, 78.0, np.array([]), np.array([])).size == 0


def test_move_in_direction_north_and_east() -> None:
    lat, lon = move_in_direction(30.0, 78.0, 0.0, 1110.0)
    assert lat == pytest.approx(30.01)
    assert lon == pytest.approx(78.0)

    lat, lon = move_in_direction(0.0, 10.0, 90.0, 1110.0)
    assert lat == pytest.approx(0.0, abs=1e-12)
    assert lon == pytest.approx(10.01)


def test_move_then_measure_is_close_to_step() -> None:
    for heading in [0.0, 45.0, 137.0, 270.0]:
        lat, lon = move_in_direction(30.3, 78.0, heading, 150.0)
        assert haversine_m(30.3, 78.0, lat, lon) == pytest.approx(150.0, rel=0.01)


def test_planar_bearing_and_interpolate() -> None:
    assert planar_bearing_deg(30.0, 78.0, 30.1, 78.0) == pytest.approx(0.0)
    assert planar_bearing_deg(30.0, 78.0, 30.0, 78.1) == pytest.approx(90.0)
    assert abs(planar_bearing_deg(30.0, 78.0, 29.9, 78.0)) == pytest.approx(180.0)
    assert interpolate(30.0, 78.0, 31.0, 80.0, 0.5) == pytest.approx((30.5, 79.0))
    assert math.isclose(interpolate(30.0, 78.0, 31.0, 80.0, 1.0)[0], 31.0)


def test_steps_wrap_across_the_antimeridian() -> None:
    lat, lon = move_in_direction(0.0, 179.999, 90.0, 500.0)
    assert -180.0 <= lon < -179.99
    assert haversine_m(0.0, 179.999, lat, lon) == pytest.approx(500.0, rel=0.01)

    lat, lon = move_in_direction(0.0, -179.999, 270.0, 500.0)
    assert 179.99 < lon <= 180.0


def test_steps_stop_at_the_poles() -> None:
    lat, _ = move_in_direction(89.999, 0.0, 0.0, 500.0)
    assert lat == 90.0
    lat, lon = move_in_direction(90.0, 10.0, 45.0, 150.0)
    assert -90.0 <= lat <= 90.0
    assert -180.0 <= lon <= 180.0
    lat, _ = move_in_direction(-89.999, 0.0, 180.0, 500.0)
    assert lat == -90.0


def test_bearing_and_interpolation_take_the_short_way_round() -> None:
    assert lon_delta(179.9, -179.9) == pytest.approx(0.2)
    assert lon_delta(-179.9, 179.9) == pytest.approx(-0.2)
    assert planar_bearing_deg(0.0, 179.9, 0.0, -179.9) == pytest.approx(90.0)

    lat, lon = interpolate(0.0, 179.9, 0.0, -179.9, 0.5)
    assert abs(lon) == pytest.approx(180.0)
    lat, lon = interpolate(0.0, 179.9, 0.0, -179.9, 0.25)
    assert lon == pytest.approx(179.95)
