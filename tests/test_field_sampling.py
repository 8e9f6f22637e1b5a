import numpy as np
import pytest

from cleanair.field.model import Coordinate, PollutionZone
from cleanair.field.sampling import (
    sample_grid,
    sample_pollution,
    sample_pollution_at,
    sample_pollution_many,
    zone_weight,
)
from cleanair.spatial.geodesy import haversine_m, move_in_direction

ORIGIN = (30.3165, 78.0322)


def _zone(zid: str, at: tuple[float, float], aqi: float, radius_m: float) -> PollutionZone:
    return PollutionZone(id=zid, coordinates=Coordinate(*at), aqi=aqi, spread_radius_m=radius_m)


def _point(heading: float, distance_m: float) -> Coordinate:
    return Coordinate(*move_in_direction(ORIGIN[0], ORIGIN[1], heading, distance_m))


def test_zone_weight_branches() -> None:
    assert zone_weight(0.0, 100.0) == 1.0
    assert zone_weight(50.0, 100.0) == pytest.approx(0.5)
    # Inner floor at the nominal edge, halo formula just beyond it.
    assert zone_weight(100.0, 100.0) == pytest.approx(0.1)
    assert zone_weight(150.0, 100.0) == pytest.approx(0.15)
    assert zone_weight(200.0, 100.0) == pytest.approx(0.05)
    assert zone_weight(200.1, 100.0) == 0.0


def test_single_zone_is_flat_inside_its_reach() -> None:
    zones = [_zone("Z1", ORIGIN, 150.0, 500.0)]
    for d in [0.0, 250.0, 499.0, 501.0, 900.0]:
        assert sample_pollution(_point(30.0, d), zones) == pytest.approx(150.0)


def test_single_zone_continuous_at_nominal_radius() -> None:
    zones = [_zone("Z1", ORIGIN, 220.0, 400.0)]
    inside = sample_pollution(_point(90.0, 399.0), zones)
    outside = sample_pollution(_point(90.0, 401.0), zones)
    assert inside == pytest.approx(outside, abs=1e-6)


def test_overlapping_zones_blend_by_weight() -> None:
    north = move_in_direction(ORIGIN[0], ORIGIN[1], 0.0, 500.0)
    zones = [_zone("A", ORIGIN, 100.0, 1000.0), _zone("B", north, 200.0, 1000.0)]
    d = haversine_m(ORIGIN[0], ORIGIN[1], north[0], north[1])
    w_b = 1.0 - d / 1000.0
    expected = (100.0 * 1.0 + 200.0 * w_b) / (1.0 + w_b)
    assert sample_pollution(Coordinate(*ORIGIN), zones) == pytest.approx(expected)
    assert 100.0 < expected < 200.0


def test_fallback_decays_with_nearest_zone_distance() -> None:
    zones = [_zone("Z1", ORIGIN, 200.0, 100.0)]
    p = _point(0.0, 1000.0)
    d = haversine_m(ORIGIN[0], ORIGIN[1], p.lat, p.lon)
    assert sample_pollution(p, zones) == pytest.approx(200.0 * (1.0 - d / 2000.0 * 0.5))
    # Beyond 2 km the nearest zone counts at half strength.
    assert sample_pollution(_point(0.0, 5000.0), zones) == pytest.approx(100.0)


def test_fallback_uses_nearest_zone_and_floor() -> None:
    near = move_in_direction(ORIGIN[0], ORIGIN[1], 90.0, 3000.0)
    far = move_in_direction(ORIGIN[0], ORIGIN[1], 270.0, 6000.0)
    zones = [_zone("far", far, 400.0, 100.0), _zone("near", near, 120.0, 100.0)]
    assert sample_pollution(Coordinate(*ORIGIN), zones) == pytest.approx(60.0)

    clean = [_zone("clean", near, 40.0, 100.0)]
    assert sample_pollution(Coordinate(*ORIGIN), clean) == 30.0


def test_empty_zones_use_baseline() -> None:
    assert sample_pollution(Coordinate(*ORIGIN), []) == 30.0
    assert sample_pollution_at(0.0, 0.0, ()) == 30.0


def test_sampling_is_pure() -> None:
    zones = [_zone("A", ORIGIN, 180.0, 300.0), _zone("B", move_in_direction(*ORIGIN, 45.0, 400.0), 60.0, 500.0)]
    p = _point(10.0, 250.0)
    first = sample_pollution(p, zones)
    sample_pollution(_point(200.0, 50.0), zones)
    assert sample_pollution(p, zones) == first
    assert sample_pollution(p, list(reversed(zones))) == pytest.approx(first)


def test_sample_grid_covers_bounds() -> None:
    zones = [_zone("Z1", ORIGIN, 150.0, 500.0)]
    grid = sample_grid(
        min_lat=ORIGIN[0] - 0.01,
        min_lon=ORIGIN[1] - 0.01,
        max_lat=ORIGIN[0] + 0.01,
        max_lon=ORIGIN[1] + 0.01,
        zones=zones,
        cell_size_m=500.0,
    )
    assert list(grid.columns) == ["cell_id", "lat", "lon", "aqi"]
    assert len(grid) > 0
    assert grid["aqi"].max() == pytest.approx(150.0)
    assert grid["aqi"].min() >= 30.0


def test_vectorized_sampling_matches_scalar() -> None:
    zones = [
        _zone("Z1", ORIGIN, 150.0, 500.0),
        _zone("Z2", _point(90.0, 800.0).as_tuple(), 60.0, 400.0),
    ]
    # Inside, halo, overlap and fallback distances.
    probes = [_point(h, d) for h, d in [(0.0, 0.0), (45.0, 300.0), (90.0, 600.0), (180.0, 900.0), (270.0, 4000.0)]]
    lats = np.array([p.lat for p in probes])
    lons = np.array([p.lon for p in probes])

    many = sample_pollution_many(lats, lons, zones)
    for i, p in enumerate(probes):
        assert many[i] == pytest.approx(sample_pollution(p, zones))
    assert list(sample_pollution_many(lats, lons, [])) == [30.0] * len(probes)


def test_sample_grid_cells_match_point_samples() -> None:
    zones = [_zone("Z1", ORIGIN, 150.0, 500.0)]
    grid = sample_grid(
        min_lat=ORIGIN[0] - 0.005,
        min_lon=ORIGIN[1] - 0.005,
        max_lat=ORIGIN[0] + 0.005,
        max_lon=ORIGIN[1] + 0.005,
        zones=zones,
        cell_size_m=250.0,
    )
    assert grid["cell_id"].is_unique
    assert grid["cell_id"].iloc[0] == "r0c0"
    for row in grid.itertuples(index=False):
        assert row.aqi == pytest.approx(round(sample_pollution_at(row.lat, row.lon, zones), 1), abs=0.1)


def test_zone_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        _zone("bad", ORIGIN, -1.0, 100.0)
    with pytest.raises(ValueError):
        _zone("bad", ORIGIN, 10.0, 0.0)
    with pytest.raises(ValueError):
        Coordinate(91.0, 0.0)
