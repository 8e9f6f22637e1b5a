import random

import pytest

from cleanair.export.geojson import circle_polygon_lonlat, route_geojson, zones_geojson
from cleanair.export.summary import route_to_dict
from cleanair.field.model import Coordinate, PollutionZone
from cleanair.routing.generator import generate_optimized_route
from cleanair.routing.model import RouteRequest
from cleanair.spatial.geodesy import haversine_m

START = Coordinate(30.3165, 78.0322)


def test_circle_polygon_is_closed_and_sized() -> None:
    ring = circle_polygon_lonlat(center_lat=START.lat, center_lon=START.lon, radius_m=500.0, num_points=16)
    assert len(ring) == 17
    assert ring[0] == ring[-1]
    for lon, lat in ring[:-1]:
        assert haversine_m(START.lat, START.lon, lat, lon) == pytest.approx(500.0, rel=0.01)

    with pytest.raises(ValueError):
        circle_polygon_lonlat(center_lat=0.0, center_lon=0.0, radius_m=0.0)


def test_zones_geojson_has_nominal_and_halo_rings() -> None:
    zones = [PollutionZone(id="Z1", coordinates=START, aqi=156.0, spread_radius_m=700.0, name="ISBT")]
    fc = zones_geojson(zones)
    assert fc["type"] == "FeatureCollection"
    assert [f["properties"]["ring"] for f in fc["features"]] == ["nominal", "halo"]
    assert fc["features"][1]["properties"]["radius_m"] == 1400.0
    assert fc["features"][0]["properties"]["aqi_level"] == "severe"
    assert len(zones_geojson(zones, include_halo=False)["features"]) == 1


def test_route_exports() -> None:
    request = RouteRequest(start_location=START, distance_km=2.0, max_pollution=100.0)
    route = generate_optimized_route(request, [], rng=random.Random(4))

    fc = route_geojson(route)
    line = fc["features"][0]
    assert line["geometry"]["type"] == "LineString"
    assert line["geometry"]["coordinates"][0] == [START.lon, START.lat]
    assert len(fc["features"]) == len(route.points) + 1

    summary = route_to_dict(route)
    assert summary["quality"] == "excellent"
    assert summary["points"][0]["aqi_level"] == "good"
    assert summary["warnings"] == list(route.warnings)
    assert summary["created"].endswith("+00:00")
