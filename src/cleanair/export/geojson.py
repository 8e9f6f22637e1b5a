"""
GeoJSON builders for the map layer.

Routes become a LineString plus one Point per waypoint (so the UI can color
waypoints by AQI); zones become circle polygons for their nominal radius and,
optionally, their halo. Circles use the same flat step projection as the
route generator so what the map shows matches what the field model sees.

GeoJSON coordinates are [lon, lat] (note the order).
"""

from __future__ import annotations

# `math` provides pi/cos for circle point generation.
import math
# `Any` is used for GeoJSON-like dict structures.
from typing import Any, Sequence

# NumPy provides vectorized circle generation.
import numpy as np

from cleanair.aqi import aqi_level
from cleanair.field.model import PollutionZone
from cleanair.routing.model import GeneratedRoute
from cleanair.spatial.geodesy import METERS_PER_DEGREE


def circle_polygon_lonlat(
    *,
    center_lat: float,
    center_lon: float,
    radius_m: float,
    num_points: int = 64,
) -> list[list[float]]:
    """
    Approximate a circle as a closed lon/lat ring.
    """
    if radius_m <= 0:
        raise ValueError("radius_m must be > 0")
    # A polygon needs at least 3 vertices; the default is smoother.
    if num_points < 3:
        raise ValueError("num_points must be >= 3")

    # Evenly spaced compass headings around the circle.
    angles = np.linspace(0.0, 2.0 * math.pi, num_points, endpoint=False)
    lats = center_lat + (radius_m / METERS_PER_DEGREE) * np.cos(angles)
    lons = center_lon + (radius_m / (METERS_PER_DEGREE * math.cos(math.radians(center_lat)))) * np.sin(angles)

    coords = [[float(lon), float(lat)] for lat, lon in zip(lats, lons)]
    # Close the ring by repeating the first coordinate (GeoJSON polygon requirement).
    coords.append(coords[0])
    return coords


def zones_geojson(zones: Sequence[PollutionZone], *, include_halo: bool = True) -> dict[str, Any]:
    features: list[dict[str, Any]] = []
    for z in zones:
        rings = [("nominal", z.spread_radius_m)]
        if include_halo:
            rings.append(("halo", 2.0 * z.spread_radius_m))
        for ring, radius in rings:
            coords = circle_polygon_lonlat(
                center_lat=z.coordinates.lat,
                center_lon=z.coordinates.lon,
                radius_m=radius,
            )
            features.append(
                {
                    "type": "Feature",
                    "geometry": {"type": "Polygon", "coordinates": [coords]},
                    "properties": {
                        "id": z.id,
                        "name": z.name,
                        "aqi": float(z.aqi),
                        "aqi_level": aqi_level(z.aqi),
                        "ring": ring,
                        "radius_m": float(radius),
                    },
                }
            )
    return {"type": "FeatureCollection", "features": features}


def route_geojson(route: GeneratedRoute) -> dict[str, Any]:
    line = [[float(p.coordinates.lon), float(p.coordinates.lat)] for p in route.points]
    features: list[dict[str, Any]] = [
        {
            "type": "Feature",
            "geometry": {"type": "LineString", "coordinates": line},
            "properties": {
                "kind": "route",
                "total_distance_m": float(route.total_distance_m),
                "average_aqi": float(route.average_aqi),
                "max_aqi": float(route.max_aqi),
                "clean_air_score": int(route.clean_air_score),
            },
        }
    ]
    for i, p in enumerate(route.points):
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [float(p.coordinates.lon), float(p.coordinates.lat)]},
                "properties": {
                    "kind": "waypoint",
                    "index": i,
                    "aqi": float(p.aqi),
                    "aqi_level": aqi_level(p.aqi),
                    "distance_from_start_m": float(p.distance_from_start_m),
                },
            }
        )
    return {"type": "FeatureCollection", "features": features}
