"""
Distance and heading helpers for short-range route synthesis.

Two approximations are deliberately paired here and must stay paired:
- distances are great-circle (haversine) on a spherical Earth,
- stepping "N meters along a heading" uses a flat equirectangular offset
  with ~111 km per degree of latitude.

The pair is consistent for steps of a few hundred meters at moderate
latitudes, which is all the route generator ever asks for. Headings are
compass-style degrees: 0 = north, 90 = east.

Stepping never leaves the valid coordinate range: longitudes wrap across the
antimeridian and latitudes are pinned at the poles.
"""

from __future__ import annotations

# `math` covers the scalar trigonometry used per route step.
import math

# NumPy is used for the vectorized variant (many zones vs one point).
import numpy as np

# Earth radius in meters (spherical approximation).
EARTH_RADIUS_M = 6_371_000.0
# Meters per degree of latitude used by the flat step projection.
METERS_PER_DEGREE = 111_000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    # Convert to radians once so the formula below reads like the textbook version.
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push `a` a hair above 1 for near-antipodal points.
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def haversine_many_m(
    lat: float,
    lon: float,
    lats_deg: np.ndarray,
    lons_deg: np.ndarray,
) -> np.ndarray:
    """
    Distances in meters from one point to many points (same formula as `haversine_m`).
    """
    # Empty inputs return an empty float array so callers can branch on `.size`.
    lats = np.asarray(lats_deg, dtype=float)
    lons = np.asarray(lons_deg, dtype=float)
    if lats.size == 0:
        return np.zeros(0, dtype=float)

    phi1 = math.radians(lat)
    phi2 = np.deg2rad(lats)
    d_phi = np.deg2rad(lats - lat)
    d_lambda = np.deg2rad(lons - lon)

    a = np.sin(d_phi / 2) ** 2 + math.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    # Clip guards against tiny negative values from floating error before sqrt.
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def haversine_pairwise_m(
    lats1_deg: np.ndarray,
    lons1_deg: np.ndarray,
    lats2_deg: np.ndarray,
    lons2_deg: np.ndarray,
) -> np.ndarray:
    """
    Distance matrix in meters, shape (len(lats1), len(lats2)).
    """
    phi1 = np.deg2rad(np.asarray(lats1_deg, dtype=float))[:, None]
    lam1 = np.deg2rad(np.asarray(lons1_deg, dtype=float))[:, None]
    phi2 = np.deg2rad(np.asarray(lats2_deg, dtype=float))[None, :]
    lam2 = np.deg2rad(np.asarray(lons2_deg, dtype=float))[None, :]

    a = np.sin((phi2 - phi1) / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin((lam2 - lam1) / 2) ** 2
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))


def normalize_lon(lon: float) -> float:
    # Fold any longitude back into [-180, 180); values already in range pass through untouched.
    if -180.0 <= lon <= 180.0:
        return lon
    return (lon + 180.0) % 360.0 - 180.0


def lon_delta(lon1: float, lon2: float) -> float:
    # Signed short-way longitude difference, so 179.9 -> -179.9 is +0.2 and not -359.8.
    delta = lon2 - lon1
    if delta > 180.0:
        delta -= 360.0
    elif delta < -180.0:
        delta += 360.0
    return delta


def move_in_direction(lat: float, lon: float, heading_deg: float, distance_m: float) -> tuple[float, float]:
    # Heading is measured clockwise from north, so cos drives latitude and sin drives longitude.
    rad = math.radians(heading_deg)
    delta_lat = distance_m / METERS_PER_DEGREE
    # Longitude degrees shrink with cos(latitude); the origin latitude is used for the whole step.
    delta_lon = distance_m / (METERS_PER_DEGREE * math.cos(math.radians(lat)))
    new_lat = min(90.0, max(-90.0, lat + delta_lat * math.cos(rad)))
    return new_lat, normalize_lon(lon + delta_lon * math.sin(rad))


def planar_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    # Flat bearing in degree space, matching the convention of `move_in_direction`.
    return math.degrees(math.atan2(lon_delta(lon1, lon2), lat2 - lat1))


def interpolate(lat1: float, lon1: float, lat2: float, lon2: float, fraction: float) -> tuple[float, float]:
    # Straight-line interpolation in lat/lon space; fraction=1.0 lands exactly on the end point.
    lat = lat1 * (1.0 - fraction) + lat2 * fraction
    if abs(lon2 - lon1) <= 180.0:
        return lat, lon1 * (1.0 - fraction) + lon2 * fraction
    # Across the antimeridian, walk the short way round.
    return lat, normalize_lon(lon1 + lon_delta(lon1, lon2) * fraction)
