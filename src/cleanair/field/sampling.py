"""
Pollution field model.

A query point gets an AQI-like value blended from every zone whose influence
reaches it. Each zone contributes with a weight that falls off linearly inside
its nominal radius and continues as a faint "halo" out to twice the radius:

    d <= r        weight = max(0.10, 1 - d / r)
    r < d <= 2r   weight = max(0.05, 0.3 * (1 - (d - r) / r))
    d > 2r        no contribution

The result is the weighted mean of contributing zone AQIs. When nothing
reaches the point, a distance-decayed value of the nearest zone is used, with
a floor of 30 so "pollution deserts" never read as zero.

This is a smoothing interpolation, not a dispersion model: it never clips or
saturates, and it has no randomness.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
import pandas as pd

from cleanair.field.model import Coordinate, PollutionZone
from cleanair.spatial.geodesy import METERS_PER_DEGREE, haversine_many_m, haversine_pairwise_m

# Fallback used when no zone reaches the query point.
BASELINE_FLOOR_AQI = 30.0
# Stand-in "nearest zone" AQI when the zone list is empty.
DEFAULT_NEAREST_AQI = 50.0
# Distance over which the nearest-zone fallback decays to half strength.
FALLBACK_DECAY_M = 2000.0

INNER_WEIGHT_FLOOR = 0.1
HALO_WEIGHT_FLOOR = 0.05
HALO_WEIGHT_SCALE = 0.3


def zone_weight(distance_m: float, radius_m: float) -> float:
    """Weight of a single zone at `distance_m` from its center (0.0 when out of reach)."""
    if distance_m <= radius_m:
        return max(INNER_WEIGHT_FLOOR, 1.0 - distance_m / radius_m)
    if distance_m <= 2.0 * radius_m:
        return max(HALO_WEIGHT_FLOOR, HALO_WEIGHT_SCALE * (1.0 - (distance_m - radius_m) / radius_m))
    return 0.0


def _zone_weights(distances_m: np.ndarray, radii_m: np.ndarray) -> np.ndarray:
    # Vectorized `zone_weight`; keep the two in lockstep.
    inner = np.maximum(INNER_WEIGHT_FLOOR, 1.0 - distances_m / radii_m)
    halo = np.maximum(HALO_WEIGHT_FLOOR, HALO_WEIGHT_SCALE * (1.0 - (distances_m - radii_m) / radii_m))
    return np.where(
        distances_m <= radii_m,
        inner,
        np.where(distances_m <= 2.0 * radii_m, halo, 0.0),
    )


def _zone_arrays(zones: Sequence[PollutionZone]) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    lats = np.fromiter((z.coordinates.lat for z in zones), dtype=float, count=len(zones))
    lons = np.fromiter((z.coordinates.lon for z in zones), dtype=float, count=len(zones))
    aqis = np.fromiter((z.aqi for z in zones), dtype=float, count=len(zones))
    radii = np.fromiter((z.spread_radius_m for z in zones), dtype=float, count=len(zones))
    return lats, lons, aqis, radii


def nearest_zone_fallback(nearest_aqi: float, nearest_distance_m: float) -> float:
    factor = min(1.0, nearest_distance_m / FALLBACK_DECAY_M)
    return max(BASELINE_FLOOR_AQI, nearest_aqi * (1.0 - factor * 0.5))


def sample_pollution_at(lat: float, lon: float, zones: Sequence[PollutionZone]) -> float:
    if not zones:
        return nearest_zone_fallback(DEFAULT_NEAREST_AQI, math.inf)

    lats, lons, aqis, radii = _zone_arrays(zones)
    distances = haversine_many_m(lat, lon, lats, lons)
    weights = _zone_weights(distances, radii)
    weight_sum = float(weights.sum())

    if weight_sum == 0.0:
        # First minimum wins, so ties resolve to the earliest zone in the snapshot.
        nearest = int(np.argmin(distances))
        return nearest_zone_fallback(float(aqis[nearest]), float(distances[nearest]))
    return float((aqis * weights).sum() / weight_sum)


def sample_pollution(point: Coordinate, zones: Sequence[PollutionZone]) -> float:
    """
    Interpolated AQI at `point` for a read-only snapshot of `zones`.
    """
    return sample_pollution_at(float(point.lat), float(point.lon), zones)


def sample_pollution_many(lats: np.ndarray, lons: np.ndarray, zones: Sequence[PollutionZone]) -> np.ndarray:
    """
    Vectorized `sample_pollution_at` over many query points at once.
    """
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    if not zones:
        return np.full(lats.shape, nearest_zone_fallback(DEFAULT_NEAREST_AQI, math.inf))

    z_lats, z_lons, aqis, radii = _zone_arrays(zones)
    # (points, zones)
    distances = haversine_pairwise_m(lats, lons, z_lats, z_lons)
    weights = _zone_weights(distances, radii[None, :])
    weight_sum = weights.sum(axis=1)

    nearest = np.argmin(distances, axis=1)
    nearest_distance = distances[np.arange(distances.shape[0]), nearest]
    factor = np.minimum(1.0, nearest_distance / FALLBACK_DECAY_M)
    fallback = np.maximum(BASELINE_FLOOR_AQI, aqis[nearest] * (1.0 - factor * 0.5))

    blended = (weights * aqis[None, :]).sum(axis=1) / np.where(weight_sum > 0.0, weight_sum, 1.0)
    return np.where(weight_sum > 0.0, blended, fallback)


def sample_grid(
    *,
    min_lat: float,
    min_lon: float,
    max_lat: float,
    max_lon: float,
    zones: Sequence[PollutionZone],
    cell_size_m: float = 250.0,
) -> pd.DataFrame:
    """
    Sample the field on a regular grid of cell centers (for heatmap display).
    """
    if cell_size_m <= 0:
        raise ValueError("cell_size_m must be > 0")
    if max_lat <= min_lat or max_lon <= min_lon:
        raise ValueError("Grid bounds must satisfy min < max")

    # Longitude spacing uses the mid latitude so cells are roughly square on the ground.
    mid_lat = (min_lat + max_lat) / 2.0
    d_lat = cell_size_m / METERS_PER_DEGREE
    d_lon = cell_size_m / (METERS_PER_DEGREE * math.cos(math.radians(mid_lat)))

    lat_centers = np.arange(min_lat + d_lat / 2.0, max_lat, d_lat)
    lon_centers = np.arange(min_lon + d_lon / 2.0, max_lon, d_lon)
    rows, cols = np.meshgrid(np.arange(lat_centers.size), np.arange(lon_centers.size), indexing="ij")
    rows = rows.ravel()
    cols = cols.ravel()
    lats = lat_centers[rows]
    lons = lon_centers[cols]

    return pd.DataFrame(
        {
            "cell_id": [f"r{i}c{j}" for i, j in zip(rows, cols)],
            "lat": lats,
            "lon": lons,
            "aqi": np.floor(sample_pollution_many(lats, lons, zones) * 10.0 + 0.5) / 10.0,
        },
        columns=["cell_id", "lat", "lon", "aqi"],
    )
