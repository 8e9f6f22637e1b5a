from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cleanair.routing.model import RouteConfig, RoutePoint
from cleanair.spatial.geodesy import haversine_m

# Average AQI at which the clean-air score reaches 0%.
SCORE_ZERO_AQI = 200.0
LIMITED_CLEAN_AIR_SCORE = 60.0
HIGH_AVERAGE_FRACTION = 0.8
DISTANCE_MISMATCH_FRACTION = 0.2


@dataclass(frozen=True)
class RouteMetrics:
    total_distance_m: float
    average_aqi: float
    max_aqi: float
    clean_air_score: float
    estimated_duration_min: float


def round_half_up(value: float, ndigits: int = 0) -> float:
    # Halves round up (62.5 -> 63), unlike the built-in banker's rounding.
    scale = 10.0**ndigits
    return math.floor(value * scale + 0.5) / scale


def path_length_m(points: Sequence[RoutePoint]) -> float:
    total = 0.0
    for prev, cur in zip(points, points[1:]):
        total += haversine_m(
            prev.coordinates.lat,
            prev.coordinates.lon,
            cur.coordinates.lat,
            cur.coordinates.lon,
        )
    return total


def clean_air_score(average_aqi: float) -> float:
    # Linear 0 AQI -> 100, SCORE_ZERO_AQI -> 0, clamped at both ends.
    return float(np.clip((1.0 - average_aqi / SCORE_ZERO_AQI) * 100.0, 0.0, 100.0))


def estimate_duration_min(total_distance_m: float, activity_type: str, config: RouteConfig | None = None) -> float:
    cfg = config or RouteConfig()
    speed_kmh = float(cfg.speeds_kmh[activity_type])
    return (total_distance_m / 1000.0) / speed_kmh * 60.0


def compute_route_metrics(points: Sequence[RoutePoint], activity_type: str, config: RouteConfig | None = None) -> RouteMetrics:
    if not points:
        raise ValueError("Cannot compute metrics for an empty route")
    aqis = np.array([p.aqi for p in points], dtype=float)
    total = path_length_m(points)
    average = float(aqis.mean())
    return RouteMetrics(
        total_distance_m=total,
        average_aqi=average,
        max_aqi=float(aqis.max()),
        clean_air_score=clean_air_score(average),
        estimated_duration_min=estimate_duration_min(total, activity_type, config),
    )


def build_warnings(metrics: RouteMetrics, *, max_pollution: float, target_distance_m: float) -> list[str]:
    """Advisory strings for quality shortfalls; every check is independent."""
    warnings: list[str] = []
    if metrics.max_aqi > max_pollution:
        warnings.append(f"Route passes through areas with AQI up to {int(round_half_up(metrics.max_aqi))}")
    if metrics.average_aqi > max_pollution * HIGH_AVERAGE_FRACTION:
        warnings.append("Route has higher pollution than preferred")
    if abs(metrics.total_distance_m - target_distance_m) > target_distance_m * DISTANCE_MISMATCH_FRACTION:
        warnings.append(
            f"Actual distance ({metrics.total_distance_m / 1000.0:.1f}km) differs from target "
            f"({target_distance_m / 1000.0:.1f}km)"
        )
    if metrics.clean_air_score < LIMITED_CLEAN_AIR_SCORE:
        warnings.append("Limited clean air options in this area")
    return warnings
