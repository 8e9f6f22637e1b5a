"""
Clean-air loop route generator.

`generate_optimized_route` stitches an outbound leg and a return leg into a
closed loop around the start, then measures it. It never fails for a legal
request: pollution it could not avoid shows up as advisory warnings.

Randomness (initial heading, heading wander) comes from an injectable
`random.Random`, so callers pass a seeded instance when they need repeatable
routes.
"""

from __future__ import annotations

import logging
import random
from dataclasses import fields
from datetime import datetime, timezone
from typing import Any, Sequence

from cleanair.field.model import PollutionZone
from cleanair.routing.metrics import build_warnings, compute_route_metrics, round_half_up
from cleanair.routing.model import ACTIVITY_TYPES, GeneratedRoute, RouteConfig, RoutePoint, RouteRequest
from cleanair.routing.outbound import generate_outbound, step_size_m
from cleanair.routing.return_path import generate_return_route

logger = logging.getLogger(__name__)

_INT_KEYS = {"max_steps_factor", "adjust_probe_count"}
_POSITIVE_KEYS = {
    "max_step_m",
    "steps_divisor",
    "max_steps_factor",
    "search_increment_deg",
    "pollution_tolerance",
    "scenic_return_threshold",
    "dirty_step_factor",
    "adjust_radius_m",
    "adjust_probe_count",
}


def build_route_config(settings: dict[str, Any]) -> RouteConfig:
    """
    Build a `RouteConfig` from the `routing` settings section.
    Keys that are absent keep their defaults.
    """
    raw = dict(settings.get("routing", {}) or {})
    known = {f.name for f in fields(RouteConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown routing settings: {unknown}")

    values: dict[str, Any] = {}
    for key, value in raw.items():
        if key == "speeds_kmh":
            speeds = {str(k): float(v) for k, v in (value or {}).items()}
            missing = [a for a in ACTIVITY_TYPES if a not in speeds]
            if missing:
                raise ValueError(f"routing.speeds_kmh is missing activity types: {missing}")
            if any(v <= 0 for v in speeds.values()):
                raise ValueError("routing.speeds_kmh values must be > 0")
            values[key] = speeds
            continue
        values[key] = int(value) if key in _INT_KEYS else float(value)
        if key in _POSITIVE_KEYS and values[key] <= 0:
            raise ValueError(f"routing.{key} must be > 0")
    return RouteConfig(**values)


def _round_point(point: RoutePoint) -> RoutePoint:
    return RoutePoint(
        coordinates=point.coordinates,
        aqi=round_half_up(point.aqi, 1),
        distance_from_start_m=point.distance_from_start_m,
    )


def generate_optimized_route(
    request: RouteRequest,
    zones: Sequence[PollutionZone],
    *,
    config: RouteConfig | None = None,
    rng: random.Random | None = None,
) -> GeneratedRoute:
    cfg = config or RouteConfig()
    rand = rng or random.Random()
    # Work on a private snapshot; the caller's zone collection may keep changing.
    snapshot = tuple(zones)

    start = request.start_location.as_tuple()
    target_m = request.target_distance_m
    step_m = step_size_m(target_m, cfg)

    outbound = generate_outbound(
        start,
        target_distance_m=target_m,
        max_pollution=request.max_pollution,
        zones=snapshot,
        config=cfg,
        rng=rand,
    )
    return_points = generate_return_route(
        outbound.end,
        start,
        snapshot,
        request.max_pollution,
        target_m - outbound.distance_m,
        step_m,
        start_offset_m=outbound.distance_m,
        config=cfg,
    )
    points = outbound.points + return_points

    metrics = compute_route_metrics(points, request.activity_type, cfg)
    warnings = build_warnings(metrics, max_pollution=request.max_pollution, target_distance_m=target_m)

    route = GeneratedRoute(
        points=tuple(_round_point(p) for p in points),
        total_distance_m=metrics.total_distance_m,
        average_aqi=round_half_up(metrics.average_aqi, 1),
        max_aqi=round_half_up(metrics.max_aqi, 1),
        clean_air_score=int(round_half_up(metrics.clean_air_score)),
        estimated_duration_min=int(round_half_up(metrics.estimated_duration_min)),
        warnings=tuple(warnings),
        created=datetime.now(timezone.utc),
    )
    logger.info(
        "Generated %s route: points=%d distance=%.0fm avg_aqi=%.1f score=%d warnings=%d",
        request.activity_type,
        len(route.points),
        route.total_distance_m,
        route.average_aqi,
        route.clean_air_score,
        len(route.warnings),
    )
    return route
