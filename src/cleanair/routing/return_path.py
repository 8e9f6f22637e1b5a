"""
Return leg synthesis: bring the path back to the start.

Two shapes are produced depending on the distance budget left after the
outbound leg:
- direct: a straight interpolation back, each waypoint nudged out of dirty
  air when possible;
- scenic: a single smooth S-curve detour that spends the slack, still
  steering through the directional search at every step.

Both end with a snap to the exact start when the last waypoint is still
farther than `snap_to_start_m` from it.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from cleanair.field.model import Coordinate, PollutionZone
from cleanair.field.sampling import sample_pollution_at
from cleanair.routing.model import RouteConfig, RoutePoint
from cleanair.routing.search import LatLon, adjust_point_for_pollution, find_best_direction
from cleanair.spatial.geodesy import haversine_m, interpolate, move_in_direction, planar_bearing_deg

logger = logging.getLogger(__name__)


def _route_point(point: LatLon, zones: Sequence[PollutionZone], distance_m: float) -> RoutePoint:
    return RoutePoint(
        coordinates=Coordinate(*point),
        aqi=sample_pollution_at(point[0], point[1], zones),
        distance_from_start_m=distance_m,
    )


def _direct_return(
    origin: LatLon,
    destination: LatLon,
    *,
    direct_distance_m: float,
    zones: Sequence[PollutionZone],
    max_pollution: float,
    step_m: float,
    start_offset_m: float,
    config: RouteConfig,
) -> tuple[list[RoutePoint], LatLon, float]:
    steps = max(3, math.ceil(direct_distance_m / step_m))
    points: list[RoutePoint] = []
    previous = origin
    travelled = start_offset_m
    for i in range(1, steps + 1):
        waypoint = interpolate(origin[0], origin[1], destination[0], destination[1], i / steps)
        waypoint = adjust_point_for_pollution(waypoint, zones, max_pollution, config=config)
        travelled += haversine_m(previous[0], previous[1], waypoint[0], waypoint[1])
        points.append(_route_point(waypoint, zones, travelled))
        previous = waypoint
    return points, previous, travelled


def _scenic_return(
    origin: LatLon,
    destination: LatLon,
    *,
    direct_distance_m: float,
    remaining_distance_m: float,
    zones: Sequence[PollutionZone],
    max_pollution: float,
    step_m: float,
    start_offset_m: float,
    config: RouteConfig,
) -> tuple[list[RoutePoint], LatLon, float]:
    detour_steps = math.ceil((remaining_distance_m - direct_distance_m) / step_m)
    total_steps = math.ceil(direct_distance_m / step_m) + detour_steps
    # The curve bends around the bearing from where the return leg began.
    base_bearing = planar_bearing_deg(origin[0], origin[1], destination[0], destination[1])

    points: list[RoutePoint] = []
    current = origin
    travelled = start_offset_m
    for i in range(1, total_steps + 1):
        progress = i / total_steps
        target_heading = base_bearing + math.sin(progress * math.pi) * config.scenic_curve_deg
        choice = find_best_direction(
            current,
            target_heading,
            step_m,
            zones,
            max_pollution,
            config.return_search_range_deg,
            config=config,
        )
        nxt = move_in_direction(current[0], current[1], choice.angle_deg, step_m)
        travelled += haversine_m(current[0], current[1], nxt[0], nxt[1])
        current = nxt
        points.append(_route_point(current, zones, travelled))
    return points, current, travelled


def generate_return_route(
    origin: LatLon,
    destination: LatLon,
    zones: Sequence[PollutionZone],
    max_pollution: float,
    remaining_distance_m: float,
    step_m: float,
    *,
    start_offset_m: float = 0.0,
    config: RouteConfig | None = None,
) -> list[RoutePoint]:
    """
    Waypoints from (excluding) `origin` back to `destination`.

    `start_offset_m` is the distance already covered before the return leg, so
    `distance_from_start_m` keeps counting along the whole route.
    """
    cfg = config or RouteConfig()
    direct_distance = haversine_m(origin[0], origin[1], destination[0], destination[1])

    kwargs = dict(
        direct_distance_m=direct_distance,
        zones=zones,
        max_pollution=max_pollution,
        step_m=step_m,
        start_offset_m=start_offset_m,
        config=cfg,
    )
    if remaining_distance_m <= direct_distance * cfg.scenic_return_threshold:
        shape = "direct"
        points, last, travelled = _direct_return(origin, destination, **kwargs)
    else:
        shape = "scenic"
        points, last, travelled = _scenic_return(
            origin,
            destination,
            remaining_distance_m=remaining_distance_m,
            **kwargs,
        )

    gap = haversine_m(last[0], last[1], destination[0], destination[1])
    if gap > cfg.snap_to_start_m:
        points.append(_route_point(destination, zones, travelled + gap))

    logger.debug(
        "Return leg (%s): %d points, direct=%.0fm remaining=%.0fm snapped=%s",
        shape,
        len(points),
        direct_distance,
        remaining_distance_m,
        gap > cfg.snap_to_start_m,
    )
    return points
