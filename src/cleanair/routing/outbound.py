from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Sequence

from cleanair.field.model import Coordinate, PollutionZone
from cleanair.field.sampling import sample_pollution_at
from cleanair.routing.model import RouteConfig, RoutePoint
from cleanair.routing.search import LatLon, find_best_direction
from cleanair.spatial.geodesy import haversine_m, move_in_direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutboundLeg:
    points: list[RoutePoint]
    end: LatLon
    distance_m: float
    initial_heading_deg: float


def step_size_m(target_distance_m: float, config: RouteConfig) -> float:
    return min(config.max_step_m, target_distance_m / config.steps_divisor)


def max_steps(target_distance_m: float, step_m: float, config: RouteConfig) -> int:
    # Ceiling on total points, generous enough to allow detours.
    return math.ceil(target_distance_m / step_m) * config.max_steps_factor


def generate_outbound(
    start: LatLon,
    *,
    target_distance_m: float,
    max_pollution: float,
    zones: Sequence[PollutionZone],
    config: RouteConfig,
    rng: random.Random,
) -> OutboundLeg:
    """
    Walk away from `start` until `outbound_fraction` of the target is covered.

    Headings come from the directional search around the current heading; each
    new heading then wanders by up to +/- `heading_wander_deg`. Steps that land
    above `max_pollution` are shortened by `dirty_step_factor`.
    """
    step_m = step_size_m(target_distance_m, config)
    limit = max_steps(target_distance_m, step_m, config)
    outbound_target = target_distance_m * config.outbound_fraction

    current = start
    travelled = 0.0
    points = [
        RoutePoint(
            coordinates=Coordinate(*start),
            aqi=sample_pollution_at(start[0], start[1], zones),
            distance_from_start_m=0.0,
        )
    ]

    heading = rng.random() * 360.0
    initial_heading = heading
    while travelled < outbound_target and len(points) < limit:
        choice = find_best_direction(
            current,
            heading,
            step_m,
            zones,
            max_pollution,
            config.outbound_search_range_deg,
            config=config,
        )
        probe = move_in_direction(current[0], current[1], choice.angle_deg, step_m)
        probe_aqi = sample_pollution_at(probe[0], probe[1], zones)

        actual_step = step_m * config.dirty_step_factor if probe_aqi > max_pollution else step_m
        nxt = move_in_direction(current[0], current[1], choice.angle_deg, actual_step)
        travelled += haversine_m(current[0], current[1], nxt[0], nxt[1])
        current = nxt

        heading = choice.angle_deg + (rng.random() - 0.5) * 2.0 * config.heading_wander_deg
        points.append(
            RoutePoint(
                coordinates=Coordinate(*current),
                aqi=sample_pollution_at(current[0], current[1], zones),
                distance_from_start_m=travelled,
            )
        )

    logger.debug(
        "Outbound leg: %d points, %.0fm of %.0fm target (step=%.1fm, limit=%d)",
        len(points),
        travelled,
        outbound_target,
        step_m,
        limit,
    )
    return OutboundLeg(points=points, end=current, distance_m=travelled, initial_heading_deg=initial_heading)
