from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from cleanair.field.model import PollutionZone
from cleanair.field.sampling import sample_pollution_at
from cleanair.routing.model import RouteConfig
from cleanair.spatial.geodesy import move_in_direction

LatLon = tuple[float, float]


@dataclass(frozen=True)
class DirectionChoice:
    angle_deg: float
    # math.inf when no candidate stayed inside the tolerance band.
    aqi: float

    @property
    def found_clean_option(self) -> bool:
        return math.isfinite(self.aqi)


def _candidate_offsets(search_range_deg: float, increment_deg: float) -> list[float]:
    # Inclusive sweep from -range to +range; integer stepping avoids float drift at the far edge.
    count = int(math.floor((2.0 * search_range_deg) / increment_deg + 1e-9))
    return [-search_range_deg + i * increment_deg for i in range(count + 1)]


def find_best_direction(
    origin: LatLon,
    preferred_angle_deg: float,
    step_m: float,
    zones: Sequence[PollutionZone],
    max_pollution: float,
    search_range_deg: float,
    *,
    config: RouteConfig | None = None,
) -> DirectionChoice:
    """
    Pick the heading within +/- `search_range_deg` of the preferred one that best
    trades cleanliness against straightness.

    Each candidate is scored as sampled AQI plus a deviation penalty growing
    linearly to `direction_penalty_max` at the edge of the cone. Candidates whose
    raw AQI exceeds `max_pollution * pollution_tolerance` are never accepted.
    The returned AQI is the raw sample of the chosen heading. If nothing is
    accepted the preferred heading comes back with `aqi=inf` and the caller
    carries on through the dirty air.
    """
    cfg = config or RouteConfig()
    ceiling = max_pollution * cfg.pollution_tolerance

    best_angle = preferred_angle_deg
    best_aqi = math.inf
    best_score = math.inf
    for offset in _candidate_offsets(search_range_deg, cfg.search_increment_deg):
        angle = preferred_angle_deg + offset
        lat, lon = move_in_direction(origin[0], origin[1], angle, step_m)
        aqi = sample_pollution_at(lat, lon, zones)

        penalty = abs(offset) / search_range_deg * cfg.direction_penalty_max if search_range_deg > 0 else 0.0
        score = aqi + penalty
        if score < best_score and aqi <= ceiling:
            best_score = score
            best_aqi = aqi
            best_angle = angle
    return DirectionChoice(angle_deg=best_angle, aqi=best_aqi)


def adjust_point_for_pollution(
    point: LatLon,
    zones: Sequence[PollutionZone],
    max_pollution: float,
    *,
    config: RouteConfig | None = None,
) -> LatLon:
    """
    Single-ring relaxation: if `point` is too dirty, try evenly spaced probes at a
    fixed radius and return the cleanest one (first minimum in scan order).
    """
    cfg = config or RouteConfig()
    current_aqi = sample_pollution_at(point[0], point[1], zones)
    if current_aqi <= max_pollution:
        return point

    best_point = point
    best_aqi = current_aqi
    spacing = 360.0 / cfg.adjust_probe_count
    for i in range(cfg.adjust_probe_count):
        probe = move_in_direction(point[0], point[1], i * spacing, cfg.adjust_radius_m)
        aqi = sample_pollution_at(probe[0], probe[1], zones)
        if aqi < best_aqi:
            best_aqi = aqi
            best_point = probe
    return best_point
