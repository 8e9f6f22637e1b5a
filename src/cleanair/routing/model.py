from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from cleanair.field.model import Coordinate

ActivityType = Literal["walking", "cycling"]
ACTIVITY_TYPES: tuple[str, ...] = ("walking", "cycling")


@dataclass(frozen=True)
class RouteRequest:
    start_location: Coordinate
    distance_km: float
    activity_type: ActivityType = "walking"
    max_pollution: float = 100.0

    def __post_init__(self) -> None:
        if float(self.distance_km) <= 0:
            raise ValueError(f"distance_km must be > 0, got {self.distance_km}")
        if float(self.max_pollution) <= 0:
            raise ValueError(f"max_pollution must be > 0, got {self.max_pollution}")
        if self.activity_type not in ACTIVITY_TYPES:
            raise ValueError(f"activity_type must be one of {list(ACTIVITY_TYPES)}, got {self.activity_type!r}")

    @property
    def target_distance_m(self) -> float:
        return float(self.distance_km) * 1000.0


@dataclass(frozen=True)
class RoutePoint:
    coordinates: Coordinate
    aqi: float
    distance_from_start_m: float


@dataclass(frozen=True)
class GeneratedRoute:
    points: tuple[RoutePoint, ...]
    total_distance_m: float
    average_aqi: float
    max_aqi: float
    clean_air_score: int
    estimated_duration_min: int
    warnings: tuple[str, ...]
    created: datetime


@dataclass(frozen=True)
class RouteConfig:
    max_step_m: float = 150.0
    steps_divisor: float = 20.0
    max_steps_factor: int = 2
    outbound_fraction: float = 0.6
    outbound_search_range_deg: float = 60.0
    return_search_range_deg: float = 45.0
    search_increment_deg: float = 15.0
    direction_penalty_max: float = 10.0
    pollution_tolerance: float = 1.2
    scenic_return_threshold: float = 1.2
    dirty_step_factor: float = 0.7
    heading_wander_deg: float = 15.0
    scenic_curve_deg: float = 30.0
    snap_to_start_m: float = 100.0
    adjust_radius_m: float = 300.0
    adjust_probe_count: int = 8
    speeds_kmh: dict[str, float] = field(default_factory=lambda: {"walking": 5.0, "cycling": 15.0})
