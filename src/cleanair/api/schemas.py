from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ZoneIn(BaseModel):
    id: str
    name: str | None = None
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    aqi: float = Field(ge=0.0)
    spread_radius_m: float = Field(gt=0.0)


class RouteRequestIn(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    distance_km: float = Field(default=5.0, gt=0.0, le=20.0)
    activity_type: Literal["walking", "cycling"] = "walking"
    max_pollution: float = Field(default=100.0, gt=0.0)
    seed: int | None = None
    # Inline zones replace the catalog snapshot for this request only.
    zones: list[ZoneIn] | None = None


class RoutePointOut(BaseModel):
    lat: float
    lon: float
    aqi: float
    aqi_level: str
    distance_from_start_m: float


class RouteOut(BaseModel):
    points: list[RoutePointOut]
    total_distance_m: float
    average_aqi: float
    max_aqi: float
    clean_air_score: int = Field(ge=0, le=100)
    quality: str
    estimated_duration_min: int
    warnings: list[str] = Field(default_factory=list)
    created: str


class AqiSampleOut(BaseModel):
    lat: float
    lon: float
    aqi: float
    level: str
    health_index: str
    recommendation: str
    zones_count: int
