from __future__ import annotations

from dataclasses import dataclass

# Conventional display cap; the field itself is open-ended.
AQI_DISPLAY_CAP = 500.0


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not -90.0 <= float(self.lat) <= 90.0:
            raise ValueError(f"lat must be within [-90, 90], got {self.lat}")
        if not -180.0 <= float(self.lon) <= 180.0:
            raise ValueError(f"lon must be within [-180, 180], got {self.lon}")

    def as_tuple(self) -> tuple[float, float]:
        return float(self.lat), float(self.lon)


@dataclass(frozen=True)
class PollutionZone:
    id: str
    coordinates: Coordinate
    aqi: float
    spread_radius_m: float
    name: str | None = None

    def __post_init__(self) -> None:
        if float(self.aqi) < 0:
            raise ValueError(f"zone {self.id}: aqi must be >= 0, got {self.aqi}")
        if float(self.spread_radius_m) <= 0:
            raise ValueError(f"zone {self.id}: spread_radius_m must be > 0, got {self.spread_radius_m}")
