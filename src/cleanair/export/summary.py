from __future__ import annotations

from typing import Any

from cleanair.aqi import aqi_level, route_quality
from cleanair.routing.model import GeneratedRoute


def route_to_dict(route: GeneratedRoute) -> dict[str, Any]:
    return {
        "points": [
            {
                "lat": float(p.coordinates.lat),
                "lon": float(p.coordinates.lon),
                "aqi": float(p.aqi),
                "aqi_level": aqi_level(p.aqi),
                "distance_from_start_m": float(p.distance_from_start_m),
            }
            for p in route.points
        ],
        "total_distance_m": float(route.total_distance_m),
        "average_aqi": float(route.average_aqi),
        "max_aqi": float(route.max_aqi),
        "clean_air_score": int(route.clean_air_score),
        "quality": route_quality(route.clean_air_score),
        "estimated_duration_min": int(route.estimated_duration_min),
        "warnings": list(route.warnings),
        "created": route.created.replace(microsecond=0).isoformat(),
    }
