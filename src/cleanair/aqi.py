"""
AQI bands and the human-facing labels derived from them.

Cut points are inclusive upper bounds: an AQI of exactly 100 is "moderate".
"""

from __future__ import annotations

from cleanair.field.model import AQI_DISPLAY_CAP

# (upper bound inclusive, level, health index)
_BANDS: list[tuple[float, str, str]] = [
    (50.0, "good", "Excellent"),
    (100.0, "moderate", "Good"),
    (150.0, "poor", "Moderate"),
    (200.0, "severe", "Poor"),
    (300.0, "very poor", "Very Poor"),
]

_RECOMMENDATIONS = {
    "good": "Air quality is ideal for outdoor activities.",
    "moderate": "Acceptable for most people. Sensitive individuals should consider limiting outdoor exertion.",
    "poor": "Sensitive groups should reduce outdoor activities. Others should limit prolonged outdoor exertion.",
    "severe": "Everyone should reduce outdoor activities. Sensitive groups should avoid outdoor activities.",
    "very poor": "Everyone should avoid outdoor activities. Stay indoors and keep windows closed.",
    "hazardous": "Emergency conditions. Everyone should avoid all outdoor activities.",
}


def aqi_level(aqi: float) -> str:
    for upper, level, _ in _BANDS:
        if aqi <= upper:
            return level
    return "hazardous"


def health_index(aqi: float) -> str:
    for upper, _, label in _BANDS:
        if aqi <= upper:
            return label
    return "Hazardous"


def health_recommendation(aqi: float) -> str:
    return _RECOMMENDATIONS.get(aqi_level(aqi), "Monitor air quality conditions.")


def display_aqi(aqi: float) -> float:
    return min(float(aqi), AQI_DISPLAY_CAP)


def route_quality(clean_air_score: float) -> str:
    if clean_air_score >= 80:
        return "excellent"
    if clean_air_score >= 60:
        return "good"
    if clean_air_score >= 40:
        return "fair"
    return "poor"
