from __future__ import annotations

import os
import random
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.gzip import GZipMiddleware

from cleanair.aqi import aqi_level, health_index, health_recommendation
from cleanair.api.schemas import AqiSampleOut, RouteOut, RouteRequestIn, ZoneIn
from cleanair.catalogs.load import load_zones, load_zones_catalog
from cleanair.catalogs.validators import validate_zones_catalog
from cleanair.export.geojson import zones_geojson
from cleanair.export.summary import route_to_dict
from cleanair.field.model import Coordinate, PollutionZone
from cleanair.field.sampling import sample_pollution
from cleanair.routing.generator import build_route_config, generate_optimized_route
from cleanair.routing.metrics import round_half_up
from cleanair.routing.model import RouteRequest
from cleanair.run_meta import utc_now_iso
from cleanair.settings import load_settings

app = FastAPI(title="Clean Air Routes API", version="0.1.0")
app.add_middleware(GZipMiddleware, minimum_size=1000)

CONFIG_PATH = Path(os.getenv("CLEANAIR_CONFIG", "config/default.yaml")).resolve()
DEFAULT_SCENARIO = os.getenv("CLEANAIR_SCENARIO", "standard")


@lru_cache(maxsize=8)
def _settings_for_scenario(scenario: str) -> dict[str, Any]:
    return load_settings(CONFIG_PATH, scenario=scenario)


def _catalog_zones(settings: dict[str, Any]) -> list[PollutionZone]:
    try:
        return load_zones(settings)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Missing zone catalog: {e.filename}")
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _inline_zones(zones: list[ZoneIn]) -> list[PollutionZone]:
    return [
        PollutionZone(
            id=z.id,
            coordinates=Coordinate(lat=z.lat, lon=z.lon),
            aqi=z.aqi,
            spread_radius_m=z.spread_radius_m,
            name=z.name,
        )
        for z in zones
    ]


@app.get("/health")
def health() -> dict[str, Any]:
    settings = _settings_for_scenario(DEFAULT_SCENARIO)
    catalog = Path(settings["paths"]["catalogs_dir"]) / "pollution_zones.csv"
    return {
        "ok": True,
        "generated_at": utc_now_iso(),
        "config_path": str(CONFIG_PATH),
        "scenario": DEFAULT_SCENARIO,
        "files": {"pollution_zones": catalog.exists()},
    }


@app.get("/control/config")
def control_config(scenario: str | None = None) -> dict[str, Any]:
    settings = _settings_for_scenario(scenario or DEFAULT_SCENARIO)
    return {
        "meta": settings.get("_meta", {}),
        "routing": settings.get("routing", {}),
    }


@app.post("/control/zones/validate")
def control_validate_zones(scenario: str | None = None) -> dict[str, Any]:
    settings = _settings_for_scenario(scenario or DEFAULT_SCENARIO)
    try:
        df = load_zones_catalog(settings)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=f"Missing zone catalog: {e.filename}")
    return validate_zones_catalog(df).as_dict()


@app.get("/zones")
def zones(scenario: str | None = None, include_halo: bool = True) -> dict[str, Any]:
    settings = _settings_for_scenario(scenario or DEFAULT_SCENARIO)
    return zones_geojson(_catalog_zones(settings), include_halo=include_halo)


@app.get("/aqi", response_model=AqiSampleOut)
def aqi_at(
    lat: float = Query(..., ge=-90.0, le=90.0),
    lon: float = Query(..., ge=-180.0, le=180.0),
    scenario: str | None = None,
) -> AqiSampleOut:
    settings = _settings_for_scenario(scenario or DEFAULT_SCENARIO)
    snapshot = _catalog_zones(settings)
    value = round_half_up(sample_pollution(Coordinate(lat=lat, lon=lon), snapshot), 1)
    return AqiSampleOut(
        lat=lat,
        lon=lon,
        aqi=value,
        level=aqi_level(value),
        health_index=health_index(value),
        recommendation=health_recommendation(value),
        zones_count=len(snapshot),
    )


@app.post("/routes/generate", response_model=RouteOut)
def generate_route(payload: RouteRequestIn, scenario: str | None = None) -> RouteOut:
    settings = _settings_for_scenario(scenario or DEFAULT_SCENARIO)
    try:
        config = build_route_config(settings)
        request = RouteRequest(
            start_location=Coordinate(lat=payload.lat, lon=payload.lon),
            distance_km=payload.distance_km,
            activity_type=payload.activity_type,
            max_pollution=payload.max_pollution,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    snapshot = _inline_zones(payload.zones) if payload.zones is not None else _catalog_zones(settings)
    rng = random.Random(payload.seed) if payload.seed is not None else None
    route = generate_optimized_route(request, snapshot, config=config, rng=rng)
    return RouteOut(**route_to_dict(route))
