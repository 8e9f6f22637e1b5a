import argparse
import json
import random
from pathlib import Path

from cleanair.settings import load_settings


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default="config/default.yaml", help="Path to config YAML")
    common.add_argument("--scenario", default="standard", help="Scenario name (config/scenarios/<name>.yaml)")

    parser = argparse.ArgumentParser(prog="cleanair", description="Clean air route planner CLI", parents=[common])

    sub = parser.add_subparsers(dest="command", required=True)
    gen = sub.add_parser("generate-route", parents=[common], help="Generate a clean-air loop route")
    gen.add_argument("--lat", type=float, required=True, help="Start latitude")
    gen.add_argument("--lon", type=float, required=True, help="Start longitude")
    gen.add_argument("--distance-km", type=float, default=5.0, help="Target round-trip distance in km")
    gen.add_argument("--activity", choices=["walking", "cycling"], default="walking", help="Activity type")
    gen.add_argument("--max-pollution", type=float, default=100.0, help="Maximum tolerable AQI")
    gen.add_argument("--seed", type=int, default=None, help="Seed for repeatable routes")
    gen.add_argument("--out", default=None, help="Write route JSON to this path")
    gen.add_argument("--geojson", default=None, help="Write route GeoJSON to this path")
    sample = sub.add_parser("sample-aqi", parents=[common], help="Sample the pollution field at a point")
    sample.add_argument("--lat", type=float, required=True)
    sample.add_argument("--lon", type=float, required=True)
    sub.add_parser("validate-zones", parents=[common], help="Validate the pollution zone catalog")
    sub.add_parser("api-info", parents=[common], help="Print API run instructions")
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = load_settings(Path(args.config), scenario=args.scenario)

    if args.command == "api-info":
        host = settings.get("api", {}).get("host", "127.0.0.1")
        port = settings.get("api", {}).get("port", 8000)
        print(f"Run: uvicorn cleanair.api.main:app --reload --host {host} --port {port}")
        return

    if args.command == "validate-zones":
        from cleanair.catalogs.load import load_zones_catalog
        from cleanair.catalogs.validators import validate_zones_catalog

        result = validate_zones_catalog(load_zones_catalog(settings))
        print(json.dumps(result.as_dict(), ensure_ascii=False, indent=2))
        if not result.ok:
            raise SystemExit(1)
        return

    if args.command == "sample-aqi":
        from cleanair.aqi import aqi_level, health_recommendation
        from cleanair.catalogs.load import load_zones
        from cleanair.field.model import Coordinate
        from cleanair.field.sampling import sample_pollution

        value = sample_pollution(Coordinate(lat=args.lat, lon=args.lon), load_zones(settings))
        print(f"AQI {value:.1f} ({aqi_level(value)}): {health_recommendation(value)}")
        return

    if args.command == "generate-route":
        from cleanair.catalogs.load import load_zones
        from cleanair.export.geojson import route_geojson
        from cleanair.export.summary import route_to_dict
        from cleanair.field.model import Coordinate
        from cleanair.routing.generator import build_route_config, generate_optimized_route
        from cleanair.routing.model import RouteRequest
        from cleanair.run_meta import build_run_meta, write_json

        request = RouteRequest(
            start_location=Coordinate(lat=args.lat, lon=args.lon),
            distance_km=args.distance_km,
            activity_type=args.activity,
            max_pollution=args.max_pollution,
        )
        rng = random.Random(args.seed) if args.seed is not None else None
        route = generate_optimized_route(request, load_zones(settings), config=build_route_config(settings), rng=rng)
        summary = route_to_dict(route)

        if args.out:
            meta = build_run_meta(
                settings=settings,
                request={
                    "lat": args.lat,
                    "lon": args.lon,
                    "distance_km": args.distance_km,
                    "activity_type": args.activity,
                    "max_pollution": args.max_pollution,
                },
                seed=args.seed,
            )
            write_json(Path(args.out), {"run_meta": meta, "route": summary})
        if args.geojson:
            write_json(Path(args.geojson), route_geojson(route))

        print(
            f"{summary['total_distance_m'] / 1000.0:.2f}km, avg AQI {summary['average_aqi']}, "
            f"clean air {summary['clean_air_score']}% ({summary['quality']}), ~{summary['estimated_duration_min']} min"
        )
        for w in summary["warnings"]:
            print(f"warning: {w}")
        return

    raise SystemExit(f"Unknown command: {args.command}")
