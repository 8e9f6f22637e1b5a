import json
from pathlib import Path

import pytest

from cleanair.cli import main

CATALOG = """id,name,lat,lon,aqi,spread_radius_m
Z-001,ISBT,30.2870,78.0000,80,700
"""


def _project(tmp_path: Path, catalog: str = CATALOG) -> Path:
    cfg = tmp_path / "config" / "default.yaml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text("project:\n  catalogs_dir: data/catalogs\n  log_level: WARNING\n", encoding="utf-8")
    catalogs = tmp_path / "data" / "catalogs"
    catalogs.mkdir(parents=True)
    (catalogs / "pollution_zones.csv").write_text(catalog, encoding="utf-8")
    return cfg


def test_generate_route_writes_json_and_geojson(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path)
    out = tmp_path / "out" / "route.json"
    geo = tmp_path / "out" / "route.geojson"

    main(
        [
            "generate-route",
            "--config",
            str(cfg),
            "--lat",
            "30.3165",
            "--lon",
            "78.0322",
            "--distance-km",
            "2",
            "--seed",
            "3",
            "--out",
            str(out),
            "--geojson",
            str(geo),
        ]
    )

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["run_meta"]["seed"] == 3
    assert data["run_meta"]["request"]["distance_km"] == 2.0
    assert len(data["route"]["points"]) > 2
    assert json.loads(geo.read_text(encoding="utf-8"))["type"] == "FeatureCollection"
    assert "clean air" in capsys.readouterr().out


def test_sample_aqi_prints_level(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path)
    main(["sample-aqi", "--config", str(cfg), "--lat", "30.2870", "--lon", "78.0000"])
    assert capsys.readouterr().out.startswith("AQI 80.0 (moderate)")


def test_validate_zones_exits_nonzero_on_errors(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path, catalog="id,lat,lon,aqi,spread_radius_m\nZ-001,30.3,78.0,-4,700\n")
    with pytest.raises(SystemExit) as exc:
        main(["validate-zones", "--config", str(cfg)])
    assert exc.value.code == 1
    assert "'aqi' must be >= 0" in capsys.readouterr().out
