from pathlib import Path

import pandas as pd
import pytest

from cleanair.catalogs.load import load_zones, load_zones_catalog, zones_from_frame
from cleanair.catalogs.validators import validate_zones_catalog


def _write_csv(path: Path, text: str) -> None:
    path.write_text(text.strip() + "\n", encoding="utf-8")


def test_load_zones_normalizes_aliases(tmp_path: Path) -> None:
    catalogs_dir = tmp_path / "catalogs"
    catalogs_dir.mkdir(parents=True, exist_ok=True)
    _write_csv(
        catalogs_dir / "pollution_zones.csv",
        """
id,name,latitude,lng,aqi,spreadRadius
 Z-001 ,Clock Tower,30.3165,78.0322,98,450
Z-002,,30.3255,78.0422,156,700
""",
    )
    settings = {"paths": {"catalogs_dir": str(catalogs_dir)}}

    df = load_zones_catalog(settings)
    assert {"lat", "lon", "spread_radius_m"} <= set(df.columns)
    assert df.loc[0, "id"] == "Z-001"

    zones = load_zones(settings)
    assert [z.id for z in zones] == ["Z-001", "Z-002"]
    assert zones[0].coordinates.lat == pytest.approx(30.3165)
    assert zones[0].spread_radius_m == 450.0
    assert zones[0].name == "Clock Tower"
    assert zones[1].name is None


def test_missing_catalog_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_zones_catalog({"paths": {"catalogs_dir": str(tmp_path)}})


def test_validate_reports_bad_rows() -> None:
    df = pd.DataFrame(
        [
            {"id": "Z1", "lat": 30.0, "lon": 78.0, "aqi": -5, "spread_radius_m": 100},
            {"id": "Z1", "lat": 95.0, "lon": 78.0, "aqi": 600, "spread_radius_m": 0},
        ]
    )
    result = validate_zones_catalog(df)
    assert not result.ok
    assert any("duplicates" in e for e in result.errors)
    assert any("world bounds" in e for e in result.errors)
    assert any("'aqi' must be >= 0" in e for e in result.errors)
    assert any("'spread_radius_m' must be > 0" in e for e in result.errors)
    assert any("display cap" in w for w in result.warnings)
    assert result.stats["rows"] == 2


def test_validate_missing_columns_short_circuits() -> None:
    result = validate_zones_catalog(pd.DataFrame([{"id": "Z1", "lat": 30.0}]))
    assert "Missing required column: lon" in result.errors
    assert result.stats == {}


def test_zones_from_invalid_frame_raises() -> None:
    df = pd.DataFrame([{"id": "Z1", "lat": 30.0, "lon": 78.0, "aqi": 50, "spread_radius_m": -1}])
    with pytest.raises(ValueError):
        zones_from_frame(df)
