"""
Pollution zone catalog loading and normalization.

Zones are kept as a simple CSV so monitoring staff can edit them, version them,
and swap in a fresh sensor snapshot without touching code.

This module only loads and normalizes:
- reading the CSV into a pandas DataFrame,
- canonicalizing column aliases (`latitude`/`lng`/`spreadRadius`, ...),
- coercing numeric columns.

Hard rules (required columns, ranges, unique ids) live in
`cleanair.catalogs.validators`; `load_zones` refuses a catalog with errors.
"""

from __future__ import annotations

# `logging` reports how many zones each snapshot contributed.
import logging
# `Path` keeps file path joins cross-platform and readable.
from pathlib import Path
# `Any` is used because YAML-derived settings are plain dicts.
from typing import Any

# `pandas` is our table engine for CSV I/O and column normalization.
import pandas as pd

from cleanair.catalogs.validators import validate_zones_catalog
from cleanair.field.model import Coordinate, PollutionZone

logger = logging.getLogger(__name__)

ZONES_FILENAME = "pollution_zones.csv"

# Alternate spellings seen in exports from mapping UIs and sensor dashboards.
_ALIASES = {
    "latitude": "lat",
    "longitude": "lon",
    "lng": "lon",
    "spreadRadius": "spread_radius_m",
    "spread_radius": "spread_radius_m",
    "radius_m": "spread_radius_m",
}


def _rename_common_columns(df: pd.DataFrame) -> pd.DataFrame:
    # Only rename an alias when the canonical column is not already present.
    rename = {src: dst for src, dst in _ALIASES.items() if src in df.columns and dst not in df.columns}
    # Avoid creating a new DataFrame when no renames are needed.
    return df.rename(columns=rename) if rename else df


def _coerce_numeric(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    for c in columns:
        # Missing columns are reported by the validator, not here.
        if c not in df.columns:
            continue
        # `errors="coerce"` turns bad inputs into NaN so validation can report them.
        df[c] = pd.to_numeric(df[c], errors="coerce")
    return df


def normalize_zones_frame(df: pd.DataFrame) -> pd.DataFrame:
    df = _rename_common_columns(df.copy())
    # IDs are stable string keys, never numbers.
    for c in ["id", "name"]:
        if c in df.columns:
            df[c] = df[c].astype("string").str.strip()
    return _coerce_numeric(df, ["lat", "lon", "aqi", "spread_radius_m"])


def load_zones_catalog(settings: dict[str, Any]) -> pd.DataFrame:
    # Read the catalogs directory from settings so tests can point at temporary folders.
    catalogs_dir = Path(settings["paths"]["catalogs_dir"])
    path = catalogs_dir / ZONES_FILENAME
    # Let FileNotFoundError propagate; the CLI and API translate it for the user.
    df = pd.read_csv(path)
    return normalize_zones_frame(df)


def zones_from_frame(df: pd.DataFrame) -> list[PollutionZone]:
    """
    Convert a validated zones DataFrame into immutable `PollutionZone` values.
    """
    result = validate_zones_catalog(df)
    if not result.ok:
        raise ValueError("Invalid pollution zone catalog: " + "; ".join(result.errors))

    zones: list[PollutionZone] = []
    for row in df.itertuples(index=False):
        name = getattr(row, "name", None)
        zones.append(
            PollutionZone(
                id=str(row.id),
                coordinates=Coordinate(lat=float(row.lat), lon=float(row.lon)),
                aqi=float(row.aqi),
                spread_radius_m=float(row.spread_radius_m),
                # pandas NA is not a valid display name.
                name=None if name is None or pd.isna(name) else str(name),
            )
        )
    return zones


def load_zones(settings: dict[str, Any]) -> list[PollutionZone]:
    zones = zones_from_frame(load_zones_catalog(settings))
    logger.info("Loaded %d pollution zones from %s", len(zones), settings["paths"]["catalogs_dir"])
    return zones
