"""
Pollution zone catalog validation.

Checks that a zone snapshot is usable by the field model:
- schema checks (required columns exist),
- data quality checks (ids unique, coordinates valid, AQI and radius in range).

Instead of raising immediately, we return a structured result containing:
- `errors`: must-fix issues that block route generation,
- `warnings`: suspicious but not fatal issues,
- `stats`: small summaries for reports and debugging.
"""

from __future__ import annotations

# `dataclass` gives us a small immutable "result object" without boilerplate.
from dataclasses import dataclass
# Typing helpers keep function signatures readable.
from typing import Any, Iterable

# pandas is our table container; it also provides NA detection utilities.
import pandas as pd

from cleanair.field.model import AQI_DISPLAY_CAP

REQUIRED_COLUMNS = ["id", "lat", "lon", "aqi", "spread_radius_m"]


@dataclass(frozen=True)
class ZoneCatalogValidationResult:
    # Human-readable error messages that should block route generation.
    errors: list[str]
    # Human-readable warning messages that should be reviewed but may be acceptable.
    warnings: list[str]
    # Small machine-readable stats summaries.
    stats: dict[str, Any]

    @property
    def ok(self) -> bool:
        return len(self.errors) == 0

    def as_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "errors": list(self.errors), "warnings": list(self.warnings), "stats": dict(self.stats)}


def _require_columns(df: pd.DataFrame, required: Iterable[str]) -> list[str]:
    missing = [c for c in required if c not in df.columns]
    return [f"Missing required column: {c}" for c in missing]


def _validate_ids(df: pd.DataFrame) -> list[str]:
    errors: list[str] = []
    # Normalize IDs as trimmed strings so " Z-001 " and "Z-001" are treated the same.
    ids = df["id"].astype("string").str.strip()
    missing = ids.isna() | (ids == "")
    if missing.any():
        errors.append("zones: 'id' contains empty values")
    dup = ids[~missing][ids[~missing].duplicated(keep=False)]
    if not dup.empty:
        # Include a few examples so users can locate the problematic rows quickly.
        examples = ", ".join(sorted(set(dup.tolist()))[:5])
        errors.append(f"zones: 'id' contains duplicates (e.g., {examples})")
    return errors


def _validate_lat_lon(df: pd.DataFrame) -> list[str]:
    errors: list[str] = []
    lat = pd.to_numeric(df["lat"], errors="coerce")
    lon = pd.to_numeric(df["lon"], errors="coerce")
    if lat.isna().any() or lon.isna().any():
        errors.append("zones: invalid lat/lon (non-numeric or missing)")
    # Global WGS84 bounds are hard errors because they indicate definitely-wrong data.
    if (lat < -90).any() or (lat > 90).any() or (lon < -180).any() or (lon > 180).any():
        errors.append("zones: lat/lon out of valid world bounds")
    return errors


def _validate_field_values(df: pd.DataFrame) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []
    aqi = pd.to_numeric(df["aqi"], errors="coerce")
    radius = pd.to_numeric(df["spread_radius_m"], errors="coerce")

    if aqi.isna().any():
        errors.append("zones: 'aqi' contains non-numeric or missing values")
    if (aqi < 0).any():
        errors.append("zones: 'aqi' must be >= 0")
    # The field itself is open-ended; values above the display cap are only suspicious.
    if (aqi > AQI_DISPLAY_CAP).any():
        warnings.append(f"zones: some 'aqi' values exceed the display cap of {AQI_DISPLAY_CAP:.0f}")

    if radius.isna().any():
        errors.append("zones: 'spread_radius_m' contains non-numeric or missing values")
    if (radius <= 0).any():
        errors.append("zones: 'spread_radius_m' must be > 0")
    return errors, warnings


def validate_zones_catalog(zones: pd.DataFrame) -> ZoneCatalogValidationResult:
    errors: list[str] = []
    warnings: list[str] = []

    errors.extend(_require_columns(zones, REQUIRED_COLUMNS))
    if errors:
        # Early return avoids confusing downstream KeyErrors when required columns are missing.
        return ZoneCatalogValidationResult(errors=errors, warnings=warnings, stats={})

    if zones.empty:
        warnings.append("zones: catalog is empty; routes will use the baseline fallback everywhere")

    errors.extend(_validate_ids(zones))
    errors.extend(_validate_lat_lon(zones))
    e, w = _validate_field_values(zones)
    errors.extend(e)
    warnings.extend(w)

    aqi = pd.to_numeric(zones["aqi"], errors="coerce")
    stats = {
        "rows": int(len(zones)),
        "aqi_min": float(aqi.min()) if aqi.notna().any() else None,
        "aqi_max": float(aqi.max()) if aqi.notna().any() else None,
        "aqi_mean": float(aqi.mean()) if aqi.notna().any() else None,
    }
    return ZoneCatalogValidationResult(errors=errors, warnings=warnings, stats=stats)
