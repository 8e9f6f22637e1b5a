"""
Settings bootstrap for the clean-air route planner.

`load_settings()` is the single entry point for the CLI and the API:
- `config/default.yaml` is the base,
- `config/scenarios/<name>.yaml` (optional) overrides it key by key,
- runtime directories are resolved under the project root and created,
- the `routing:` section is turned into a `RouteConfig` once, up front.

The last step means a scenario with a typo or a non-positive step fails when
it is loaded, not halfway through the first route request.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

# PyYAML keeps the config human-editable.
import yaml

from cleanair.log import configure_logging
from cleanair.routing.generator import build_route_config

# Runtime directories and their defaults relative to the project root.
_PATH_DEFAULTS = {
    "catalogs_dir": "data/catalogs",
    "outputs_dir": "data/outputs",
    "logs_dir": "logs",
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        # A scenario can override a single routing knob without restating the section.
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_mapping(path: Path) -> dict[str, Any] | None:
    """Parse a YAML mapping, or return None when the file does not exist."""
    if not path.is_file():
        return None
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML must be a mapping: {path}")
    return data


def project_root(config_path: Path) -> Path:
    config_dir = config_path.resolve().parent
    # config/default.yaml lives one level below the project root.
    return config_dir.parent if config_dir.name == "config" else config_dir


def _runtime_paths(root: Path, project: dict[str, Any]) -> dict[str, Path]:
    paths = {"root": root}
    for key, default in _PATH_DEFAULTS.items():
        paths[key] = root / project.get(key, default)
        paths[key].mkdir(parents=True, exist_ok=True)
    return paths


def _check_routing(settings: dict[str, Any], sources: list[Path]) -> None:
    routing = settings.get("routing", {})
    where = ", ".join(str(p) for p in sources)
    if routing is not None and not isinstance(routing, dict):
        raise ValueError(f"'routing' must be a mapping ({where})")
    try:
        build_route_config(settings)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid routing settings ({where}): {e}") from e


def load_settings(config_path: Path, scenario: str) -> dict[str, Any]:
    """
    Load base config, apply the scenario override and bootstrap logging.

    Raises `ValueError` when either file is not a mapping or the merged
    `routing:` section does not build a valid `RouteConfig`.
    """
    config_path = config_path.resolve()
    root = project_root(config_path)
    scenario_path = root / "config" / "scenarios" / f"{scenario}.yaml"

    base = _read_mapping(config_path) or {}
    override = _read_mapping(scenario_path)
    settings = _deep_merge(base, override or {})

    sources = [config_path] + ([scenario_path] if override is not None else [])
    _check_routing(settings, sources)

    project = settings.setdefault("project", {})
    paths = _runtime_paths(root, project)
    logger = configure_logging(
        paths["logs_dir"],
        level=project.get("log_level", "INFO"),
        max_bytes=int(project.get("log_max_bytes", 1_000_000)),
        backup_count=int(project.get("log_backup_count", 3)),
    )

    settings["_meta"] = {
        "config_path": str(config_path),
        "scenario": scenario,
        "scenario_path": str(scenario_path),
        "scenario_found": override is not None,
    }
    # Strings keep settings JSON-serializable for run metadata.
    settings["paths"] = {k: str(v) for k, v in paths.items()}
    logger.info(
        "Loaded settings: config=%s scenario=%s%s",
        config_path,
        scenario,
        "" if override is not None else " (no override file)",
    )
    return settings
