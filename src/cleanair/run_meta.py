from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from uuid import uuid4


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def new_run_id() -> str:
    return uuid4().hex


def json_hash(data: Any) -> str:
    """
    Hash a JSON-serializable structure deterministically.
    """
    raw = json.dumps(data, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


def config_fingerprint(settings: dict[str, Any]) -> dict[str, Any]:
    # Only knobs that change route shape; paths and secrets stay out.
    meta = settings.get("_meta", {}) or {}
    return {
        "scenario": meta.get("scenario"),
        "config_path": meta.get("config_path"),
        "routing": settings.get("routing", {}),
    }


def build_run_meta(*, settings: dict[str, Any], request: dict[str, Any], seed: int | None) -> dict[str, Any]:
    fingerprint = config_fingerprint(settings)
    return {
        "run_id": new_run_id(),
        "generated_at": utc_now_iso(),
        "scenario": fingerprint.get("scenario"),
        "config_hash": json_hash(fingerprint),
        "config_fingerprint": fingerprint,
        "request": request,
        "seed": seed,
    }


def write_json(path: Path, data: Any) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
