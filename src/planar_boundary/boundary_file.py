"""
Boundary set file I/O (.boundary.json)

A JSON document holding the plane, the plane frame and the 2D boundaries.
Downstream path planners read the polygons and use the frame to place their
results back in world coordinates.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any

import numpy as np

from .geometry import Plane, PlaneFrame
from .mesh_importer import BoundarySet


BOUNDARY_FORMAT = "planar_boundary_set"
BOUNDARY_VERSION = 1


class BoundaryFormatError(RuntimeError):
    pass


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def boundary_set_to_dict(boundary_set: BoundarySet) -> dict[str, Any]:
    return {
        "plane": {
            "normal": boundary_set.plane.normal.tolist(),
            "offset": float(boundary_set.plane.offset),
        },
        "frame": {
            "rotation": boundary_set.plane_frame.rotation.tolist(),
            "translation": boundary_set.plane_frame.translation.tolist(),
        },
        "boundaries": [np.asarray(b, dtype=np.float64).tolist() for b in boundary_set.boundaries],
    }


def boundary_set_from_dict(doc: dict[str, Any]) -> BoundarySet:
    try:
        plane_doc = doc["plane"]
        frame_doc = doc["frame"]
        plane = Plane(normal=np.asarray(plane_doc["normal"], dtype=np.float64), offset=float(plane_doc["offset"]))
        frame = PlaneFrame(
            rotation=np.asarray(frame_doc["rotation"], dtype=np.float64),
            translation=np.asarray(frame_doc["translation"], dtype=np.float64),
        )
        boundaries = tuple(
            np.asarray(b, dtype=np.float64).reshape(-1, 2) for b in doc["boundaries"]
        )
    except (KeyError, TypeError, ValueError) as e:
        raise BoundaryFormatError(f"Invalid boundary document: {e}") from e
    return BoundarySet(plane=plane, plane_frame=frame, boundaries=boundaries)


def save_boundary_set(
    path: str | Path,
    boundary_set: BoundarySet,
    *,
    meta: dict[str, Any] | None = None,
) -> str:
    """
    Save a boundary set.

    Args:
        path: destination path (usually ends with .boundary.json)
        boundary_set: calculation result
        meta: optional metadata (e.g., source mesh)
    """
    out_path = Path(path)
    doc: dict[str, Any] = {
        "format": BOUNDARY_FORMAT,
        "version": BOUNDARY_VERSION,
        "saved_at": _utc_now_iso(),
        "meta": dict(meta or {}),
        **boundary_set_to_dict(boundary_set),
    }

    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    return str(out_path)


def load_boundary_set(path: str | Path) -> tuple[BoundarySet, dict[str, Any]]:
    """
    Load a boundary set.

    Returns:
        (boundary_set, meta)
    """
    in_path = Path(path)
    if not in_path.exists():
        raise FileNotFoundError(str(in_path))

    try:
        doc = json.loads(in_path.read_text(encoding="utf-8", errors="replace"))
    except json.JSONDecodeError as e:
        raise BoundaryFormatError(f"Invalid JSON: {e}") from e

    if not isinstance(doc, dict):
        raise BoundaryFormatError("Invalid boundary document (expected JSON object)")

    fmt = str(doc.get("format", "")).strip()
    ver = doc.get("version", None)
    if fmt != BOUNDARY_FORMAT:
        raise BoundaryFormatError(f"Unsupported boundary format: {fmt!r}")
    if ver != BOUNDARY_VERSION:
        raise BoundaryFormatError(f"Unsupported boundary version: {ver!r}")

    meta = doc.get("meta", {})
    if meta is None:
        meta = {}
    elif not isinstance(meta, dict):
        meta = {"_raw": meta}

    return boundary_set_from_dict(doc), meta
