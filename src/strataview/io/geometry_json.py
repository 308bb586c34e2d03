# src/strataview/io/geometry_json.py
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from strataview.geometry.types import GeometryDescriptor

SCENE_FILENAME = "scene.json"
MANIFEST_FILENAME = "manifest.json"


def _json_default(o: Any) -> Any:
    if isinstance(o, np.generic):
        return o.item()
    if isinstance(o, np.ndarray):
        return o.tolist()
    if isinstance(o, Path):
        return str(o)
    raise TypeError(f"not JSON serializable: {type(o).__name__}")


def write_json_atomic(path: Path, obj: Dict[str, Any], *, indent: int = 2) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(obj, indent=indent, sort_keys=True, ensure_ascii=False, default=_json_default)
    with tempfile.NamedTemporaryFile("w", delete=False, dir=str(path.parent), encoding="utf-8") as tf:
        tf.write(payload)
        tmp = tf.name
    os.replace(tmp, str(path))


def scene_payload(descriptors: Sequence[GeometryDescriptor]) -> Dict[str, Any]:
    items = [d.to_dict() for d in descriptors if not d.is_empty]
    return {"n_objects": len(items), "objects": items}


def write_scene_json(
    out_dir: Path,
    descriptors: Sequence[GeometryDescriptor],
    manifest: Dict[str, Any],
) -> Tuple[Path, Path]:
    """
    Write scene.json (every non-empty descriptor) and manifest.json into out_dir.
    Both files are replaced atomically. Returns (scene_path, manifest_path).
    """
    out_dir = Path(out_dir)
    scene_path = out_dir / SCENE_FILENAME
    manifest_path = out_dir / MANIFEST_FILENAME
    write_json_atomic(scene_path, scene_payload(descriptors), indent=0)
    write_json_atomic(manifest_path, manifest)
    return scene_path, manifest_path


def read_scene_json(path: Path) -> Dict[str, Any]:
    return json.loads(Path(path).read_text(encoding="utf-8"))
