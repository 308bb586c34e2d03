from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest

from strataview.geometry.types import GeometryDescriptor
from strataview.io.geometry_json import read_scene_json, scene_payload, write_json_atomic, write_scene_json
from strataview.viz.preview_map import plot_plan_view


def _tube(name: str, x: float, z: float) -> GeometryDescriptor:
    return GeometryDescriptor(
        kind="tube",
        name=f"well:{name}",
        positions=[[x, 0.0, z], [x, -100.0, z]],
        metadata={"label": name},
    )


def test_descriptor_rejects_color_count_mismatch() -> None:
    with pytest.raises(ValueError):
        GeometryDescriptor(kind="points", name="horizon:top", positions=np.zeros((3, 3)), colors=np.zeros((2, 3)))


def test_descriptor_to_dict_flattens_arrays() -> None:
    d = GeometryDescriptor(
        kind="mesh",
        name="fault:f1.csv",
        positions=[[0, 0, 0], [1, 0, 0], [0, 1, 0]],
        indices=[0, 1, 2],
    )
    out = d.to_dict()
    assert out["kind"] == "mesh"
    assert out["positions"] == [0.0, 0.0, 0.0, 1.0, 0.0, 0.0, 0.0, 1.0, 0.0]
    assert out["indices"] == [0, 1, 2]
    assert "colors" not in out
    assert "metadata" not in out


def test_scene_payload_skips_empty_descriptors() -> None:
    empty = GeometryDescriptor(kind="points", name="horizon:empty", positions=np.zeros((0, 3)))
    payload = scene_payload([empty, _tube("A-1", 1.0, 2.0)])
    assert payload["n_objects"] == 1
    assert payload["objects"][0]["name"] == "well:A-1"


def test_write_scene_json_replaces_files(tmp_path: Path) -> None:
    out = tmp_path / "out"
    scene, manifest = write_scene_json(out, [_tube("A-1", 1.0, 2.0)], {"n_wells": 1, "path": tmp_path})
    scene2, _ = write_scene_json(out, [_tube("A-1", 1.0, 2.0), _tube("B-2", 3.0, 4.0)], {"n_wells": 2})

    assert scene == scene2
    assert read_scene_json(scene)["n_objects"] == 2
    assert json.loads(manifest.read_text(encoding="utf-8")) == {"n_wells": 2}
    assert sorted(p.name for p in out.iterdir()) == ["manifest.json", "scene.json"]


def test_write_json_atomic_handles_numpy_values(tmp_path: Path) -> None:
    p = tmp_path / "a.json"
    write_json_atomic(p, {"n": np.int64(3), "v": np.arange(2)})
    assert json.loads(p.read_text(encoding="utf-8")) == {"n": 3, "v": [0, 1]}


def test_plot_plan_view_writes_png(tmp_path: Path) -> None:
    horizon = GeometryDescriptor(
        kind="points",
        name="horizon:top",
        positions=[[0, 0, 0], [1, 0, 0], [0, 0, 1]],
        colors=[[1, 0, 0], [0, 1, 0], [0, 0, 1]],
    )
    fault = GeometryDescriptor(kind="lines", name="fault:f1.csv", positions=[[0, 0, 0], [1, -1, 1]], indices=[0, 1])
    out = plot_plan_view([horizon, fault, _tube("A-1", 0.5, 0.5)], tmp_path / "qc" / "plan.png")

    assert out.exists()
    assert out.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
