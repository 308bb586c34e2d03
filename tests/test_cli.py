from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from strataview.cli.run_load import app
from strataview.io.geometry_json import read_scene_json

WELLS = "Inline_n;Crossline_n;Well_name\n10;20;GNK-007\n30;40;GNK-008\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def test_load_writes_scene_and_manifest(tmp_path: Path) -> None:
    data = tmp_path / "data"
    _write(data, "well_coordinates.csv", WELLS)
    out = tmp_path / "out"

    res = CliRunner().invoke(app, ["load", "--data-dir", str(data), "--out-dir", str(out)])

    assert res.exit_code == 0, res.output
    scene = read_scene_json(out / "scene.json")
    assert sorted(o["name"] for o in scene["objects"]) == ["well:GNK-007", "well:GNK-008"]
    manifest = read_scene_json(out / "manifest.json")
    assert manifest["tasks"]["well"]["status"] == "success"
    assert manifest["tasks"]["wellLog"]["status"] == "skipped"
    assert manifest["n_wells"] == 2
    assert set(manifest["scene_center"]) == {"x", "y", "z"}


def test_load_exits_nonzero_when_nothing_loads(tmp_path: Path) -> None:
    data = tmp_path / "empty"
    data.mkdir()
    res = CliRunner().invoke(app, ["load", "--data-dir", str(data), "--out-dir", str(tmp_path / "out")])
    assert res.exit_code == 1
