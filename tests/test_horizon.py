from __future__ import annotations

import numpy as np
import pytest

from strataview.config.schema import SurveyConfig
from strataview.errors import EmptyResult, MissingColumns
from strataview.geometry.colors import hsl_to_rgb
from strataview.geometry.horizon import HorizonCollection, build_horizon
from strataview.io.tables import RowTable


def _table(rows, z: str = "top") -> RowTable:
    return RowTable(name="horizon.csv", headers=["Inline", "Crossline", z], rows=rows)


def test_build_horizon_normalizes_by_observed_range() -> None:
    s = SurveyConfig()
    t = _table(
        [
            {"Inline": "1", "Crossline": "1", "top": "100"},
            {"Inline": "3", "Crossline": "1", "top": "200"},
            {"Inline": "1", "Crossline": "5", "top": "300"},
            {"Inline": "x", "Crossline": "5", "top": "300"},
            {"Inline": "2", "Crossline": "2", "top": ""},
        ]
    )
    h = build_horizon(t, "top", s)
    assert len(h) == 3
    assert h.positions[:, 0].tolist() == pytest.approx([0.0, s.image_width, 0.0])
    assert h.positions[:, 2].tolist() == pytest.approx([0.0, 0.0, s.image_width])
    assert h.positions[:, 1].tolist() == pytest.approx([1500.0, 1400.0, 1300.0])
    assert (h.z_min, h.z_max) == (100.0, 300.0)


def test_depth_colors_ramp_over_half_range_and_wrap() -> None:
    t = _table(
        [
            {"Inline": "1", "Crossline": "1", "top": "100"},
            {"Inline": "2", "Crossline": "2", "top": "200"},
            {"Inline": "3", "Crossline": "3", "top": "300"},
        ]
    )
    h = build_horizon(t, "top", SurveyConfig())
    assert h.colors[0].tolist() == pytest.approx([1.0, 0.0, 0.0])
    assert h.colors[1].tolist() == pytest.approx(hsl_to_rgb([0.7])[0].tolist(), abs=1e-6)
    # deepest point: hue 1.4 wraps onto 0.4
    assert h.colors[2].tolist() == pytest.approx(hsl_to_rgb([0.4])[0].tolist(), abs=1e-6)


def test_horizon_arrays_are_read_only() -> None:
    h = build_horizon(_table([{"Inline": "1", "Crossline": "1", "top": "5"}]), "top", SurveyConfig())
    assert not h.positions.flags.writeable
    with pytest.raises(ValueError):
        h.positions[0, 0] = 1.0


def test_single_line_collapses_to_axis_origin() -> None:
    t = _table([{"Inline": "7", "Crossline": str(c), "top": "10"} for c in (1, 2, 3)])
    h = build_horizon(t, "top", SurveyConfig())
    assert np.all(h.positions[:, 0] == 0.0)


def test_no_usable_rows_is_empty_result() -> None:
    with pytest.raises(EmptyResult):
        build_horizon(_table([{"Inline": "a", "Crossline": "1", "top": "1"}]), "top", SurveyConfig())


def test_missing_z_column_fails_fast() -> None:
    with pytest.raises(MissingColumns):
        build_horizon(_table([], z="bottom"), "top", SurveyConfig())


def test_collection_descriptors() -> None:
    coll = HorizonCollection()
    coll.add(build_horizon(_table([{"Inline": "1", "Crossline": "1", "top": "5"}]), "top", SurveyConfig()))
    d = coll.descriptors()[0]
    assert d.kind == "points"
    assert d.name == "horizon:top"
    assert d.colors is not None and d.colors.shape == (1, 3)
    coll.dispose()
    assert len(coll) == 0
