from __future__ import annotations

from typing import Dict, List

import pytest

from strataview.config.schema import SurveyConfig
from strataview.errors import MissingColumns, ParseError
from strataview.geometry.fault import (
    FaultCollection,
    build_fault_lines,
    build_fault_panels,
    group_sticks,
    reconstruct_fault,
)
from strataview.io.tables import FAULT_COLUMNS, RowTable


def _stick_rows(sid: int, plane: str, il: float = 100.0, n: int = 2) -> List[Dict[str, object]]:
    rows: List[Dict[str, object]] = []
    for k in range(n):
        rows.append(
            {
                "Fault_Stick": str(sid),
                "Fault_Plane": plane,
                "Times": str(500 + 100 * k),
                "inline_n": str(il + sid),
                "crossline_n": str(200 + sid),
            }
        )
    return rows


def _table(rows: List[Dict[str, object]]) -> RowTable:
    return RowTable(name="fault_a.csv", headers=list(FAULT_COLUMNS), rows=rows)


def test_three_same_named_sticks_make_two_panels() -> None:
    sticks = group_sticks(_stick_rows(1, "F1") + _stick_rows(2, "F1") + _stick_rows(3, "F1"))
    panels = build_fault_panels(sticks, SurveyConfig())
    assert len(panels) == 2
    assert [p.stick_ids for p in panels] == [(1, 2), (2, 3)]


def test_panels_never_bridge_different_planes() -> None:
    sticks = group_sticks(_stick_rows(1, "F1") + _stick_rows(2, "F2") + _stick_rows(3, "F1"))
    assert build_fault_panels(sticks, SurveyConfig()) == []


def test_panel_adjacency_follows_sorted_ids() -> None:
    rows = _stick_rows(30, "F1") + _stick_rows(2, "F1") + _stick_rows(7, "F1")
    panels = build_fault_panels(group_sticks(rows), SurveyConfig())
    assert [p.stick_ids for p in panels] == [(2, 7), (7, 30)]


def test_panel_triangles_cover_the_quad() -> None:
    s = SurveyConfig()
    panel = build_fault_panels(group_sticks(_stick_rows(1, "F1") + _stick_rows(2, "F1")), s)[0]
    top_i, bottom_i, top_j, bottom_j = panel.corners
    assert top_i.y > bottom_i.y
    tris = panel.triangles()
    assert len(tris) == 2
    used = {id(p) for tri in tris for p in tri}
    assert used == {id(top_i), id(bottom_i), id(top_j), id(bottom_j)}
    assert tris[0] == (top_i, bottom_i, top_j)


def test_sticks_without_two_points_are_excluded() -> None:
    rows = _stick_rows(1, "F1") + _stick_rows(2, "F1", n=3) + _stick_rows(3, "F1", n=1) + _stick_rows(4, "F1")
    sticks = group_sticks(rows)
    s = SurveyConfig()
    assert [seg.stick_id for seg in build_fault_lines(sticks, s)] == [1, 4]
    assert build_fault_panels(sticks, s) == []


def test_grouping_keeps_first_seen_order_and_skips_bad_rows() -> None:
    rows = _stick_rows(5, "F1") + [{"Fault_Stick": "x", "Fault_Plane": "F1", "Times": "1", "inline_n": "1", "crossline_n": "1"}]
    rows.insert(1, {"Fault_Stick": "5", "Fault_Plane": "F1", "Times": "", "inline_n": "1", "crossline_n": "1"})
    sticks = group_sticks(rows)
    assert list(sticks) == [5]
    assert [p.time for p in sticks[5].points] == [500.0, 600.0]


def test_no_sticks_is_parse_error() -> None:
    with pytest.raises(ParseError):
        reconstruct_fault(_table([]), SurveyConfig())


def test_missing_columns() -> None:
    with pytest.raises(MissingColumns):
        reconstruct_fault(RowTable(name="f.csv", headers=["Fault_Stick"], rows=[]), SurveyConfig())


def test_reconstruction_descriptors() -> None:
    rows = _stick_rows(1, "F1") + _stick_rows(2, "F1") + _stick_rows(3, "F1")
    s = SurveyConfig()

    mesh = reconstruct_fault(_table(rows), s, as_3d=True).descriptor()
    assert mesh.kind == "mesh"
    assert mesh.vertex_count == 8
    assert mesh.indices is not None and mesh.indices.tolist()[:6] == [0, 1, 2, 1, 3, 2]

    lines = reconstruct_fault(_table(rows), s, as_3d=False).descriptor()
    assert lines.kind == "lines"
    assert lines.vertex_count == 6

    coll = FaultCollection()
    coll.add(reconstruct_fault(_table(rows), s))
    assert coll.geometry_count == 2
    assert len(coll.descriptors()) == 1
