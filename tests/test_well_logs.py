from __future__ import annotations

import math

import pytest

from strataview.config.defaults import default_config
from strataview.config.schema import LogTypeConfig
from strataview.errors import DegenerateExtent, EmptyResult, MissingColumns
from strataview.io.tables import RowTable
from strataview.wells.curve import WellAnchor, build_log_curve, log_value_offset, normalize_log_value
from strataview.wells.logs import LogSample, WellLogSeries, build_well_log_library

ANCHOR = WellAnchor(x=100.0, z=50.0, top_y=1000.0, bottom_y=0.0)


def _display():
    return default_config().well_logs


def _series(pairs, log_type: str = "GR") -> WellLogSeries:
    return WellLogSeries(log_type=log_type, samples=[LogSample(depth=d, value=v) for d, v in pairs])


def test_min_max_mid_offsets() -> None:
    d = _display()
    gr = d.log_type("GR")
    w = d.max_log_width
    assert log_value_offset(gr.min, gr, d) == pytest.approx(-w)
    assert log_value_offset(gr.max, gr, d) == pytest.approx(w)
    assert log_value_offset((gr.min + gr.max) / 2, gr, d) == pytest.approx(0.0)


def test_log_scale_normalization() -> None:
    d = _display()
    rt = d.log_type("RT")
    assert rt.log_scale
    assert log_value_offset(0.1, rt, d) == pytest.approx(-d.max_log_width)
    assert log_value_offset(1000.0, rt, d) == pytest.approx(d.max_log_width)
    assert log_value_offset(10.0, rt, d) == pytest.approx(0.0)
    # zero and negative readings are floored, not a domain error
    assert log_value_offset(0.0, rt, d) == pytest.approx(-d.max_log_width)
    assert log_value_offset(-5.0, rt, d) == pytest.approx(-d.max_log_width)


def test_values_are_clamped_and_reversed_ranges_flip() -> None:
    d = _display()
    assert normalize_log_value(500.0, d.log_type("GR")) == 1.0
    assert normalize_log_value(-5.0, d.log_type("GR")) == 0.0
    nphi = d.log_type("NPHI")
    assert normalize_log_value(0.45, nphi) == pytest.approx(0.0)
    assert normalize_log_value(-0.15, nphi) == pytest.approx(1.0)


def test_empty_display_range_is_degenerate() -> None:
    with pytest.raises(DegenerateExtent):
        normalize_log_value(1.0, LogTypeConfig("X", "X", 2.0, 2.0))


def test_curve_spans_well_top_to_bottom() -> None:
    d = _display()
    geom = build_log_curve("W1", ANCHOR, _series([(1200.0, 150.0), (1000.0, 0.0), (1100.0, 75.0)]), d.log_type("GR"), d)
    assert len(geom) == 3
    assert geom.positions[:, 1].tolist() == pytest.approx([1000.0, 500.0, 0.0])
    assert geom.positions[:, 0].tolist() == pytest.approx([90.0, 100.0, 110.0])
    assert set(geom.positions[:, 2].tolist()) == {50.0}


def test_all_null_series_keeps_every_point_at_null_offset() -> None:
    d = _display()
    samples = [(1000.0, None), (1010.0, d.null_value), (1020.0, math.nan), (1030.0, None)]
    geom = build_log_curve("W1", ANCHOR, _series(samples), d.log_type("GR"), d)
    assert len(geom) == len(samples)
    assert all(x == pytest.approx(ANCHOR.x + d.null_offset) for x in geom.positions[:, 0])


def test_degenerate_depths_give_empty_geometry() -> None:
    d = _display()
    gr = d.log_type("GR")
    assert build_log_curve("W1", ANCHOR, _series([(1000.0, 10.0), (1000.0, 20.0)]), gr, d).is_empty
    assert build_log_curve("W1", ANCHOR, _series([(math.nan, 10.0)]), gr, d).is_empty
    assert build_log_curve("W1", ANCHOR, _series([]), gr, d).is_empty


def test_fill_ribbon_for_gr() -> None:
    d = _display()
    geom = build_log_curve("W1", ANCHOR, _series([(1000.0, 0.0), (1100.0, 75.0), (1200.0, 150.0)]), d.log_type("GR"), d)
    assert geom.has_fill
    assert geom.fill_positions.shape == (6, 3)
    # reference vertices sit max_log_width to the right of the bore
    assert geom.fill_positions[1::2, 0].tolist() == pytest.approx([110.0] * 3)
    assert geom.fill_indices.tolist() == [0, 1, 2, 2, 1, 3, 2, 3, 4, 4, 3, 5]

    descs = geom.descriptors(tube_radius=1.0, curve_segments=6)
    assert [x.kind for x in descs] == ["tube", "mesh"]


def test_no_fill_for_types_without_fill() -> None:
    d = _display()
    geom = build_log_curve("W1", ANCHOR, _series([(1.0, 2.0), (2.0, 2.5)], "RHOB"), d.log_type("RHOB"), d)
    assert not geom.has_fill


def test_library_reads_configured_columns_only() -> None:
    t = RowTable(
        name="logs.csv",
        headers=["WELL", "TVDSS", "GR", "FOO"],
        rows=[
            {"WELL": "7", "TVDSS": "1000", "GR": "50", "FOO": "1"},
            {"WELL": "7", "TVDSS": "1001", "GR": "-999.25", "FOO": "1"},
            {"WELL": "", "TVDSS": "1002", "GR": "50", "FOO": "1"},
            {"WELL": "8", "TVDSS": "bad", "GR": "50", "FOO": "1"},
            {"WELL": "9", "TVDSS": "900", "GR": "", "FOO": "1"},
        ],
    )
    lib = build_well_log_library([t], ["GR", "RT"])
    assert sorted(lib.names()) == ["7", "9"]
    assert "7" in lib
    assert "8" not in lib
    assert lib.available_log_types() == ["None", "GR"]
    data = lib.find("7")
    assert data is not None
    assert len(data.series("GR")) == 2
    assert (data.depth_min, data.depth_max) == (1000.0, 1001.0)
    assert data.available_logs(-999.25) == ["GR"]
    assert lib.find("9").available_logs(-999.25) == []
    assert lib.find("GNK-007") is None


def test_library_errors() -> None:
    with pytest.raises(MissingColumns):
        build_well_log_library([RowTable(name="x", headers=["WELL"], rows=[])], ["GR"])
    with pytest.raises(EmptyResult):
        build_well_log_library([RowTable(name="x", headers=["WELL", "TVDSS"], rows=[])], ["GR"])
