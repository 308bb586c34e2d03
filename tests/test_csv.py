from __future__ import annotations

import math
from pathlib import Path

import pytest

from strataview.errors import MissingColumns, ParseError
from strataview.io.csv import parse_csv_text, read_csv_rows, require_columns, to_float, to_int


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_semicolon_well_sheet(tmp_path: Path) -> None:
    p = _write(tmp_path, "wells.csv", "Inline_n;Crossline_n;Well_name\n10;20;GNK-001\n30;40; GNK-002 \n")
    headers, rows = read_csv_rows(p)
    assert headers == ["Inline_n", "Crossline_n", "Well_name"]
    assert rows[1]["Well_name"] == "GNK-002"


def test_comma_with_bom_and_short_rows(tmp_path: Path) -> None:
    p = tmp_path / "h.csv"
    p.write_bytes("\ufeffInline,Crossline,top\n1,2,3\n4,5\n".encode("utf-8"))
    headers, rows = read_csv_rows(p)
    assert headers == ["Inline", "Crossline", "top"]
    assert rows[1]["top"] == ""


def test_empty_file_is_parse_error(tmp_path: Path) -> None:
    with pytest.raises(ParseError):
        read_csv_rows(_write(tmp_path, "empty.csv", ""))
    with pytest.raises(ParseError):
        parse_csv_text("   ")


def test_parse_csv_text() -> None:
    headers, rows = parse_csv_text("\ufeffWELL,TVDSS,GR\nA,100,50\n")
    assert headers == ["WELL", "TVDSS", "GR"]
    assert rows == [{"WELL": "A", "TVDSS": "100", "GR": "50"}]


def test_require_columns_reports_missing() -> None:
    with pytest.raises(MissingColumns) as ei:
        require_columns(["Inline", "top"], ["Inline", "Crossline"], source="h.csv")
    assert ei.value.missing == ["Crossline"]
    assert ei.value.found == ["Inline", "top"]
    assert isinstance(ei.value, ValueError)


def test_to_float_is_option_returning() -> None:
    assert to_float(" 1.5 ") == 1.5
    assert to_float(3) == 3.0
    for bad in (None, "", "  ", "NaN", "null", "N/A", "abc", "inf", float("nan"), math.inf):
        assert to_float(bad) is None
    assert to_float("-999.25") == -999.25


def test_to_int_rejects_fractions() -> None:
    assert to_int("12") == 12
    assert to_int("12.0") == 12
    assert to_int("12.5") is None
    assert to_int("x") is None


def test_tab_delimited_logs(tmp_path: Path) -> None:
    p = _write(tmp_path, "logs.txt", "WELL\tTVDSS\tGR\nA\t100\t50\nA\t110\t55\n")
    headers, rows = read_csv_rows(p)
    assert headers == ["WELL", "TVDSS", "GR"]
    assert rows[1]["GR"] == "55"
