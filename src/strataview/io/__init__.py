# src/strataview/io/__init__.py
from __future__ import annotations

from .csv import parse_csv_text, read_csv_rows, require_columns, to_float, to_int
from .tables import RowTable

__all__ = [
    "RowTable",
    "parse_csv_text",
    "read_csv_rows",
    "require_columns",
    "to_float",
    "to_int",
]
