# src/strataview/io/tables.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from strataview.io.csv import require_columns

# Row input contract per data kind
HORIZON_COLUMNS = ("Inline", "Crossline")
FAULT_COLUMNS = ("Fault_Stick", "Fault_Plane", "Times", "inline_n", "crossline_n")
WELL_COLUMNS = ("Inline_n", "Crossline_n", "Well_name")
WELL_LOG_COLUMNS = ("WELL", "TVDSS")


@dataclass(frozen=True)
class RowTable:
    """
    One tabular payload as handed over by a data origin: a file, an API document
    section, a LAS file. Values are kept as strings (or raw JSON scalars); typed
    parsing happens in the builders.
    """

    name: str
    headers: List[str]
    rows: List[Dict[str, object]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def require(self, columns: Sequence[str]) -> None:
        require_columns(self.headers, columns, source=self.name)
