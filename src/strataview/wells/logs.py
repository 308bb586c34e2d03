# src/strataview/wells/logs.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from strataview.errors import EmptyResult
from strataview.io.csv import to_float
from strataview.io.tables import WELL_LOG_COLUMNS, RowTable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogSample:
    depth: float
    value: Optional[float]


def is_null_value(value: Optional[float], null_value: float) -> bool:
    """None, the null sentinel and non-finite values all mean 'no measurement'."""
    if value is None:
        return True
    try:
        v = float(value)
    except (TypeError, ValueError):
        return True
    if not math.isfinite(v):
        return True
    return v == float(null_value)


@dataclass
class WellLogSeries:
    log_type: str
    samples: List[LogSample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.samples)

    def has_data(self, null_value: float) -> bool:
        return any(not is_null_value(s.value, null_value) for s in self.samples)


@dataclass
class WellLogData:
    """Every log recorded for one well, keyed by log type."""

    well_name: str
    logs: Dict[str, WellLogSeries] = field(default_factory=dict)
    depth_min: float = math.inf
    depth_max: float = -math.inf

    def add_sample(self, depth: float, values: Dict[str, Optional[float]]) -> None:
        self.depth_min = min(self.depth_min, depth)
        self.depth_max = max(self.depth_max, depth)
        for log_type, v in values.items():
            s = self.logs.get(log_type)
            if s is None:
                s = WellLogSeries(log_type=log_type)
                self.logs[log_type] = s
            s.samples.append(LogSample(depth=depth, value=v))

    def series(self, log_type: str) -> Optional[WellLogSeries]:
        return self.logs.get(log_type)

    def available_logs(self, null_value: float) -> List[str]:
        return [k for k, s in self.logs.items() if s.has_data(null_value)]


class WellLogLibrary:
    """Well name -> WellLogData, exact-name lookup."""

    def __init__(self) -> None:
        self._wells: Dict[str, WellLogData] = {}
        self._log_types: List[str] = []

    def __len__(self) -> int:
        return len(self._wells)

    def __contains__(self, name: str) -> bool:
        return name in self._wells

    def names(self) -> List[str]:
        return list(self._wells.keys())

    def find(self, name: str) -> Optional[WellLogData]:
        return self._wells.get(name)

    def get_or_create(self, name: str) -> WellLogData:
        d = self._wells.get(name)
        if d is None:
            d = WellLogData(well_name=name)
            self._wells[name] = d
        return d

    def note_log_types(self, types: Iterable[str]) -> None:
        for t in types:
            if t not in self._log_types:
                self._log_types.append(t)

    def available_log_types(self) -> List[str]:
        return ["None"] + list(self._log_types)


def add_well_log_table(
    library: WellLogLibrary,
    table: RowTable,
    log_types: Sequence[str],
) -> int:
    """
    Append one table of WELL/TVDSS rows to the library. Recognized log columns are
    the configured log types present in the header; unknown columns are ignored.
    Rows without a well name or a finite depth are dropped. Returns rows kept.
    """
    table.require(WELL_LOG_COLUMNS)
    present = [t for t in log_types if t in set(table.headers)]
    library.note_log_types(present)

    kept = 0
    for r in table.rows:
        name = str(r.get("WELL") or "").strip()
        depth = to_float(r.get("TVDSS"))
        if not name or depth is None:
            continue
        values = {t: to_float(r.get(t)) for t in present}
        library.get_or_create(name).add_sample(depth, values)
        kept += 1
    return kept


def build_well_log_library(tables: Sequence[RowTable], log_types: Sequence[str]) -> WellLogLibrary:
    lib = WellLogLibrary()
    for t in tables:
        add_well_log_table(lib, t, log_types)
    if len(lib) == 0:
        raise EmptyResult("No well log samples found")
    logger.info("Well logs loaded for %d wells", len(lib))
    logger.info("Available log types: %s", ", ".join(lib.available_log_types()[1:]))
    return lib
