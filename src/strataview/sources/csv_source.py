# src/strataview/sources/csv_source.py
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from strataview.config.schema import FaultConfig
from strataview.io.csv import read_csv_rows
from strataview.io.tables import RowTable

logger = logging.getLogger(__name__)


def read_table(path: Path) -> RowTable:
    headers, rows = read_csv_rows(path)
    return RowTable(name=Path(path).name, headers=headers, rows=rows)


class CsvFileSource:
    """
    Flat files under one base directory.

    Endpoints:
      - horizons / wells / well-logs: one file each, named by `files`
      - faults: params["files"], else the configured fault files, else every
        *.csv under faults.base_path
    """

    def __init__(
        self,
        base_path: Path,
        files: Mapping[str, str],
        *,
        faults: Optional[FaultConfig] = None,
        name: str = "CSV Files",
    ) -> None:
        self.name = name
        self.base_path = Path(base_path)
        self.files = dict(files)
        self.faults = faults or FaultConfig()

    async def is_available(self) -> bool:
        return self.base_path.is_dir()

    def fault_files(self, requested: Optional[Sequence[str]] = None) -> List[Path]:
        names = list(requested) if requested else self.faults.all_fault_files()
        if names:
            return [self.base_path / n for n in names]
        fault_dir = self.base_path / self.faults.base_path
        if not fault_dir.is_dir():
            return []
        return sorted(fault_dir.glob("*.csv"))

    def _read_faults(self, requested: Optional[Sequence[str]]) -> List[RowTable]:
        paths = self.fault_files(requested)
        tables: List[RowTable] = []
        for p in paths:
            if not p.is_file():
                logger.warning("Fault file not found: %s", p)
                continue
            tables.append(read_table(p))
        if not tables:
            raise FileNotFoundError(f"no fault files under {self.base_path / self.faults.base_path}")
        return tables

    def _read(self, endpoint: str, params: Mapping[str, Any]) -> List[RowTable]:
        if endpoint == "faults":
            return self._read_faults(params.get("files"))
        fname = self.files.get(endpoint)
        if not fname:
            raise KeyError(f"{self.name}: unknown endpoint {endpoint!r}")
        path = self.base_path / fname
        if not path.is_file():
            raise FileNotFoundError(str(path))
        return [read_table(path)]

    async def fetch(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[RowTable]:
        return await asyncio.to_thread(self._read, endpoint, dict(params or {}))
