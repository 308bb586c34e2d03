# src/strataview/sources/las_source.py
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from strataview.errors import ParseError
from strataview.io.las import las_to_table, list_las_files
from strataview.io.tables import RowTable

logger = logging.getLogger(__name__)


class LasDirectorySource:
    """Well logs from a directory of LAS files; serves the well-logs endpoint only."""

    endpoints = ("well-logs",)

    def __init__(self, las_dir: Path, log_types: Sequence[str], *, name: str = "LAS Files") -> None:
        self.name = name
        self.las_dir = Path(las_dir)
        self.log_types = list(log_types)

    async def is_available(self) -> bool:
        return bool(list_las_files(self.las_dir))

    def _read(self) -> List[RowTable]:
        tables: List[RowTable] = []
        for p in list_las_files(self.las_dir):
            try:
                tables.append(las_to_table(p, self.log_types))
            except (ParseError, OSError, ValueError) as e:
                logger.warning("Skipping LAS %s: %s", p.name, e)
        if not tables:
            raise ParseError(f"no readable LAS files in {self.las_dir}")
        logger.info("Read %d LAS files from %s", len(tables), self.las_dir)
        return tables

    async def fetch(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[RowTable]:
        if endpoint not in self.endpoints:
            raise KeyError(f"{self.name}: unsupported endpoint {endpoint!r}")
        return await asyncio.to_thread(self._read)
