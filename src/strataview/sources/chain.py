# src/strataview/sources/chain.py
"""
Priority-ordered data origins with fallback.

An origin is anything satisfying DataOrigin: a name, a priority, an availability
probe and a fetch. The chain tries origins in ascending priority; an origin that
is unavailable or whose fetch raises hands over to the next one.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from strataview.errors import NoSourceAvailable
from strataview.io.tables import RowTable

logger = logging.getLogger(__name__)

# endpoints understood by the bundled origins
ENDPOINTS = ("horizons", "wells", "well-logs", "faults")


@runtime_checkable
class DataOrigin(Protocol):
    name: str

    async def is_available(self) -> bool: ...

    async def fetch(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[RowTable]: ...


@dataclass(frozen=True)
class RegisteredOrigin:
    origin: DataOrigin
    priority: int
    order: int


class DataSourceChain:
    def __init__(self) -> None:
        self._origins: List[RegisteredOrigin] = []
        self.current_strategy_name: Optional[str] = None

    def register(self, origin: DataOrigin, priority: int) -> None:
        """Lower priority is tried first; equal priorities keep registration order."""
        entry = RegisteredOrigin(origin=origin, priority=int(priority), order=len(self._origins))
        self._origins.append(entry)
        self._origins.sort(key=lambda e: (e.priority, e.order))

    def __len__(self) -> int:
        return len(self._origins)

    def names(self) -> List[str]:
        return [e.origin.name for e in self._origins]

    async def resolve(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> List[RowTable]:
        failures: List[Tuple[str, str]] = []
        for entry in list(self._origins):
            origin = entry.origin
            try:
                available = await origin.is_available()
            except Exception as e:
                logger.warning("%s availability check failed: %s", origin.name, e)
                failures.append((origin.name, f"availability check failed: {e}"))
                continue
            if not available:
                failures.append((origin.name, "unavailable"))
                continue

            try:
                tables = await origin.fetch(endpoint, params)
            except Exception as e:
                logger.warning("%s failed for %s: %s", origin.name, endpoint, e)
                failures.append((origin.name, str(e)))
                continue

            self.current_strategy_name = origin.name
            logger.info("Loaded %s from %s", endpoint, origin.name)
            return tables

        raise NoSourceAvailable(endpoint, failures)

    async def availability(self) -> Dict[str, bool]:
        out: Dict[str, bool] = {}
        for entry in list(self._origins):
            try:
                out[entry.origin.name] = bool(await entry.origin.is_available())
            except Exception as e:
                logger.debug("%s availability check failed: %s", entry.origin.name, e)
                out[entry.origin.name] = False
        return out
