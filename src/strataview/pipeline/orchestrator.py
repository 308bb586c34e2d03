# src/strataview/pipeline/orchestrator.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from strataview.config.defaults import default_config
from strataview.config.schema import RunConfig
from strataview.errors import EmptyResult, NoSourceAvailable, StrataviewError
from strataview.geometry.fault import FaultCollection, reconstruct_fault
from strataview.geometry.horizon import HorizonCollection, build_horizon
from strataview.geometry.types import GeometryDescriptor
from strataview.io.tables import HORIZON_COLUMNS, RowTable
from strataview.pipeline.tasks import LoadState, TaskBoard, TaskStatus
from strataview.sources.api_source import ApiSource
from strataview.sources.chain import DataSourceChain
from strataview.sources.csv_source import CsvFileSource
from strataview.sources.las_source import LasDirectorySource
from strataview.wells.logs import WellLogLibrary, build_well_log_library
from strataview.wells.names import NameReconciler
from strataview.wells.registry import WellRegistry

logger = logging.getLogger(__name__)

# (task id, label) in registration order
TASKS = (
    ("horizon", "Horizons"),
    ("well", "Wells"),
    ("wellLog", "Well Logs"),
    ("fault", "Faults"),
)


def build_chain(cfg: RunConfig) -> DataSourceChain:
    """The origins the configuration names, in their configured priorities."""
    s = cfg.sources
    chain = DataSourceChain()
    if s.api_base_url:
        chain.register(ApiSource(s.api_base_url, timeout_s=s.api_timeout_s), s.api_priority)
    if s.csv_base_path is not None:
        chain.register(CsvFileSource(s.csv_base_path, s.files, faults=cfg.faults), s.csv_priority)
    if s.las_dir is not None:
        chain.register(LasDirectorySource(s.las_dir, cfg.well_logs.curve_log_types), s.las_priority)
    return chain


@dataclass
class LoadContext:
    """Everything one load run needs, passed explicitly."""

    config: RunConfig
    chain: DataSourceChain
    board: TaskBoard = field(default_factory=TaskBoard)
    reconciler: Optional[NameReconciler] = None

    @classmethod
    def from_config(cls, cfg: Optional[RunConfig] = None) -> "LoadContext":
        cfg = cfg or default_config()
        return cls(config=cfg, chain=build_chain(cfg), reconciler=NameReconciler.from_config(cfg.names))


@dataclass
class LoadResult:
    horizons: HorizonCollection
    faults: FaultCollection
    wells: WellRegistry
    logs: Optional[WellLogLibrary]
    state: LoadState
    # endpoint -> name of the origin that served it
    sources: Dict[str, str] = field(default_factory=dict)

    def status(self, task_id: str) -> Optional[TaskStatus]:
        t = self.state.task(task_id)
        return t.status if t is not None else None

    def descriptors(self) -> List[GeometryDescriptor]:
        return self.horizons.descriptors() + self.wells.descriptors() + self.faults.descriptors()

    def dispose(self) -> None:
        self.horizons.dispose()
        self.faults.dispose()
        self.wells.dispose()


def _horizon_z_columns(table: RowTable, configured: Sequence[str]) -> List[str]:
    """
    Configured z columns present in the table. API tables carry one column named
    after the horizon instead; that single extra column is taken as-is. Anything
    wider without a configured column is ambiguous and yields nothing.
    """
    present = [c for c in configured if c in table.headers]
    if present:
        return present
    extra = [h for h in table.headers if h not in HORIZON_COLUMNS]
    if len(extra) == 1:
        return extra
    if extra:
        logger.warning(
            "%s: none of the z columns %s present; ignoring columns %s", table.name, list(configured), extra
        )
    return []


class LoadOrchestrator:
    """
    Runs the four load tasks concurrently on one event loop.

    A task failure is recorded on the board and never reaches the caller or the
    sibling tasks. Log attachment waits for the well task to finish and runs only
    when both the well and the well-log task succeeded.
    """

    def __init__(self, ctx: LoadContext) -> None:
        self.ctx = ctx
        cfg = ctx.config
        self.horizons = HorizonCollection()
        self.faults = FaultCollection()
        self.wells = WellRegistry(cfg.survey, cfg.well_logs, ctx.reconciler or NameReconciler.from_config(cfg.names))
        self.logs: Optional[WellLogLibrary] = None
        self.sources: Dict[str, str] = {}
        self._wells_done: Optional[asyncio.Event] = None

    @property
    def board(self) -> TaskBoard:
        return self.ctx.board

    async def _resolve(self, endpoint: str, params: Optional[dict] = None) -> List[RowTable]:
        tables = await self.ctx.chain.resolve(endpoint, params)
        if self.ctx.chain.current_strategy_name:
            self.sources[endpoint] = self.ctx.chain.current_strategy_name
        return tables

    # -------------------------------------------------------------------------
    # tasks
    # -------------------------------------------------------------------------

    async def _load_horizons(self) -> None:
        b = self.board
        z_columns = list(self.ctx.config.sources.z_columns)
        try:
            b.update_task("horizon", progress=10)
            tables = await self._resolve("horizons", {"z_columns": z_columns})
            b.update_task("horizon", progress=50)
            for t in tables:
                for z in _horizon_z_columns(t, z_columns):
                    try:
                        self.horizons.add(build_horizon(t, z, self.ctx.config.survey))
                    except EmptyResult as e:
                        logger.warning("%s", e)
            if len(self.horizons) == 0:
                raise EmptyResult("No horizons could be built")
            b.update_task("horizon", progress=90)
            b.complete_task("horizon", True, "Loaded")
        except Exception as e:
            logger.warning("Horizon loading failed: %s", e)
            b.complete_task("horizon", False, f"Failed: {e}")

    async def _load_wells(self) -> None:
        b = self.board
        try:
            b.update_task("well", progress=10)
            tables = await self._resolve("wells")
            b.update_task("well", progress=50)
            for t in tables:
                self.wells.register(t)
            if len(self.wells) == 0:
                raise EmptyResult("No valid wells found")
            b.update_task("well", progress=90)
            b.complete_task("well", True, f"Loaded {len(self.wells)}")
        except Exception as e:
            logger.warning("Well loading failed: %s", e)
            b.complete_task("well", False, f"Failed: {e}")
        finally:
            if self._wells_done is not None:
                self._wells_done.set()

    async def _load_well_logs(self) -> None:
        b = self.board
        try:
            b.update_task("wellLog", progress=10)
            tables = await self._resolve("well-logs")
            b.update_task("wellLog", progress=50)
            self.logs = build_well_log_library(tables, self.ctx.config.well_logs.curve_log_types)
            b.update_task("wellLog", progress=90)
        except (NoSourceAvailable, EmptyResult) as e:
            logger.warning("Well log loading failed: %s", e)
            b.skip_task("wellLog", "No data")
            return
        except Exception as e:
            logger.warning("Well log loading failed: %s", e)
            b.complete_task("wellLog", False, f"Failed: {e}")
            return

        if self._wells_done is not None:
            await self._wells_done.wait()
        if b.task("well").status is TaskStatus.SUCCESS:
            self.wells.attach_log_series(self.logs)
        else:
            logger.info("Wells not loaded; log attachment skipped")
        b.complete_task("wellLog", True, "Loaded")

    async def _load_faults(self) -> None:
        b = self.board
        as_3d = self.ctx.config.faults.as_3d
        try:
            b.update_task("fault", progress=0)
            tables = await self._resolve("faults")
            total = len(tables)
            for k, t in enumerate(tables, start=1):
                try:
                    self.faults.add(reconstruct_fault(t, self.ctx.config.survey, as_3d=as_3d))
                except StrataviewError as e:
                    logger.warning("Error loading fault %s: %s", t.name, e)
                b.update_task("fault", progress=round(k / total * 100), message=f"Loaded {k}/{total}")
            if len(self.faults) == 0:
                raise EmptyResult("No fault could be reconstructed")
            b.complete_task("fault", True, "Loaded")
        except Exception as e:
            logger.warning("Fault loading failed: %s", e)
            b.complete_task("fault", False, f"Failed: {e}")

    # -------------------------------------------------------------------------
    # entry point
    # -------------------------------------------------------------------------

    async def load_all(self) -> LoadResult:
        for task_id, label in TASKS:
            self.board.register_task(task_id, label)
        self._wells_done = asyncio.Event()

        await asyncio.gather(
            self._load_horizons(),
            self._load_wells(),
            self._load_well_logs(),
            self._load_faults(),
        )

        state = self.board.state()
        logger.info(
            "Load finished: %s",
            ", ".join(f"{t.id}={t.status.value}" for t in state.tasks),
        )
        return LoadResult(
            horizons=self.horizons,
            faults=self.faults,
            wells=self.wells,
            logs=self.logs,
            state=state,
            sources=dict(self.sources),
        )


def run_load(ctx: LoadContext) -> LoadResult:
    """Blocking convenience wrapper around LoadOrchestrator.load_all()."""
    return asyncio.run(LoadOrchestrator(ctx).load_all())
