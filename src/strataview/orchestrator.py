# src/strataview/orchestrator.py
from __future__ import annotations

from strataview.config.defaults import default_config
from strataview.pipeline.orchestrator import LoadContext, LoadOrchestrator, LoadResult, build_chain, run_load
from strataview.pipeline.tasks import LoadState, TaskBoard, TaskStatus
from strataview.utils.config import load_run_config

__all__ = [
    "default_config",
    "load_run_config",
    "build_chain",
    "LoadContext",
    "LoadOrchestrator",
    "LoadResult",
    "LoadState",
    "TaskBoard",
    "TaskStatus",
    "run_load",
]
