from __future__ import annotations

from .orchestrator import LoadContext, LoadOrchestrator, LoadResult, build_chain, run_load
from .tasks import LoadState, LoadTask, Subscription, TaskBoard, TaskStatus

__all__ = [
    "TaskStatus",
    "LoadTask",
    "LoadState",
    "Subscription",
    "TaskBoard",
    "LoadContext",
    "LoadResult",
    "LoadOrchestrator",
    "build_chain",
    "run_load",
]
