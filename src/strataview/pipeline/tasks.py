# src/strataview/pipeline/tasks.py
"""
Task state for a load run.

Each task walks pending -> loading -> {success | error | skipped}. Every mutation
is published synchronously to subscribers as a (task, aggregate state) event.
Subscribers come and go through Subscription.close(); publishing iterates over a
snapshot, so a callback may unsubscribe itself. A callback that raises is logged
and never changes task state or reaches the mutating code.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import AsyncIterator, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class TaskStatus(str, Enum):
    PENDING = "pending"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.SUCCESS, TaskStatus.ERROR, TaskStatus.SKIPPED)


@dataclass(frozen=True)
class LoadTask:
    id: str
    label: str
    status: TaskStatus = TaskStatus.PENDING
    progress: float = 0.0
    message: str = ""


@dataclass(frozen=True)
class LoadState:
    tasks: Tuple[LoadTask, ...]
    total_progress: float
    is_complete: bool
    has_errors: bool
    current_task: Optional[str]

    def task(self, task_id: str) -> Optional[LoadTask]:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None


TaskCallback = Callable[[LoadTask], None]
StateCallback = Callable[[LoadState], None]


@dataclass
class Subscription:
    board: "TaskBoard"
    on_task_change: Optional[TaskCallback] = None
    on_aggregate_change: Optional[StateCallback] = None
    active: bool = field(default=True)

    def close(self) -> None:
        if self.active:
            self.active = False
            self.board._drop(self)


class TaskBoard:
    def __init__(self) -> None:
        self._tasks: Dict[str, LoadTask] = {}
        self._subs: List[Subscription] = []

    # -------------------------------------------------------------------------
    # subscriptions
    # -------------------------------------------------------------------------

    def subscribe(
        self,
        on_task_change: Optional[TaskCallback] = None,
        on_aggregate_change: Optional[StateCallback] = None,
    ) -> Subscription:
        sub = Subscription(board=self, on_task_change=on_task_change, on_aggregate_change=on_aggregate_change)
        self._subs.append(sub)
        return sub

    def _drop(self, sub: Subscription) -> None:
        if sub in self._subs:
            self._subs.remove(sub)

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    def _publish(self, task: LoadTask) -> None:
        state = self.state()
        for sub in list(self._subs):
            if not sub.active:
                continue
            try:
                if sub.on_task_change is not None:
                    sub.on_task_change(task)
                if sub.on_aggregate_change is not None:
                    sub.on_aggregate_change(state)
            except Exception:
                logger.exception("Task subscriber failed on %s:%s", task.id, task.status.value)

    async def stream(self) -> AsyncIterator[LoadState]:
        """
        Aggregate states as an async iterator; ends after the first complete state.
        Must be consumed on the loop that mutates the board.
        """
        queue: "asyncio.Queue[LoadState]" = asyncio.Queue()
        sub = self.subscribe(on_aggregate_change=queue.put_nowait)
        try:
            if self._tasks and self.state().is_complete:
                yield self.state()
                return
            while True:
                st = await queue.get()
                yield st
                if st.is_complete:
                    return
        finally:
            sub.close()

    # -------------------------------------------------------------------------
    # transitions
    # -------------------------------------------------------------------------

    def _get(self, task_id: str) -> LoadTask:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise KeyError(f"unknown task: {task_id}") from None

    def _set(self, task: LoadTask) -> LoadTask:
        self._tasks[task.id] = task
        self._publish(task)
        return task

    def register_task(self, task_id: str, label: str) -> LoadTask:
        return self._set(LoadTask(id=task_id, label=label))

    def update_task(self, task_id: str, *, progress: Optional[float] = None, message: Optional[str] = None) -> LoadTask:
        t = self._get(task_id)
        if t.status.is_terminal:
            logger.debug("Ignoring update for finished task %s", task_id)
            return t
        p = t.progress if progress is None else min(100.0, max(0.0, float(progress)))
        return self._set(
            replace(t, status=TaskStatus.LOADING, progress=p, message=t.message if message is None else message)
        )

    def complete_task(self, task_id: str, success: bool, message: str = "") -> LoadTask:
        t = self._get(task_id)
        if t.status.is_terminal:
            logger.debug("Task %s already finished as %s", task_id, t.status.value)
            return t
        status = TaskStatus.SUCCESS if success else TaskStatus.ERROR
        return self._set(replace(t, status=status, progress=100.0, message=message))

    def skip_task(self, task_id: str, reason: str = "") -> LoadTask:
        t = self._get(task_id)
        if t.status.is_terminal:
            logger.debug("Task %s already finished as %s", task_id, t.status.value)
            return t
        return self._set(replace(t, status=TaskStatus.SKIPPED, progress=100.0, message=reason))

    # -------------------------------------------------------------------------
    # queries
    # -------------------------------------------------------------------------

    def task(self, task_id: str) -> LoadTask:
        return self._get(task_id)

    def state(self) -> LoadState:
        tasks = tuple(self._tasks.values())
        total = sum(t.progress for t in tasks) / len(tasks) if tasks else 0.0
        current = next((t.label for t in tasks if t.status is TaskStatus.LOADING), None)
        return LoadState(
            tasks=tasks,
            total_progress=total,
            is_complete=bool(tasks) and all(t.status.is_terminal for t in tasks),
            has_errors=any(t.status is TaskStatus.ERROR for t in tasks),
            current_task=current,
        )

    def reset(self) -> None:
        self._tasks.clear()
