from __future__ import annotations

import asyncio
from typing import List

import pytest

from strataview.pipeline.tasks import LoadState, LoadTask, TaskBoard, TaskStatus


def test_task_lifecycle_and_aggregate() -> None:
    b = TaskBoard()
    b.register_task("horizon", "Horizons")
    b.register_task("well", "Wells")
    assert b.state().total_progress == 0.0
    assert not b.state().is_complete

    b.update_task("horizon", progress=50)
    st = b.state()
    assert st.current_task == "Horizons"
    assert st.total_progress == pytest.approx(25.0)

    b.complete_task("horizon", True, "Loaded")
    b.skip_task("well", "No data")
    st = b.state()
    assert st.is_complete
    assert not st.has_errors
    assert st.total_progress == pytest.approx(100.0)
    assert st.current_task is None
    assert st.task("well").status is TaskStatus.SKIPPED
    assert st.task("well").message == "No data"


def test_error_completion_sets_flag() -> None:
    b = TaskBoard()
    b.register_task("fault", "Faults")
    b.complete_task("fault", False, "Failed")
    st = b.state()
    assert st.has_errors
    assert st.task("fault").progress == 100.0


def test_finished_tasks_ignore_updates() -> None:
    b = TaskBoard()
    b.register_task("a", "A")
    b.complete_task("a", True)
    b.update_task("a", progress=10)
    assert b.task("a").status is TaskStatus.SUCCESS


def test_finished_tasks_keep_their_outcome() -> None:
    b = TaskBoard()
    b.register_task("fault", "Faults")
    b.complete_task("fault", True, "Loaded")
    b.skip_task("fault", "No data")
    b.complete_task("fault", False, "Failed")
    t = b.task("fault")
    assert t.status is TaskStatus.SUCCESS
    assert t.message == "Loaded"

    b.register_task("wellLog", "Well Logs")
    b.skip_task("wellLog", "No data")
    b.complete_task("wellLog", True)
    assert b.task("wellLog").status is TaskStatus.SKIPPED


def test_raising_subscriber_does_not_block_others() -> None:
    b = TaskBoard()
    seen: List[str] = []

    def _boom(task: LoadTask) -> None:
        raise RuntimeError("subscriber bug")

    b.subscribe(on_task_change=_boom)
    b.subscribe(on_task_change=lambda t: seen.append(t.status.value))
    b.register_task("a", "A")
    b.complete_task("a", True)
    assert seen == ["pending", "success"]
    assert b.task("a").status is TaskStatus.SUCCESS


def test_unknown_task() -> None:
    with pytest.raises(KeyError):
        TaskBoard().update_task("nope", progress=1)


def test_subscribers_notified_synchronously_and_can_leave() -> None:
    b = TaskBoard()
    seen: List[LoadTask] = []
    states: List[LoadState] = []
    sub = b.subscribe(on_task_change=seen.append, on_aggregate_change=states.append)

    b.register_task("a", "A")
    b.update_task("a", progress=40)
    assert [t.status for t in seen] == [TaskStatus.PENDING, TaskStatus.LOADING]
    assert states[-1].total_progress == pytest.approx(40.0)

    sub.close()
    sub.close()
    b.complete_task("a", True)
    assert len(seen) == 2
    assert b.subscriber_count == 0


def test_subscriber_may_unsubscribe_during_publish() -> None:
    b = TaskBoard()
    calls: List[str] = []

    def once(task: LoadTask) -> None:
        calls.append("once")
        first.close()

    first = b.subscribe(on_task_change=once)
    b.subscribe(on_task_change=lambda t: calls.append("other"))
    b.register_task("a", "A")
    b.register_task("b", "B")
    assert calls == ["once", "other", "other"]


def test_stream_ends_on_completion() -> None:
    async def run() -> List[LoadState]:
        b = TaskBoard()
        b.register_task("a", "A")
        out: List[LoadState] = []

        async def consume() -> None:
            async for st in b.stream():
                out.append(st)

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0)
        b.update_task("a", progress=10)
        b.complete_task("a", True)
        await asyncio.wait_for(consumer, timeout=1.0)
        assert b.subscriber_count == 0
        return out

    states = asyncio.run(run())
    assert states[-1].is_complete
    assert [s.total_progress for s in states] == [10.0, 100.0]


def test_reset_clears_tasks() -> None:
    b = TaskBoard()
    b.register_task("horizon", "Horizons")
    b.complete_task("horizon", True, "Loaded")
    b.reset()
    assert b.state().tasks == ()
    with pytest.raises(KeyError):
        b.task("horizon")
