# src/strataview/cli/run_load.py
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich import print
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from strataview.config.schema import RunConfig
from strataview.geometry.coords import bounding_box_center
from strataview.io.geometry_json import write_scene_json
from strataview.pipeline.orchestrator import LoadContext, LoadOrchestrator, LoadResult
from strataview.pipeline.tasks import LoadTask, TaskStatus
from strataview.utils.config import as_plain_dict, load_run_config
from strataview.viz.preview_map import plot_plan_view

app = typer.Typer(add_completion=False)
console = Console()

_STATUS_STYLE = {
    TaskStatus.PENDING: "dim",
    TaskStatus.LOADING: "cyan",
    TaskStatus.SUCCESS: "green",
    TaskStatus.ERROR: "red",
    TaskStatus.SKIPPED: "yellow",
}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def _cli_overrides(
    *,
    data_dir: Optional[Path],
    api_url: Optional[str],
    las_dir: Optional[Path],
    lines: bool,
) -> Dict[str, Any]:
    src: Dict[str, Any] = {}
    if data_dir is not None:
        src["csv_base_path"] = str(data_dir)
    if api_url is not None:
        src["api_base_url"] = api_url
    if las_dir is not None:
        src["las_dir"] = str(las_dir)
    out: Dict[str, Any] = {"sources": src}
    if lines:
        out["faults"] = {"as_3d": False}
    return out


def _task_table(result: LoadResult) -> Table:
    t = Table(title="Load tasks")
    t.add_column("task")
    t.add_column("status")
    t.add_column("progress", justify="right")
    t.add_column("source")
    t.add_column("message")
    endpoint_of = {"horizon": "horizons", "well": "wells", "wellLog": "well-logs", "fault": "faults"}
    for task in result.state.tasks:
        style = _STATUS_STYLE.get(task.status, "")
        t.add_row(
            task.label,
            f"[{style}]{task.status.value}[/{style}]",
            f"{task.progress:.0f}%",
            result.sources.get(endpoint_of.get(task.id, ""), "-"),
            task.message,
        )
    return t


def build_manifest(result: LoadResult, cfg: RunConfig) -> Dict[str, Any]:
    st = result.state
    return {
        "tasks": {t.id: {"status": t.status.value, "progress": t.progress, "message": t.message} for t in st.tasks},
        "total_progress": st.total_progress,
        "has_errors": st.has_errors,
        "sources": dict(result.sources),
        "n_horizons": len(result.horizons),
        "n_wells": len(result.wells),
        "n_wells_with_logs": sum(1 for w in result.wells if w.log_data is not None),
        "n_fault_files": len(result.faults),
        "n_fault_geometries": result.faults.geometry_count,
        "scene_center": bounding_box_center(cfg.survey),
        "available_log_types": result.logs.available_log_types() if result.logs is not None else ["None"],
        "config": as_plain_dict(cfg),
    }


def _run(cfg: RunConfig, *, log_type: str, show_progress: bool) -> LoadResult:
    ctx = LoadContext.from_config(cfg)
    if len(ctx.chain) == 0:
        raise typer.BadParameter("no data origin configured (set --data-dir, --api-url or --las-dir)")
    print(f"[bold]Data origins:[/bold] {', '.join(ctx.chain.names())}")

    def _on_task(task: LoadTask) -> None:
        if task.status.is_terminal:
            console.log(f"{task.label}: {task.status.value} {task.message}")

    sub = ctx.board.subscribe(on_task_change=_on_task) if show_progress else None
    try:
        result = asyncio.run(LoadOrchestrator(ctx).load_all())
    finally:
        if sub is not None:
            sub.close()

    if log_type != "None" and result.logs is not None:
        result.wells.set_all_log_type(log_type)
    return result


@app.command()
def load(
    config: Optional[Path] = typer.Option(None, help="YAML overrides merged over the defaults"),
    data_dir: Optional[Path] = typer.Option(None, help="CSV base directory"),
    api_url: Optional[str] = typer.Option(None, help="HTTP API base URL (tried before CSV)"),
    las_dir: Optional[Path] = typer.Option(None, help="Directory of LAS files for well logs"),
    out_dir: Path = typer.Option(Path("out")),
    log_type: str = typer.Option("None", help="Log type to draw on every well with log data"),
    lines: bool = typer.Option(False, "--lines", help="Fault sticks as line segments instead of panels"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    _setup_logging(verbose)
    cfg = load_run_config(config, _cli_overrides(data_dir=data_dir, api_url=api_url, las_dir=las_dir, lines=lines))

    result = _run(cfg, log_type=log_type, show_progress=True)
    console.print(_task_table(result))

    scene_path, manifest_path = write_scene_json(out_dir, result.descriptors(), build_manifest(result, cfg))
    print("[green]Wrote[/green]", scene_path)
    print("[green]Wrote[/green]", manifest_path)

    if not any(t.status is TaskStatus.SUCCESS for t in result.state.tasks):
        raise typer.Exit(code=1)


@app.command()
def preview(
    config: Optional[Path] = typer.Option(None, help="YAML overrides merged over the defaults"),
    data_dir: Optional[Path] = typer.Option(None, help="CSV base directory"),
    api_url: Optional[str] = typer.Option(None),
    out_png: Path = typer.Option(Path("out/plan_view.png")),
    lines: bool = typer.Option(False, "--lines"),
    no_labels: bool = typer.Option(False, "--no-labels"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    _setup_logging(verbose)
    cfg = load_run_config(config, _cli_overrides(data_dir=data_dir, api_url=api_url, las_dir=None, lines=lines))

    result = _run(cfg, log_type="None", show_progress=False)
    console.print(_task_table(result))
    out = plot_plan_view(result.descriptors(), out_png, label_wells=not no_labels)
    print("[green]Wrote[/green]", out)


if __name__ == "__main__":
    app()
