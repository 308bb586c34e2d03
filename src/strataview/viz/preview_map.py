# src/strataview/viz/preview_map.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np

from strataview.geometry.types import GeometryDescriptor

# plan view: render x across, render z up
_KIND_COLORS: Dict[str, str] = {
    "well": "#111111",
    "fault": "#D62728",
}


def _family(d: GeometryDescriptor) -> str:
    return d.name.split(":", 1)[0]


def _fault_segments(d: GeometryDescriptor) -> np.ndarray:
    """(K,2,2) plan-view segments: line pairs for 'lines', panel edges for meshes."""
    p = d.positions[:, [0, 2]].astype("float64")
    if d.kind == "lines":
        n = (p.shape[0] // 2) * 2
        return p[:n].reshape(-1, 2, 2)
    # panels are stored as 4 corners each: top_i, bottom_i, top_j, bottom_j
    n = (p.shape[0] // 4) * 4
    quads = p[:n].reshape(-1, 4, 2)
    return np.concatenate([quads[:, [0, 2]], quads[:, [1, 3]]], axis=0)


def plot_plan_view(
    descriptors: Sequence[GeometryDescriptor],
    out_png: Path,
    *,
    title: str = "Survey plan view",
    label_wells: bool = True,
    max_horizon_points: Optional[int] = 200_000,
) -> Path:
    """
    QC plot of horizons (colored points), wells (dots + names) and fault traces,
    projected onto the render x/z plane.
    """
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
    from matplotlib.collections import LineCollection

    out_png = Path(out_png)
    fig = plt.figure(figsize=(8.5, 7.5), dpi=160)
    ax = plt.axes()

    fault_segs: List[np.ndarray] = []
    for d in descriptors:
        if d.is_empty:
            continue
        fam = _family(d)
        if fam == "horizon":
            p = d.positions
            c = d.colors
            if max_horizon_points and p.shape[0] > max_horizon_points:
                step = int(np.ceil(p.shape[0] / max_horizon_points))
                p = p[::step]
                c = c[::step] if c is not None else None
            ax.scatter(p[:, 0], p[:, 2], s=0.5, c=c if c is not None else "#9E9E9E", alpha=0.6, rasterized=True)
        elif fam == "fault":
            fault_segs.append(_fault_segments(d))
        elif fam == "well":
            x, z = float(d.positions[0, 0]), float(d.positions[0, 2])
            ax.scatter([x], [z], s=12, c=_KIND_COLORS["well"], zorder=3)
            if label_wells:
                ax.annotate(str(d.metadata.get("label", "")), (x, z), fontsize=6, xytext=(3, 3), textcoords="offset points")

    if fault_segs:
        segs = np.concatenate(fault_segs, axis=0)
        ax.add_collection(LineCollection(segs, colors=_KIND_COLORS["fault"], linewidths=0.6, alpha=0.8))

    ax.set_xlabel("x (inline)")
    ax.set_ylabel("z (crossline)")
    ax.set_title(title)
    ax.autoscale()
    ax.set_aspect("equal", adjustable="box")
    out_png.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(out_png, format=out_png.suffix.lstrip("."))
    plt.close(fig)
    return out_png
