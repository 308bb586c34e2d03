# src/strataview/wells/curve.py
"""
Well-log curve geometry.

A log is drawn as a polyline hanging along the well bore: depth maps onto the
bore's vertical extent (shallowest sample at the top), the log value maps onto a
lateral offset in [-max_log_width, +max_log_width] around the bore axis.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from strataview.config.schema import LogTypeConfig, WellLogDisplayConfig
from strataview.errors import DegenerateExtent
from strataview.geometry.colors import hex_to_rgb01
from strataview.geometry.types import GeometryDescriptor
from strataview.wells.logs import LogSample, WellLogSeries, is_null_value

# floor applied before log10 so that zero/negative readings stay in the domain
LOG_EPSILON = 0.001


@dataclass(frozen=True)
class WellAnchor:
    """Where a bore sits in render space: axis at (x, z), spanning top_y down to bottom_y."""

    x: float
    z: float
    top_y: float
    bottom_y: float

    @property
    def height(self) -> float:
        return self.top_y - self.bottom_y


@dataclass
class LogCurveGeometry:
    well_name: str
    log_type: str
    positions: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype="float64"))
    fill_positions: Optional[np.ndarray] = None
    fill_indices: Optional[np.ndarray] = None
    color: int = 0xFFFFFF
    fill_color: Optional[int] = None
    fill_opacity: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return int(self.positions.shape[0]) == 0

    @property
    def has_fill(self) -> bool:
        return self.fill_positions is not None and self.fill_indices is not None

    def __len__(self) -> int:
        return int(self.positions.shape[0])

    def descriptors(self, *, tube_radius: float = 1.0, curve_segments: int = 6) -> List[GeometryDescriptor]:
        if self.is_empty:
            return []
        rgb = hex_to_rgb01(self.color)
        out = [
            GeometryDescriptor(
                kind="tube",
                name=f"well_log:{self.well_name}:{self.log_type}",
                positions=self.positions,
                colors=np.tile(rgb, (len(self), 1)),
                metadata={"radius": tube_radius, "radial_segments": curve_segments, "log_type": self.log_type},
            )
        ]
        if self.has_fill:
            out.append(
                GeometryDescriptor(
                    kind="mesh",
                    name=f"well_log_fill:{self.well_name}:{self.log_type}",
                    positions=self.fill_positions,  # type: ignore[arg-type]
                    indices=self.fill_indices,
                    metadata={"color": self.fill_color, "opacity": self.fill_opacity},
                )
            )
        return out


def normalize_log_value(value: float, cfg: LogTypeConfig) -> float:
    """
    Value -> [0,1] on the log type's display range (linear or base-10 log).
    Reversed ranges (min > max) are allowed and flip the direction.
    """
    vmin, vmax = float(cfg.min), float(cfg.max)
    if cfg.log_scale:
        lo = math.log10(max(vmin, LOG_EPSILON))
        hi = math.log10(max(vmax, LOG_EPSILON))
        v = math.log10(max(float(value), LOG_EPSILON))
    else:
        lo, hi, v = vmin, vmax, float(value)
    if hi == lo:
        raise DegenerateExtent(f"log type {cfg.name} has an empty display range")
    n = (v - lo) / (hi - lo)
    return min(1.0, max(0.0, n))


def log_value_offset(value: Optional[float], cfg: LogTypeConfig, display: WellLogDisplayConfig) -> float:
    if is_null_value(value, display.null_value):
        return float(display.null_offset)
    n = normalize_log_value(float(value), cfg)  # type: ignore[arg-type]
    return (2.0 * n - 1.0) * float(display.max_log_width)


def _fill_ribbon(
    positions: np.ndarray, anchor: WellAnchor, direction: str, max_log_width: float
) -> tuple:
    n = int(positions.shape[0])
    ref_x = anchor.x + max_log_width if direction != "left" else anchor.x - max_log_width

    verts = np.empty((2 * n, 3), dtype="float64")
    verts[0::2] = positions
    verts[1::2, 0] = ref_x
    verts[1::2, 1] = positions[:, 1]
    verts[1::2, 2] = anchor.z

    idx: List[int] = []
    for i in range(n - 1):
        c1, r1, c2, r2 = 2 * i, 2 * i + 1, 2 * (i + 1), 2 * (i + 1) + 1
        idx.extend([c1, r1, c2, c2, r1, r2])
    return verts, np.asarray(idx, dtype="uint32")


def build_log_curve(
    well_name: str,
    anchor: WellAnchor,
    series: WellLogSeries,
    cfg: LogTypeConfig,
    display: WellLogDisplayConfig,
) -> LogCurveGeometry:
    """
    Series -> curve geometry. Returns an empty geometry (nothing to render) when the
    series has no finite depth or a zero depth range. Null samples are kept at the
    configured null offset, so the curve stays continuous through gaps.
    """
    empty = LogCurveGeometry(well_name=well_name, log_type=series.log_type, color=cfg.color)

    finite: List[LogSample] = [s for s in series.samples if s.depth is not None and math.isfinite(s.depth)]
    if not finite:
        return empty
    ordered = sorted(finite, key=lambda s: s.depth)  # stable

    d_min = ordered[0].depth
    d_max = ordered[-1].depth
    d_range = d_max - d_min
    if d_range == 0:
        return empty

    pts = np.empty((len(ordered), 3), dtype="float64")
    for i, s in enumerate(ordered):
        offset = log_value_offset(s.value, cfg, display)
        frac = (s.depth - d_min) / d_range
        pts[i] = (anchor.x + offset, anchor.top_y - frac * anchor.height, anchor.z)

    geom = LogCurveGeometry(well_name=well_name, log_type=series.log_type, positions=pts, color=cfg.color)

    fill = cfg.fill
    if fill is not None and fill.enabled and len(ordered) >= 2:
        verts, idx = _fill_ribbon(pts, anchor, fill.direction, float(display.max_log_width))
        geom.fill_positions = verts
        geom.fill_indices = idx
        geom.fill_color = fill.color
        geom.fill_opacity = fill.opacity
    return geom
