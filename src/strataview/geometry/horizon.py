# src/strataview/geometry/horizon.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from strataview.config.schema import SurveyConfig
from strataview.errors import EmptyResult
from strataview.geometry.colors import hsl_to_rgb
from strataview.geometry.coords import time_to_y
from strataview.geometry.types import DomainPoint, GeometryDescriptor
from strataview.io.csv import to_float
from strataview.io.tables import HORIZON_COLUMNS, RowTable

logger = logging.getLogger(__name__)

# fraction of the hue circle used by the depth ramp (red = shallow)
HUE_SPAN = 0.7


@dataclass(frozen=True)
class Horizon:
    """
    One horizon surface as a point cloud.

    domain:    (N,3) inline, crossline, z as read from the rows
    positions: (N,3) render-space x, y, z
    colors:    (N,3) rgb in [0,1], depth ramp
    All three arrays are read-only once built.
    """

    z_column: str
    domain: np.ndarray
    positions: np.ndarray
    colors: np.ndarray
    z_min: float
    z_max: float

    def __len__(self) -> int:
        return int(self.domain.shape[0])

    @property
    def points(self) -> List[DomainPoint]:
        return [DomainPoint(float(a), float(b), float(c)) for a, b, c in self.domain]

    def descriptor(self) -> GeometryDescriptor:
        return GeometryDescriptor(
            kind="points",
            name=f"horizon:{self.z_column}",
            positions=self.positions,
            colors=self.colors,
            metadata={"z_column": self.z_column, "z_min": self.z_min, "z_max": self.z_max, "n_points": len(self)},
        )


def parse_horizon_rows(rows: Sequence[Mapping[str, object]], z_column: str) -> np.ndarray:
    """
    Typed parse of horizon rows -> (N,3) float64 [inline, crossline, z].
    Rows where any of the three fields is missing or non-finite are dropped.
    """
    out: List[List[float]] = []
    for r in rows:
        il = to_float(r.get("Inline"))
        xl = to_float(r.get("Crossline"))
        z = to_float(r.get(z_column))
        if il is None or xl is None or z is None:
            continue
        out.append([il, xl, z])
    if not out:
        return np.zeros((0, 3), dtype="float64")
    return np.asarray(out, dtype="float64")


def _normalize(v: np.ndarray, vmin: float, vmax: float) -> np.ndarray:
    rng = vmax - vmin
    if rng == 0.0:
        # a single inline/crossline line: everything sits at the origin of that axis
        return np.zeros_like(v)
    return (v - vmin) / rng


def depth_colors(z: np.ndarray, z_min: float, z_max: float) -> np.ndarray:
    """
    Hue ramp over [z_min, z_min + (z_max - z_min)/2]. Values past the half-range keep
    increasing the hue and wrap around the colour circle (no clamping).
    """
    half = (z_max - z_min) / 2.0
    if half == 0.0:
        t = np.zeros_like(z)
    else:
        t = (z - z_min) / half
    return hsl_to_rgb(t * HUE_SPAN, 1.0, 0.5)


def build_horizon_from_array(domain: np.ndarray, z_column: str, survey: SurveyConfig) -> Horizon:
    domain = np.array(domain, dtype="float64").reshape(-1, 3)
    if domain.shape[0] == 0:
        raise EmptyResult(f"No valid horizon points for column '{z_column}'")

    il, xl, z = domain[:, 0], domain[:, 1], domain[:, 2]

    # one pass for ranges
    il_min, il_max = float(il.min()), float(il.max())
    xl_min, xl_max = float(xl.min()), float(xl.max())
    z_min, z_max = float(z.min()), float(z.max())

    # horizon sampling is irregular: normalize by observed range, not survey count
    x = _normalize(il, il_min, il_max) * survey.image_width
    zz = _normalize(xl, xl_min, xl_max) * survey.image_width
    y = time_to_y(z, survey.vertical_offset)

    positions = np.column_stack([x, y, zz]).astype("float32")
    colors = depth_colors(z, z_min, z_max).astype("float32")

    for a in (domain, positions, colors):
        a.setflags(write=False)

    return Horizon(
        z_column=str(z_column),
        domain=domain,
        positions=positions,
        colors=colors,
        z_min=z_min,
        z_max=z_max,
    )


def build_horizon(table: RowTable, z_column: str, survey: SurveyConfig) -> Horizon:
    """
    Rows -> Horizon. Requires Inline, Crossline and the named z column
    (MissingColumns before any row is read). Zero usable rows -> EmptyResult.
    """
    table.require(list(HORIZON_COLUMNS) + [z_column])
    domain = parse_horizon_rows(table.rows, z_column)
    dropped = len(table.rows) - int(domain.shape[0])
    if dropped:
        logger.debug("Horizon %s: dropped %d unparseable rows", z_column, dropped)
    h = build_horizon_from_array(domain, z_column, survey)
    logger.info("Horizon loaded: %s (%d points)", z_column, len(h))
    return h


class HorizonCollection:
    """Owns the built horizons; dispose() releases them as a batch."""

    def __init__(self) -> None:
        self._horizons: Dict[str, Horizon] = {}

    def add(self, horizon: Horizon) -> Horizon:
        self._horizons[horizon.z_column] = horizon
        return horizon

    def get(self, z_column: str) -> Optional[Horizon]:
        return self._horizons.get(z_column)

    def __iter__(self) -> Iterator[Horizon]:
        return iter(list(self._horizons.values()))

    def __len__(self) -> int:
        return len(self._horizons)

    def descriptors(self) -> List[GeometryDescriptor]:
        return [h.descriptor() for h in self._horizons.values()]

    def dispose(self) -> None:
        self._horizons.clear()
