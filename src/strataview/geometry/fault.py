# src/strataview/geometry/fault.py
"""
Fault reconstruction from stick surveys.

A fault file holds one row per picked point; rows sharing a Fault_Stick id form
one stick (normally two points: top and bottom). Two output modes:

  lines   one segment per 2-point stick
  panels  a quad (two triangles) between each pair of adjacent 2-point sticks,
          adjacency taken from the ascending stick-id order, never bridging two
          differently named fault planes
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from strataview.config.schema import SurveyConfig
from strataview.errors import ParseError
from strataview.geometry.coords import domain_to_render
from strataview.geometry.types import DomainPoint, GeometryDescriptor, RenderPoint, points_to_array
from strataview.io.csv import to_float, to_int
from strataview.io.tables import FAULT_COLUMNS, RowTable

logger = logging.getLogger(__name__)


@dataclass
class FaultStick:
    id: int
    fault_plane_name: str
    points: List[DomainPoint] = field(default_factory=list)

    @property
    def is_pair(self) -> bool:
        return len(self.points) == 2

    @property
    def top(self) -> DomainPoint:
        return self.points[0]

    @property
    def bottom(self) -> DomainPoint:
        return self.points[1]


@dataclass(frozen=True)
class FaultLineSegment:
    stick_id: int
    name: str
    a: RenderPoint
    b: RenderPoint


@dataclass(frozen=True)
class FaultPanel:
    """Quad between two sticks: corners (top_i, bottom_i, top_j, bottom_j)."""

    stick_ids: Tuple[int, int]
    name: str
    corners: Tuple[RenderPoint, RenderPoint, RenderPoint, RenderPoint]

    # (A,B,C) and (B,D,C): both triangles share the winding of the quad
    TRIANGLES = ((0, 1, 2), (1, 3, 2))

    def triangles(self) -> List[Tuple[RenderPoint, RenderPoint, RenderPoint]]:
        c = self.corners
        return [(c[i], c[j], c[k]) for i, j, k in self.TRIANGLES]


FaultGeometry = Union[FaultLineSegment, FaultPanel]


# -----------------------------------------------------------------------------
# Grouping
# -----------------------------------------------------------------------------

def _parse_fault_point(r: Mapping[str, object]) -> Optional[Tuple[int, str, DomainPoint]]:
    sid = to_int(r.get("Fault_Stick"))
    il = to_float(r.get("inline_n"))
    xl = to_float(r.get("crossline_n"))
    t = to_float(r.get("Times"))
    if sid is None or il is None or xl is None or t is None:
        return None
    name = str(r.get("Fault_Plane") or "").strip()
    return sid, name, DomainPoint(il, xl, t)


def group_sticks(rows: Sequence[Mapping[str, object]]) -> Dict[int, FaultStick]:
    """
    Group rows by stick id, preserving first-seen order both across sticks and
    for points within a stick. Malformed rows are skipped.
    """
    sticks: Dict[int, FaultStick] = {}
    for r in rows:
        parsed = _parse_fault_point(r)
        if parsed is None:
            continue
        sid, name, pt = parsed
        st = sticks.get(sid)
        if st is None:
            st = FaultStick(id=sid, fault_plane_name=name)
            sticks[sid] = st
        st.points.append(pt)
    return sticks


def parse_fault_table(table: RowTable) -> Dict[int, FaultStick]:
    table.require(FAULT_COLUMNS)
    sticks = group_sticks(table.rows)
    if not sticks:
        raise ParseError(f"No fault sticks could be formed from {table.name}")
    return sticks


# -----------------------------------------------------------------------------
# Reconstruction
# -----------------------------------------------------------------------------

def build_fault_lines(sticks: Mapping[int, FaultStick], survey: SurveyConfig) -> List[FaultLineSegment]:
    out: List[FaultLineSegment] = []
    for st in sticks.values():
        if not st.is_pair:
            continue
        out.append(
            FaultLineSegment(
                stick_id=st.id,
                name=st.fault_plane_name,
                a=domain_to_render(st.top, survey),
                b=domain_to_render(st.bottom, survey),
            )
        )
    return out


def build_fault_panels(sticks: Mapping[int, FaultStick], survey: SurveyConfig) -> List[FaultPanel]:
    ids = sorted(sticks.keys())
    out: List[FaultPanel] = []
    for i in range(len(ids) - 1):
        s1 = sticks[ids[i]]
        s2 = sticks[ids[i + 1]]
        if not (s1.is_pair and s2.is_pair):
            continue
        if s1.fault_plane_name != s2.fault_plane_name:
            continue
        out.append(
            FaultPanel(
                stick_ids=(s1.id, s2.id),
                name=s1.fault_plane_name,
                corners=(
                    domain_to_render(s1.top, survey),
                    domain_to_render(s1.bottom, survey),
                    domain_to_render(s2.top, survey),
                    domain_to_render(s2.bottom, survey),
                ),
            )
        )
    return out


@dataclass
class FaultReconstruction:
    """Geometry reconstructed from one fault file."""

    source: str
    mode: str  # "panels" | "lines"
    sticks: Dict[int, FaultStick]
    geometry: List[FaultGeometry]

    def descriptor(self) -> GeometryDescriptor:
        if self.mode == "lines":
            pts: List[RenderPoint] = []
            for seg in self.geometry:
                pts.extend([seg.a, seg.b])  # type: ignore[union-attr]
            idx = np.arange(len(pts), dtype="uint32")
            kind = "lines"
        else:
            pts = []
            tri: List[int] = []
            for k, panel in enumerate(self.geometry):
                pts.extend(panel.corners)  # type: ignore[union-attr]
                base = 4 * k
                for a, b, c in FaultPanel.TRIANGLES:
                    tri.extend([base + a, base + b, base + c])
            idx = np.asarray(tri, dtype="uint32")
            kind = "mesh"
        names = sorted({g.name for g in self.geometry})
        return GeometryDescriptor(
            kind=kind,
            name=f"fault:{self.source}",
            positions=points_to_array(pts),
            indices=idx,
            metadata={"mode": self.mode, "fault_planes": names, "n_sticks": len(self.sticks), "n_items": len(self.geometry)},
        )


def reconstruct_fault(table: RowTable, survey: SurveyConfig, *, as_3d: bool = True) -> FaultReconstruction:
    sticks = parse_fault_table(table)
    if as_3d:
        geom: List[FaultGeometry] = list(build_fault_panels(sticks, survey))
        mode = "panels"
    else:
        geom = list(build_fault_lines(sticks, survey))
        mode = "lines"
    skipped = sum(1 for s in sticks.values() if not s.is_pair)
    if skipped:
        logger.debug("Fault %s: %d sticks without exactly two points", table.name, skipped)
    logger.info("Fault %s loaded: %d %s", table.name, len(geom), mode)
    return FaultReconstruction(source=table.name, mode=mode, sticks=sticks, geometry=geom)


class FaultCollection:
    """Result collection for every fault file; disposed as a batch."""

    def __init__(self) -> None:
        self._items: List[FaultReconstruction] = []

    def add(self, rec: FaultReconstruction) -> None:
        self._items.append(rec)

    def __iter__(self) -> Iterator[FaultReconstruction]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def geometry_count(self) -> int:
        return sum(len(r.geometry) for r in self._items)

    def descriptors(self) -> List[GeometryDescriptor]:
        return [r.descriptor() for r in self._items if r.geometry]

    def dispose(self) -> None:
        self._items.clear()
