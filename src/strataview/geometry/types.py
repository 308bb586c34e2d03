# src/strataview/geometry/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

import numpy as np


@dataclass(frozen=True)
class DomainPoint:
    """Survey-domain sample: inline/crossline trace index plus time (or depth)."""

    inline: float
    crossline: float
    time: float


@dataclass(frozen=True)
class RenderPoint:
    x: float
    y: float
    z: float

    def as_tuple(self) -> tuple:
        return (self.x, self.y, self.z)


def points_to_array(points: Sequence[RenderPoint]) -> np.ndarray:
    if not points:
        return np.zeros((0, 3), dtype="float32")
    return np.asarray([p.as_tuple() for p in points], dtype="float32")


@dataclass
class GeometryDescriptor:
    """
    Renderer-agnostic geometry: a flat vertex list with optional per-vertex colors
    and an optional triangle/segment index list. The renderer owns every GPU-side
    resource built from this.
    """

    kind: str  # "points" | "lines" | "mesh" | "tube" | "polyline"
    name: str
    positions: np.ndarray
    colors: Optional[np.ndarray] = None
    indices: Optional[np.ndarray] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.positions = np.asarray(self.positions, dtype="float32").reshape(-1, 3)
        if self.colors is not None:
            self.colors = np.asarray(self.colors, dtype="float32").reshape(-1, 3)
            if self.colors.shape[0] != self.positions.shape[0]:
                raise ValueError(
                    f"colors ({self.colors.shape[0]}) must match positions ({self.positions.shape[0]})"
                )
        if self.indices is not None:
            self.indices = np.asarray(self.indices, dtype="uint32").reshape(-1)

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.vertex_count == 0

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "kind": self.kind,
            "name": self.name,
            "positions": self.positions.astype("float64").round(4).reshape(-1).tolist(),
        }
        if self.colors is not None:
            out["colors"] = self.colors.astype("float64").round(4).reshape(-1).tolist()
        if self.indices is not None:
            out["indices"] = self.indices.astype("int64").tolist()
        if self.metadata:
            out["metadata"] = dict(self.metadata)
        return out
