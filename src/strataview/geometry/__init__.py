from __future__ import annotations

from .coords import crossline_to_z, domain_to_render, index_to_span, inline_to_x, time_to_y
from .fault import (
    FaultCollection,
    FaultLineSegment,
    FaultPanel,
    FaultReconstruction,
    FaultStick,
    build_fault_lines,
    build_fault_panels,
    group_sticks,
    reconstruct_fault,
)
from .horizon import Horizon, HorizonCollection, build_horizon
from .types import DomainPoint, GeometryDescriptor, RenderPoint

__all__ = [
    "DomainPoint",
    "RenderPoint",
    "GeometryDescriptor",
    "index_to_span",
    "inline_to_x",
    "crossline_to_z",
    "time_to_y",
    "domain_to_render",
    "Horizon",
    "HorizonCollection",
    "build_horizon",
    "FaultStick",
    "FaultLineSegment",
    "FaultPanel",
    "FaultReconstruction",
    "FaultCollection",
    "group_sticks",
    "build_fault_lines",
    "build_fault_panels",
    "reconstruct_fault",
]
