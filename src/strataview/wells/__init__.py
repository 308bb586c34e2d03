from __future__ import annotations

from .curve import LogCurveGeometry, WellAnchor, build_log_curve, log_value_offset, normalize_log_value
from .logs import LogSample, WellLogData, WellLogLibrary, WellLogSeries, build_well_log_library
from .names import NameReconciler
from .registry import Well, WellRegistry

__all__ = [
    "NameReconciler",
    "LogSample",
    "WellLogSeries",
    "WellLogData",
    "WellLogLibrary",
    "build_well_log_library",
    "WellAnchor",
    "LogCurveGeometry",
    "normalize_log_value",
    "log_value_offset",
    "build_log_curve",
    "Well",
    "WellRegistry",
]
