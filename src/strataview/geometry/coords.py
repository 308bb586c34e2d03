# src/strataview/geometry/coords.py
"""
Survey-domain <-> render-space mapping.

Render space:
  x  inline axis,    [0, span]
  z  crossline axis, [0, span]
  y  vertical, increasing upward (opposite to time/depth)

Horizons, faults and slice planes all go through index_to_span so that a slice
placed at inline i lines up with data sampled at inline i.
"""
from __future__ import annotations

from typing import Dict, Tuple

from strataview.config.schema import SurveyConfig
from strataview.errors import DegenerateExtent
from strataview.geometry.types import DomainPoint, RenderPoint


def index_to_span(index: float, max_count: int, span_width: float) -> float:
    if max_count <= 1:
        raise DegenerateExtent(f"extent count must be > 1 (got {max_count})")
    return (float(index) / float(max_count - 1)) * float(span_width)


def inline_to_x(inline: float, inline_count: int, span_width: float) -> float:
    return index_to_span(inline, inline_count, span_width)


def crossline_to_z(crossline: float, crossline_count: int, span_width: float) -> float:
    return index_to_span(crossline, crossline_count, span_width)


def time_to_y(time, vertical_offset: float):
    """Accepts a scalar or an ndarray of times."""
    return vertical_offset - time


def domain_to_render(p: DomainPoint, survey: SurveyConfig) -> RenderPoint:
    return RenderPoint(
        x=inline_to_x(p.inline, survey.inline_count, survey.image_width),
        y=time_to_y(p.time, survey.vertical_offset),
        z=crossline_to_z(p.crossline, survey.crossline_count, survey.image_width),
    )


def well_time_to_y(time: float, survey: SurveyConfig) -> float:
    """
    Vertical placement used for well bores and their log curves: the time axis is
    rescaled onto the slice image height, shifted by the top pad.
    """
    if survey.time_size == 0:
        raise DegenerateExtent("time_size must be non-zero")
    return survey.time_size - ((float(time) - survey.top_pad) / survey.time_size) * survey.image_height


def well_position(inline: float, crossline: float, survey: SurveyConfig) -> Tuple[float, float]:
    """(x, z) of a well given its (index_base-based) trace position."""
    base = survey.well_index_base
    x = inline_to_x(inline - base, survey.inline_count, survey.image_width)
    z = crossline_to_z(crossline - base, survey.crossline_count, survey.image_width)
    return x, z


def bounding_box_center(survey: SurveyConfig) -> Dict[str, float]:
    return {
        "x": survey.image_width / 2.0,
        "y": survey.image_height / 2.0,
        "z": survey.image_width / 2.0,
    }
