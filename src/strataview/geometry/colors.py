# src/strataview/geometry/colors.py
from __future__ import annotations

import numpy as np


def hex_to_rgb01(color: int) -> np.ndarray:
    c = int(color) & 0xFFFFFF
    return np.array([(c >> 16) & 0xFF, (c >> 8) & 0xFF, c & 0xFF], dtype="float64") / 255.0


def _hue_channel(p: np.ndarray, q: np.ndarray, t: np.ndarray) -> np.ndarray:
    t = np.mod(t, 1.0)
    return np.where(
        t < 1.0 / 6.0,
        p + (q - p) * 6.0 * t,
        np.where(
            t < 0.5,
            q,
            np.where(t < 2.0 / 3.0, p + (q - p) * 6.0 * (2.0 / 3.0 - t), p),
        ),
    )


def hsl_to_rgb(h: np.ndarray, s: float = 1.0, l: float = 0.5) -> np.ndarray:
    """
    Vectorized HSL -> RGB in [0,1]. Hue wraps modulo 1 (h=1.2 is the same colour
    as h=0.2), which is what the horizon depth ramp relies on.
    Returns (N,3) float64.
    """
    h = np.mod(np.asarray(h, dtype="float64").reshape(-1), 1.0)
    s = float(np.clip(s, 0.0, 1.0))
    l = float(np.clip(l, 0.0, 1.0))
    if s == 0.0:
        return np.repeat(np.full((h.size, 1), l, dtype="float64"), 3, axis=1)

    q = l * (1.0 + s) if l <= 0.5 else l + s - l * s
    p = 2.0 * l - q
    pa = np.full_like(h, p)
    qa = np.full_like(h, q)
    r = _hue_channel(pa, qa, h + 1.0 / 3.0)
    g = _hue_channel(pa, qa, h)
    b = _hue_channel(pa, qa, h - 1.0 / 3.0)
    return np.column_stack([r, g, b])
