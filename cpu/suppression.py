"""
CPU reference implementation for non-maximal suppression.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from common.gradient import DIRECTION_STEPS, GradientField


def interpolate_magnitude(magnitude: np.ndarray, xx: np.ndarray, yy: np.ndarray) -> np.ndarray:
    """
    Bilinear estimate of gradient magnitude at subpixel points.

    Uses the floor/ceil lattice points around each (xx, yy). Lattice points
    outside the grid count as magnitude 0. When a point lies on a lattice
    column and/or row, this reduces to linear interpolation or a lookup.

    Args:
        magnitude: (H, W) float64 magnitudes
        xx, yy: float arrays of equal shape with subpixel coordinates

    Returns:
        float64 array shaped like xx
    """
    h, w = magnitude.shape
    xx = np.asarray(xx, dtype=np.float64)
    yy = np.asarray(yy, dtype=np.float64)

    x1 = np.floor(xx)
    x2 = np.ceil(xx)
    y1 = np.floor(yy)
    y2 = np.ceil(yy)

    def sample(xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
        valid = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
        xi = np.clip(xs, 0, w - 1).astype(np.intp)
        yi = np.clip(ys, 0, h - 1).astype(np.intp)
        return np.where(valid, magnitude[yi, xi], 0.0)

    m11 = sample(x1, y1)
    m12 = sample(x1, y2)
    m21 = sample(x2, y1)
    m22 = sample(x2, y2)

    bilinear = (
        (x2 - xx) * (y2 - yy) * m11
        + (x2 - xx) * (yy - y1) * m12
        + (xx - x1) * (y2 - yy) * m21
        + (xx - x1) * (yy - y1) * m22
    )
    # Probe on a lattice column: interpolate along y only.
    along_y = (y2 - yy) * m11 + (yy - y1) * m12
    # Probe on a lattice row: interpolate along x only.
    along_x = (x2 - xx) * m11 + (xx - x1) * m21

    on_column = x1 == x2
    on_row = y1 == y2
    return np.where(
        ~on_column & ~on_row,
        bilinear,
        np.where(on_column & on_row, m11, np.where(on_column, along_y, along_x)),
    )


def suppress(field: GradientField) -> GradientField:
    """
    Subpixel non-maximal suppression.

    Each pixel is compared with bilinear magnitude estimates one unit away on
    both sides along its gradient direction. It survives only if
    m >= estimate ahead and m > estimate behind, so a flat ridge keeps a
    single pixel. Suppressed pixels become the zero gradient.

    Args:
        field: raw gradient field

    Returns:
        GradientField of the same shape
    """
    h, w = field.shape
    magnitude = field.magnitude()
    theta = field.direction()
    cos_t = np.cos(theta)
    sin_t = np.sin(theta)

    ys, xs = np.mgrid[0:h, 0:w].astype(np.float64)

    ahead = interpolate_magnitude(magnitude, xs + cos_t, ys + sin_t)
    behind = interpolate_magnitude(magnitude, xs - cos_t, ys - sin_t)

    keep = (magnitude >= ahead) & (magnitude > behind)
    return field.masked(keep)


def _fast_neighbours(step: Tuple[int, int]) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """
    (ahead, behind) neighbour offsets (dx, dy) for one direction step.

    Axis classes compare inclusively on the negative side, diagonal classes
    on the +y side.
    """
    sx, sy = step
    sign = 1 if sx and sy else -1
    return (sign * sx, sign * sy), (-sign * sx, -sign * sy)


_FAST_NEIGHBOURS = {direction: _fast_neighbours(step) for direction, step in DIRECTION_STEPS.items()}


def _shifted(values: np.ndarray, ddx: int, ddy: int) -> np.ndarray:
    """out[y, x] = values[y + ddy, x + ddx], or 0 outside the grid."""
    h, w = values.shape
    padded = np.pad(values, 1, mode="constant", constant_values=0)
    return padded[1 + ddy:1 + ddy + h, 1 + ddx:1 + ddx + w]


def fast_suppress(field: GradientField) -> GradientField:
    """
    Non-maximal suppression against the two integer neighbours along the
    quantized gradient direction (no interpolation).
    """
    magnitude = field.magnitude()
    directions = field.quantized_direction()

    keep = np.zeros(field.shape, dtype=bool)
    for direction, ((ax, ay), (bx, by)) in _FAST_NEIGHBOURS.items():
        ahead = _shifted(magnitude, ax, ay)
        behind = _shifted(magnitude, bx, by)
        keep |= (directions == direction) & (magnitude >= ahead) & (magnitude > behind)

    return field.masked(keep)
