"""
GPU subpixel non-maximal suppression using CuPy (vectorized).
"""

from __future__ import annotations

from gpu.convolve import _gpu_import_error, cp


def _gpu_interpolate(magnitude: cp.ndarray, xx: cp.ndarray, yy: cp.ndarray) -> cp.ndarray:
    h, w = magnitude.shape

    x1 = cp.floor(xx)
    x2 = cp.ceil(xx)
    y1 = cp.floor(yy)
    y2 = cp.ceil(yy)

    def sample(xs, ys):
        valid = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)
        xi = cp.clip(xs, 0, w - 1).astype(cp.intp)
        yi = cp.clip(ys, 0, h - 1).astype(cp.intp)
        return cp.where(valid, magnitude[yi, xi], 0.0)

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
    along_y = (y2 - yy) * m11 + (yy - y1) * m12
    along_x = (x2 - xx) * m11 + (xx - x1) * m21

    on_column = x1 == x2
    on_row = y1 == y2
    return cp.where(
        ~on_column & ~on_row,
        bilinear,
        cp.where(on_column & on_row, m11, cp.where(on_column, along_y, along_x)),
    )


def gpu_suppress(dx: cp.ndarray, dy: cp.ndarray) -> tuple[cp.ndarray, cp.ndarray]:
    """
    GPU counterpart of cpu.suppression.suppress.

    Args:
        dx, dy: 2D float64 CuPy gradient components on device

    Returns:
        (dx, dy) with non-maxima zeroed, on device
    """
    if cp is None:
        raise RuntimeError(f"CuPy not available for GPU suppression: {_gpu_import_error}")

    if dx.ndim != 2 or dx.shape != dy.shape:
        raise ValueError("gpu_suppress expects two 2D arrays of equal shape")

    h, w = dx.shape
    magnitude = cp.sqrt(dx * dx + dy * dy)
    theta = cp.arctan2(dy, dx)
    cos_t = cp.cos(theta)
    sin_t = cp.sin(theta)

    ys, xs = cp.mgrid[0:h, 0:w].astype(cp.float64)

    ahead = _gpu_interpolate(magnitude, xs + cos_t, ys + sin_t)
    behind = _gpu_interpolate(magnitude, xs - cos_t, ys - sin_t)

    keep = (magnitude >= ahead) & (magnitude > behind)
    return cp.where(keep, dx, 0.0), cp.where(keep, dy, 0.0)
