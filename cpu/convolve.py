"""
CPU reference implementation for zero-padded kernel convolution.
"""

from __future__ import annotations

import numpy as np


def apply_filter(grid: np.ndarray, kernel: np.ndarray, x: int, y: int) -> int:
    """
    Filter response at a single pixel.

    Kernel cell [i, j] weights grid[y + i - r, x + j - r] with r = k // 2.
    Pixels outside the grid read as 0. The sum is truncated toward zero.
    """
    h, w = grid.shape
    k = kernel.shape[0]
    r = k // 2

    result = 0.0
    for i in range(k):
        for j in range(k):
            yy = y + i - r
            xx = x + j - r
            if 0 <= xx < w and 0 <= yy < h:
                pixel = float(grid[yy, xx])
            else:
                pixel = 0.0
            result += pixel * float(kernel[i, j])

    return int(result)


def convolve(grid: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Apply apply_filter at every pixel (vectorized).

    Accumulates kernel cells in the same row-major order as apply_filter, so
    per-pixel float sums are identical before truncation.

    Args:
        grid: (H, W) integer grid
        kernel: (k, k) float kernel

    Returns:
        (H, W) int64 grid
    """
    if grid.ndim != 2:
        raise ValueError("convolve expects 2D grayscale grid")
    if kernel.ndim != 2 or kernel.shape[0] != kernel.shape[1]:
        raise ValueError(f"kernel must be square, got {kernel.shape}")

    h, w = grid.shape
    k = kernel.shape[0]
    r = k // 2
    # Kernel cells reach r before and k - 1 - r after the pixel.
    padded = np.pad(
        grid.astype(np.float64),
        ((r, k - 1 - r), (r, k - 1 - r)),
        mode="constant",
        constant_values=0,
    )

    acc = np.zeros((h, w), dtype=np.float64)
    for i in range(k):
        for j in range(k):
            acc += padded[i:i + h, j:j + w] * float(kernel[i, j])

    return np.trunc(acc).astype(np.int64)
