"""
Convolution kernels used by the Canny pipeline.
"""

from __future__ import annotations

import math

import numpy as np

# Sobel operators. Not normalized; only relative magnitudes matter downstream.
SOBEL_X = np.array([[1, 0, -1], [2, 0, -2], [1, 0, -1]], dtype=np.float64)
SOBEL_Y = np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]], dtype=np.float64)


def build_gaussian_kernel(size: int, sigma: float) -> np.ndarray:
    """
    Build a normalized 2D Gaussian kernel.

    Args:
        size: kernel side length. Sample offsets run from -(size // 2), so even
            sizes reach one step less on the positive side.
        sigma: standard deviation

    Returns:
        (size, size) float64 array summing to 1.
    """
    radius = size // 2
    two_sigma_sq = 2.0 * sigma * sigma

    offsets = np.arange(size, dtype=np.float64) - radius
    xs = offsets[np.newaxis, :]
    ys = offsets[:, np.newaxis]

    kernel = np.exp(-(xs * xs + ys * ys) / two_sigma_sq) / (math.pi * two_sigma_sq)
    return kernel / kernel.sum()
