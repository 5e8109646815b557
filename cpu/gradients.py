from __future__ import annotations

import numpy as np

from common.gradient import GradientField
from cpu.convolve import convolve
from cpu.kernels import SOBEL_X, SOBEL_Y, build_gaussian_kernel


def gaussian_blur(grid: np.ndarray, filter_size: int, sigma: float) -> np.ndarray:
    """
    Smooth a grayscale grid with a normalized Gaussian kernel.
    """
    kernel = build_gaussian_kernel(filter_size, sigma)
    return convolve(grid, kernel)


def build_gradient_field(grid: np.ndarray) -> GradientField:
    """
    Per-pixel Sobel gradient of a (blurred) grayscale grid.

    Each component is the truncated integer filter response, stored as float64.
    """
    dx = convolve(grid, SOBEL_X).astype(np.float64)
    dy = convolve(grid, SOBEL_Y).astype(np.float64)
    return GradientField(dx, dy)
