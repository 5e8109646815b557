"""
GPU blur and Sobel gradient stages using CuPy.
"""

from __future__ import annotations

from cpu.kernels import SOBEL_X, SOBEL_Y, build_gaussian_kernel
from gpu.convolve import cp, gpu_convolve


def gpu_gaussian_blur(grid_gpu: cp.ndarray, filter_size: int, sigma: float) -> cp.ndarray:
    kernel = build_gaussian_kernel(filter_size, sigma)
    return gpu_convolve(grid_gpu, kernel)


def gpu_sobel_gradients(grid_gpu: cp.ndarray) -> tuple[cp.ndarray, cp.ndarray]:
    """
    Compute Sobel dx, dy on device as float64 arrays.
    """
    dx = gpu_convolve(grid_gpu, SOBEL_X).astype(cp.float64)
    dy = gpu_convolve(grid_gpu, SOBEL_Y).astype(cp.float64)
    return dx, dy
