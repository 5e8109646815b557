"""
GPU zero-padded convolution using CuPy.
"""

from __future__ import annotations

import numpy as np

try:
    import cupy as cp
except Exception as exc:  # pragma: no cover
    cp = None
    _gpu_import_error = exc
else:
    _gpu_import_error = None


def gpu_convolve(grid_gpu: cp.ndarray, kernel: np.ndarray) -> cp.ndarray:
    """
    GPU counterpart of cpu.convolve.convolve.

    Accumulates in float64 over kernel cells in row-major order and truncates
    toward zero, so results match the CPU path exactly.

    Args:
        grid_gpu: 2D integer CuPy array on device
        kernel: (k, k) float kernel (host or device)

    Returns:
        2D int64 CuPy array on device
    """
    if cp is None:
        raise RuntimeError(f"CuPy not available for GPU convolution: {_gpu_import_error}")

    if grid_gpu.ndim != 2:
        raise ValueError("gpu_convolve expects 2D grayscale grid")

    weights = cp.asnumpy(kernel) if isinstance(kernel, cp.ndarray) else np.asarray(kernel)
    if weights.ndim != 2 or weights.shape[0] != weights.shape[1]:
        raise ValueError(f"kernel must be square, got {weights.shape}")

    h, w = grid_gpu.shape
    k = weights.shape[0]
    r = k // 2
    padded = cp.pad(
        grid_gpu.astype(cp.float64),
        ((r, k - 1 - r), (r, k - 1 - r)),
        mode="constant",
        constant_values=0,
    )

    acc = cp.zeros((h, w), dtype=cp.float64)
    for i in range(k):
        for j in range(k):
            acc += padded[i:i + h, j:j + w] * float(weights[i, j])

    return cp.trunc(acc).astype(cp.int64)
