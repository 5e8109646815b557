"""
Backend dispatch for the per-pixel Canny stages supporting CPU, GPU, and AUTO modes.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np
from loguru import logger

from common.gradient import GradientField
from cpu.gradients import build_gradient_field, gaussian_blur
from cpu.suppression import fast_suppress, suppress

try:
    import cupy as cp
    from gpu.gradients import gpu_gaussian_blur, gpu_sobel_gradients
    from gpu.suppression import gpu_suppress
except Exception as exc:
    cp = None
    gpu_gaussian_blur = None
    gpu_sobel_gradients = None
    gpu_suppress = None
    _gpu_import_error = exc
else:
    _gpu_import_error = None

BACKEND_MODES = ("CPU", "GPU", "AUTO")


@dataclass
class GradientStages:
    blurred: np.ndarray
    gradients: GradientField
    suppressed: GradientField
    backend: str
    timings: Dict[str, float]


def gpu_available() -> bool:
    return gpu_suppress is not None


def resolve_backend(backend_cfg: Dict[str, Any], image_shape: tuple[int, int]) -> str:
    """
    Pick "CPU" or "GPU" for the given image.

    AUTO picks the GPU only when CuPy loaded and the image is at least
    gpu_min_resolution (height, width).
    """
    mode = str(backend_cfg.get("mode", "CPU")).upper()
    if mode not in BACKEND_MODES:
        raise ValueError(f"Unknown backend mode: {mode}")

    if mode == "CPU":
        return "CPU"

    if mode == "GPU":
        if gpu_available():
            return "GPU"
        if backend_cfg.get("allow_failover", False):
            logger.warning("GPU backend unavailable, falling back to CPU: {}", _gpu_import_error)
            return "CPU"
        raise RuntimeError(f"GPU backend unavailable: {_gpu_import_error}")

    min_h, min_w = backend_cfg.get("gpu_min_resolution", [480, 640])
    h, w = image_shape
    if gpu_available() and h >= min_h and w >= min_w:
        return "GPU"
    return "CPU"


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


def _run_cpu(grid: np.ndarray, filter_size: int, sigma: float, suppression: str) -> GradientStages:
    t0 = _now_ms()
    blurred = gaussian_blur(grid, filter_size, sigma)
    t1 = _now_ms()
    gradients = build_gradient_field(blurred)
    t2 = _now_ms()
    suppressed = suppress(gradients) if suppression == "subpixel" else fast_suppress(gradients)
    t3 = _now_ms()

    timings = {"t_blur_ms": t1 - t0, "t_gradient_ms": t2 - t1, "t_suppress_ms": t3 - t2}
    return GradientStages(blurred, gradients, suppressed, "CPU", timings)


def _run_gpu(grid: np.ndarray, filter_size: int, sigma: float, suppression: str) -> GradientStages:
    t0 = _now_ms()
    grid_gpu = cp.asarray(grid, dtype=cp.int64)
    blurred_gpu = gpu_gaussian_blur(grid_gpu, filter_size, sigma)
    cp.cuda.Stream.null.synchronize()
    t1 = _now_ms()
    dx_gpu, dy_gpu = gpu_sobel_gradients(blurred_gpu)
    cp.cuda.Stream.null.synchronize()
    t2 = _now_ms()

    gradients = GradientField(cp.asnumpy(dx_gpu), cp.asnumpy(dy_gpu))
    if suppression == "subpixel":
        sdx_gpu, sdy_gpu = gpu_suppress(dx_gpu, dy_gpu)
        suppressed = GradientField(cp.asnumpy(sdx_gpu), cp.asnumpy(sdy_gpu))
    else:
        # No device variant of the integer-neighbour suppression.
        suppressed = fast_suppress(gradients)
    t3 = _now_ms()

    timings = {"t_blur_ms": t1 - t0, "t_gradient_ms": t2 - t1, "t_suppress_ms": t3 - t2}
    return GradientStages(cp.asnumpy(blurred_gpu), gradients, suppressed, "GPU", timings)


def dispatch_gradient_stages(
    grid: np.ndarray,
    filter_size: int,
    sigma: float,
    suppression: str = "subpixel",
    backend_cfg: Dict[str, Any] | None = None,
) -> GradientStages:
    """
    Run blur, gradient and suppression on the configured backend.

    Args:
        grid: (H, W) grayscale grid
        filter_size: Gaussian kernel side
        sigma: Gaussian standard deviation
        suppression: "subpixel" or "fast"
        backend_cfg: the config 'backend' block (mode, allow_failover, gpu_min_resolution)

    Returns:
        GradientStages with host arrays and per-stage timings
    """
    backend_cfg = backend_cfg or {}
    backend = resolve_backend(backend_cfg, grid.shape)

    if backend == "CPU":
        stages = _run_cpu(grid, filter_size, sigma, suppression)
    else:
        try:
            stages = _run_gpu(grid, filter_size, sigma, suppression)
        except Exception as e:
            if not backend_cfg.get("allow_failover", False):
                raise
            logger.warning("GPU stages failed, falling back to CPU: {}", e)
            stages = _run_cpu(grid, filter_size, sigma, suppression)

    logger.debug(
        "Gradient stages on {} ({}x{}): blur={:.2f}ms gradient={:.2f}ms suppress={:.2f}ms",
        stages.backend,
        grid.shape[1],
        grid.shape[0],
        stages.timings["t_blur_ms"],
        stages.timings["t_gradient_ms"],
        stages.timings["t_suppress_ms"],
    )
    return stages
