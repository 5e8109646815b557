from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator

import numpy as np
from loguru import logger

from common.canny_dispatch import dispatch_gradient_stages
from common.config import CannyParams
from common.edge_labels import count_labels
from common.gradient import GradientField
from cpu.hysteresis import classify


@dataclass(eq=False)
class CannyIntermediates:
    blurred: np.ndarray
    gradients: GradientField
    suppressed: GradientField
    labels: np.ndarray

    def __iter__(self) -> Iterator[Any]:
        return iter((self.blurred, self.gradients, self.suppressed, self.labels))


def get_intermediates(
    grid: np.ndarray,
    filter_size: int,
    sigma: float,
    low_threshold: float,
    high_threshold: float,
    suppression: str = "subpixel",
    backend_cfg: Dict[str, Any] | None = None,
) -> CannyIntermediates:
    """
    Run the full Canny pipeline and keep every stage output.

    Args:
        grid: (H, W) grayscale grid with values in [0, 255]
        filter_size: Gaussian kernel side
        sigma: Gaussian standard deviation
        low_threshold: lower hysteresis ratio of the suppressed maximum
        high_threshold: upper hysteresis ratio of the suppressed maximum
        suppression: "subpixel" or "fast"
        backend_cfg: optional config 'backend' block for the per-pixel stages

    Returns:
        CannyIntermediates(blurred, gradients, suppressed, labels)
    """
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise ValueError("Canny pipeline expects 2D grayscale grid")

    CannyParams(filter_size, sigma, low_threshold, high_threshold, suppression).validate()

    stages = dispatch_gradient_stages(
        grid.astype(np.int64),
        filter_size,
        sigma,
        suppression=suppression,
        backend_cfg=backend_cfg,
    )
    labels = classify(stages.suppressed, low_threshold, high_threshold)

    logger.opt(lazy=True).debug("Edge labels: {}", lambda: count_labels(labels))
    return CannyIntermediates(stages.blurred, stages.gradients, stages.suppressed, labels)


def run_canny(
    grid: np.ndarray,
    filter_size: int,
    sigma: float,
    low_threshold: float,
    high_threshold: float,
    suppression: str = "subpixel",
    backend_cfg: Dict[str, Any] | None = None,
) -> np.ndarray:
    """
    Canny edge detection. Returns an (H, W) uint8 array of EdgeLabel values.
    """
    return get_intermediates(
        grid,
        filter_size,
        sigma,
        low_threshold,
        high_threshold,
        suppression=suppression,
        backend_cfg=backend_cfg,
    ).labels


def run_canny_from_config(grid: np.ndarray, cfg: Dict[str, Any]) -> CannyIntermediates:
    """
    Convenience wrapper: read 'canny' and 'backend' blocks from a config dict.
    """
    params = CannyParams.from_config(cfg)
    return get_intermediates(
        grid,
        params.filter_size,
        params.sigma,
        params.low_threshold,
        params.high_threshold,
        suppression=params.suppression,
        backend_cfg=cfg.get("backend", {}),
    )
