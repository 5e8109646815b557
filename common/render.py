"""
Render pipeline intermediates as viewable uint8 grayscale images.
"""

from __future__ import annotations

from typing import List

import numpy as np

from common.edge_labels import LABEL_INTENSITY, EdgeLabel
from common.gradient import GradientField


def render_grayscale(grid: np.ndarray) -> np.ndarray:
    return np.clip(grid, 0, 255).astype(np.uint8)


def render_gradient(field: GradientField) -> np.ndarray:
    """
    Magnitudes scaled so the field maximum maps to 255. An all-zero field renders black.
    """
    magnitude = field.magnitude()
    max_magnitude = float(magnitude.max()) if magnitude.size else 0.0
    if max_magnitude == 0.0:
        return np.zeros(field.shape, dtype=np.uint8)
    return np.round(255.0 * magnitude / max_magnitude).astype(np.uint8)


def render_labels(labels: np.ndarray) -> np.ndarray:
    lut = np.zeros(len(EdgeLabel), dtype=np.uint8)
    for label, intensity in LABEL_INTENSITY.items():
        lut[label] = intensity
    return lut[labels]


def render_intermediates(intermediates) -> List[np.ndarray]:
    """
    Render (blurred, gradients, suppressed, labels) as four uint8 images.
    """
    blurred, gradients, suppressed, labels = intermediates
    return [
        render_grayscale(blurred),
        render_gradient(gradients),
        render_gradient(suppressed),
        render_labels(labels),
    ]
