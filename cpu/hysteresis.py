"""
Double-threshold hysteresis with directional edge linking.
"""

from __future__ import annotations

from collections import deque
from typing import List, Tuple

import numpy as np

from common.edge_labels import EdgeLabel
from common.gradient import DIRECTION_STEPS, DirectionClass, GradientField


def classify(field: GradientField, low_ratio: float, high_ratio: float) -> np.ndarray:
    """
    Label each pixel of a suppressed gradient field.

    Ratios are magnitudes relative to the field maximum. STRONG pixels
    (ratio >= high_ratio) seed a search that marks connected pixels with
    ratio in [low_ratio, high_ratio) as WEAK. Remaining pixels in that band
    are DROPPED, everything else NONE. The threshold ordering is not checked
    here.

    Args:
        field: suppressed gradient field
        low_ratio: lower threshold, fraction of the maximum magnitude
        high_ratio: upper threshold, fraction of the maximum magnitude

    Returns:
        (H, W) uint8 array of EdgeLabel values
    """
    labels = np.full(field.shape, EdgeLabel.NONE, dtype=np.uint8)

    magnitude = field.magnitude()
    max_magnitude = float(magnitude.max()) if magnitude.size else 0.0
    if max_magnitude == 0.0:
        return labels

    ratio = magnitude / max_magnitude
    directions = field.quantized_direction()

    strong = ratio >= high_ratio
    band = (ratio >= low_ratio) & ~strong
    weak = np.zeros(field.shape, dtype=bool)

    # argwhere yields seeds in row-major order.
    for y, x in np.argwhere(strong):
        for xx, yy in find_connected_edges(ratio, directions, int(x), int(y), low_ratio, high_ratio):
            weak[yy, xx] = True

    labels[band] = EdgeLabel.DROPPED
    labels[weak] = EdgeLabel.WEAK
    labels[strong] = EdgeLabel.STRONG
    return labels


def find_connected_edges(
    ratio: np.ndarray,
    directions: np.ndarray,
    x: int,
    y: int,
    low_ratio: float,
    high_ratio: float,
) -> List[Tuple[int, int]]:
    """
    Breadth-first search from (x, y) for pixels in [low_ratio, high_ratio).

    A pixel q joins from frontier pixel p only when q is one step from p along
    p's own quantized gradient direction. Note this follows the gradient, not
    the edge tangent.

    Returns:
        list of (x, y) in discovery order, excluding the seed
    """
    h, w = ratio.shape
    found: List[Tuple[int, int]] = []
    seen = set()
    queue = deque([(x, y)])

    while queue:
        px, py = queue.popleft()
        sx, sy = DIRECTION_STEPS[DirectionClass(int(directions[py, px]))]
        for qx, qy in ((px - sx, py - sy), (px + sx, py + sy)):
            if not (0 <= qx < w and 0 <= qy < h):
                continue
            if (qx, qy) in seen:
                continue
            r = ratio[qy, qx]
            if low_ratio <= r < high_ratio:
                seen.add((qx, qy))
                found.append((qx, qy))
                queue.append((qx, qy))

    return found
