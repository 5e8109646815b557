from __future__ import annotations

from enum import IntEnum

import numpy as np


class EdgeLabel(IntEnum):
    NONE = 0
    DROPPED = 1
    WEAK = 2
    STRONG = 3


# Grayscale value used when rendering each label.
LABEL_INTENSITY = {
    EdgeLabel.NONE: 0,
    EdgeLabel.DROPPED: 50,
    EdgeLabel.WEAK: 127,
    EdgeLabel.STRONG: 255,
}


def count_labels(labels: np.ndarray) -> dict[str, int]:
    """
    Count pixels per label, keyed by label name.
    """
    counts = np.bincount(labels.ravel(), minlength=len(EdgeLabel))
    return {label.name: int(counts[label]) for label in EdgeLabel}
