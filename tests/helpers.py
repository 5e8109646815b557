from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Sequence

import numpy as np

from common.gradient import GradientField


def write_csv(path: Path, header: Sequence[str], rows: Iterable[Sequence]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for row in rows:
            writer.writerow(row)


def vertical_stripe(height: int = 5, width: int = 5, left: int = 1, right: int = 3, value: int = 255) -> np.ndarray:
    """
    Zero grid with a bright vertical stripe covering columns [left, right].
    """
    grid = np.zeros((height, width), dtype=np.int64)
    grid[:, left:right + 1] = value
    return grid


def bright_square(size: int = 16, lo: int = 4, hi: int = 11, value: int = 200) -> np.ndarray:
    grid = np.zeros((size, size), dtype=np.int64)
    grid[lo:hi + 1, lo:hi + 1] = value
    return grid


def random_grid(height: int, width: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, size=(height, width), dtype=np.int64)


def field_from_magnitudes(magnitude: np.ndarray, angle: float = 0.0) -> GradientField:
    """
    Gradient field with the given magnitudes all pointing at one angle.
    """
    magnitude = np.asarray(magnitude, dtype=np.float64)
    return GradientField(magnitude * np.cos(angle), magnitude * np.sin(angle))


def mismatch_ratio(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.count_nonzero(a != b)) / a.size
