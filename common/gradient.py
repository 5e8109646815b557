"""
Per-pixel gradient vectors and gradient fields.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

import numpy as np


_EIGHTH_PI = math.pi / 8.0


class DirectionClass(IntEnum):
    """Quantized gradient direction. Opposite directions share a class."""

    N_S = 0
    E_W = 1
    NE_SW = 2
    NW_SE = 3


# (dx, dy) step one pixel along each direction class.
DIRECTION_STEPS = {
    DirectionClass.N_S: (0, 1),
    DirectionClass.E_W: (1, 0),
    DirectionClass.NE_SW: (1, 1),
    DirectionClass.NW_SE: (-1, 1),
}


def quantize_direction(angle: float) -> DirectionClass:
    """
    Map an angle in (-pi, pi] to one of the four direction classes.

    Negative angles are folded by adding pi, then bucketed into eighths of pi
    with the upper bucket edge inclusive.
    """
    if angle < 0:
        angle += math.pi

    if _EIGHTH_PI < angle <= 3 * _EIGHTH_PI:
        return DirectionClass.NW_SE
    if 3 * _EIGHTH_PI < angle <= 5 * _EIGHTH_PI:
        return DirectionClass.N_S
    if 5 * _EIGHTH_PI < angle <= 7 * _EIGHTH_PI:
        return DirectionClass.NE_SW
    return DirectionClass.E_W


def quantize_directions(angles: np.ndarray) -> np.ndarray:
    """
    Vectorized quantize_direction. Returns a uint8 array of DirectionClass values.
    """
    folded = np.where(angles < 0, angles + math.pi, angles)

    classes = np.full(folded.shape, DirectionClass.E_W, dtype=np.uint8)
    classes[(folded > _EIGHTH_PI) & (folded <= 3 * _EIGHTH_PI)] = DirectionClass.NW_SE
    classes[(folded > 3 * _EIGHTH_PI) & (folded <= 5 * _EIGHTH_PI)] = DirectionClass.N_S
    classes[(folded > 5 * _EIGHTH_PI) & (folded <= 7 * _EIGHTH_PI)] = DirectionClass.NE_SW
    return classes


@dataclass(frozen=True)
class Gradient:
    dx: float
    dy: float

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.dx * self.dx + self.dy * self.dy)

    @property
    def direction(self) -> float:
        """Direction in radians, from -pi to pi. The zero gradient points at 0."""
        return math.atan2(self.dy, self.dx)

    @property
    def quantized_direction(self) -> DirectionClass:
        return quantize_direction(self.direction)


ZERO_GRADIENT = Gradient(0.0, 0.0)


@dataclass(frozen=True, eq=False)
class GradientField:
    """
    Gradient per pixel, stored as two (H, W) float64 arrays indexed [y, x].
    """

    dx: np.ndarray
    dy: np.ndarray

    def __post_init__(self) -> None:
        if self.dx.shape != self.dy.shape:
            raise ValueError(f"dx/dy shape mismatch: {self.dx.shape} vs {self.dy.shape}")
        if self.dx.ndim != 2:
            raise ValueError(f"GradientField expects 2D arrays, got {self.dx.ndim}D")

    @classmethod
    def zeros(cls, shape: tuple[int, int]) -> "GradientField":
        return cls(np.zeros(shape, dtype=np.float64), np.zeros(shape, dtype=np.float64))

    @property
    def shape(self) -> tuple[int, int]:
        return self.dx.shape

    @property
    def height(self) -> int:
        return self.dx.shape[0]

    @property
    def width(self) -> int:
        return self.dx.shape[1]

    def magnitude(self) -> np.ndarray:
        return np.sqrt(self.dx * self.dx + self.dy * self.dy)

    def direction(self) -> np.ndarray:
        return np.arctan2(self.dy, self.dx)

    def quantized_direction(self) -> np.ndarray:
        return quantize_directions(self.direction())

    def at(self, x: int, y: int) -> Gradient:
        return Gradient(float(self.dx[y, x]), float(self.dy[y, x]))

    def masked(self, keep: np.ndarray) -> "GradientField":
        """Copy keeping gradients where keep is True and zeroing the rest."""
        return GradientField(
            np.where(keep, self.dx, 0.0),
            np.where(keep, self.dy, 0.0),
        )
