from __future__ import annotations

import math

import numpy as np
import pytest

from common.edge_labels import EdgeLabel, count_labels
from common.gradient import DIRECTION_STEPS, DirectionClass, GradientField
from cpu.gradients import build_gradient_field, gaussian_blur
from cpu.hysteresis import classify, find_connected_edges
from cpu.suppression import suppress
from tests.helpers import field_from_magnitudes, random_grid


def _suppressed_random(seed: int, shape=(20, 24)) -> GradientField:
    blurred = gaussian_blur(random_grid(*shape, seed=seed), 3, 1.0)
    return suppress(build_gradient_field(blurred))


def test_all_zero_field_is_all_none():
    labels = classify(GradientField.zeros((5, 7)), 0.0, 0.0)
    assert labels.shape == (5, 7)
    assert labels.dtype == np.uint8
    assert np.all(labels == EdgeLabel.NONE)


def test_single_maximum_is_the_only_strong_pixel():
    magnitude = np.zeros((5, 6))
    magnitude[2, 2] = 10.0
    magnitude[2, 3] = 5.0  # east of the peak: linked
    magnitude[2, 4] = 3.0  # linked through (3, 2)
    magnitude[3, 2] = 5.0  # south of the peak: not along E_W
    magnitude[0, 0] = 0.5  # below low threshold
    field = field_from_magnitudes(magnitude, angle=0.0)

    labels = classify(field, 0.1, 1.0)

    assert np.count_nonzero(labels == EdgeLabel.STRONG) == 1
    assert labels[2, 2] == EdgeLabel.STRONG
    assert labels[2, 3] == EdgeLabel.WEAK
    assert labels[2, 4] == EdgeLabel.WEAK
    assert labels[3, 2] == EdgeLabel.DROPPED
    assert labels[0, 0] == EdgeLabel.NONE
    assert labels[4, 5] == EdgeLabel.NONE


def test_linking_follows_gradient_direction_vertically():
    magnitude = np.zeros((5, 5))
    magnitude[0, 2] = 4.0
    magnitude[1, 2] = 4.0
    magnitude[2, 2] = 10.0
    magnitude[2, 3] = 4.0
    field = field_from_magnitudes(magnitude, angle=math.pi / 2)

    labels = classify(field, 0.2, 0.9)

    assert labels[2, 2] == EdgeLabel.STRONG
    assert labels[1, 2] == EdgeLabel.WEAK
    assert labels[0, 2] == EdgeLabel.WEAK
    assert labels[2, 3] == EdgeLabel.DROPPED


def test_linking_along_diagonal_class():
    # pi/4 quantizes to NW_SE, which links (x-1, y+1) and (x+1, y-1).
    magnitude = np.zeros((5, 5))
    magnitude[2, 2] = 10.0
    magnitude[3, 1] = 5.0
    magnitude[3, 3] = 5.0
    field = field_from_magnitudes(magnitude, angle=math.pi / 4)

    labels = classify(field, 0.2, 0.9)

    assert labels[3, 1] == EdgeLabel.WEAK
    assert labels[3, 3] == EdgeLabel.DROPPED


def test_weak_pixel_found_before_its_strong_seed_is_relabelled():
    # (1, 0) is scanned before the strong pixel at (1, 1) and first becomes DROPPED.
    magnitude = np.zeros((3, 3))
    magnitude[0, 1] = 5.0
    magnitude[1, 1] = 10.0
    field = field_from_magnitudes(magnitude, angle=math.pi / 2)

    labels = classify(field, 0.2, 0.9)

    assert labels[0, 1] == EdgeLabel.WEAK


def test_find_connected_edges_excludes_seed_and_visits_once():
    ratio = np.array([[0.0, 0.5, 1.0, 0.5, 0.5]])
    directions = np.full(ratio.shape, DirectionClass.E_W, dtype=np.uint8)

    found = find_connected_edges(ratio, directions, 2, 0, 0.2, 0.9)

    assert sorted(found) == [(1, 0), (3, 0), (4, 0)]


def test_low_threshold_zero_marks_every_nonzero_pixel():
    field = _suppressed_random(seed=4)
    labels = classify(field, 0.0, 0.4)
    nonzero = field.magnitude() > 0
    assert np.all(labels[nonzero] != EdgeLabel.NONE)


@pytest.mark.parametrize("seed", [0, 5, 9])
def test_lowering_low_threshold_is_monotone(seed):
    field = _suppressed_random(seed)

    high_low = classify(field, 0.3, 0.6)
    low_low = classify(field, 0.1, 0.6)

    np.testing.assert_array_equal(high_low == EdgeLabel.STRONG, low_low == EdgeLabel.STRONG)
    was_edge = (high_low == EdgeLabel.STRONG) | (high_low == EdgeLabel.WEAK)
    assert np.all(low_low[was_edge] != EdgeLabel.NONE)
    assert np.all(low_low[high_low == EdgeLabel.WEAK] == EdgeLabel.WEAK)
    assert np.all(low_low[high_low != EdgeLabel.NONE] != EdgeLabel.NONE)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_every_weak_pixel_is_linked_to_an_edge(seed):
    field = _suppressed_random(seed)
    low, high = 0.1, 0.35
    labels = classify(field, low, high)

    ratio = field.magnitude() / field.magnitude().max()
    directions = field.quantized_direction()
    h, w = labels.shape

    # Reachable set recomputed from STRONG seeds using direction-consistent steps.
    reached = np.zeros_like(labels, dtype=bool)
    frontier = list(zip(*np.nonzero(labels == EdgeLabel.STRONG)))
    seen = set(frontier)
    while frontier:
        py, px = frontier.pop()
        sx, sy = DIRECTION_STEPS[DirectionClass(int(directions[py, px]))]
        for qx, qy in ((px - sx, py - sy), (px + sx, py + sy)):
            if 0 <= qx < w and 0 <= qy < h and (qy, qx) not in seen and low <= ratio[qy, qx] < high:
                seen.add((qy, qx))
                reached[qy, qx] = True
                frontier.append((qy, qx))

    np.testing.assert_array_equal(labels == EdgeLabel.WEAK, reached)


def test_count_labels():
    labels = np.array([[0, 1, 2], [3, 3, 0]], dtype=np.uint8)
    assert count_labels(labels) == {"NONE": 2, "DROPPED": 1, "WEAK": 1, "STRONG": 2}


def _row_major_classify(field: GradientField, low: float, high: float) -> np.ndarray:
    labels = np.full(field.shape, EdgeLabel.NONE, dtype=np.uint8)
    magnitude = field.magnitude()
    if magnitude.max() == 0:
        return labels
    ratio = magnitude / magnitude.max()
    directions = field.quantized_direction()
    h, w = field.shape
    for y in range(h):
        for x in range(w):
            if ratio[y, x] >= high:
                labels[y, x] = EdgeLabel.STRONG
                for xx, yy in find_connected_edges(ratio, directions, x, y, low, high):
                    labels[yy, xx] = EdgeLabel.WEAK
            elif ratio[y, x] >= low and labels[y, x] != EdgeLabel.WEAK:
                labels[y, x] = EdgeLabel.DROPPED
    return labels


@pytest.mark.parametrize("seed", [0, 3, 11])
@pytest.mark.parametrize("low,high", [(0.05, 0.2), (0.1, 0.3), (0.0, 0.5), (0.4, 0.4)])
def test_classify_matches_row_major_scan(seed, low, high):
    field = _suppressed_random(seed)
    np.testing.assert_array_equal(classify(field, low, high), _row_major_classify(field, low, high))
