from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np


def load_grayscale(image_path: str | Path) -> np.ndarray:
    """
    Load an image file as a grayscale grid.

    The source is assumed to be true grayscale (R == G == B), so only the
    blue channel is kept.

    Args:
        image_path: Path to the image file.

    Returns:
        (H, W) int64 array with values in [0, 255].
    """
    path = Path(image_path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Could not load image: {path}")

    # OpenCV stores channels as BGR.
    return img[:, :, 0].astype(np.int64)


def save_render(img: np.ndarray, path: str | Path) -> None:
    """
    Write a rendered uint8 grayscale image, creating parent dirs as needed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), img.astype(np.uint8)):
        raise RuntimeError(f"Failed to write image: {path}")
