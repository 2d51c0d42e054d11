#!/usr/bin/env python3
# ascii_image/rendering/grayscale.py
"""
RGBA pixel buffer to grayscale reduction.

- Accepts the buffer as a numpy array (H, W, 4) or (N, 4), a flat byte
  sequence in canvas getImageData layout, or a sequence of (r, g, b, a).
- Weights: 0.3 R + 0.59 G + 0.11 B. Alpha is ignored.
- Values are left as float64 in [0, 255]; no rounding.
"""

from __future__ import annotations
from typing import Any
import numpy as np

__all__ = [
    "LUMA_WEIGHTS",
    "rgb_to_grayscale",
    "canvas_to_grayscale",
]

LUMA_WEIGHTS = (0.3, 0.59, 0.11)


def rgb_to_grayscale(r: float, g: float, b: float) -> float:
    """Return the weighted grayscale value of one RGB pixel."""
    wr, wg, wb = LUMA_WEIGHTS
    return (wr * r) + (wg * g) + (wb * b)


def _as_rgba(pixels: Any, count: int) -> np.ndarray:
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    else:
        arr = np.asarray(pixels)
    if arr.size != count * 4:
        raise ValueError(
            f"pixel buffer holds {arr.size} channel values, expected {count * 4}"
        )
    # Float64 so the weighted sum matches scalar arithmetic exactly
    return arr.reshape(count, 4).astype(np.float64)


def canvas_to_grayscale(pixels: Any, width: int, height: int) -> np.ndarray:
    """
    Return a 1-D float64 array with one grayscale value per pixel,
    in the same row-major order as the buffer.
    """
    if width < 0 or height < 0:
        raise ValueError(f"invalid buffer size {width}x{height}")
    count = int(width) * int(height)
    if count == 0:
        return np.zeros(0, dtype=np.float64)

    rgba = _as_rgba(pixels, count)
    wr, wg, wb = LUMA_WEIGHTS
    # Same evaluation order as rgb_to_grayscale
    return (wr * rgba[:, 0]) + (wg * rgba[:, 1]) + (wb * rgba[:, 2])
