#!/usr/bin/env python3
# ascii_image/geometry.py
"""
Grid geometry for ascii_image.
Fits a source image into the character grid while keeping its aspect ratio.
"""

from typing import Tuple

__all__ = [
    "DEFAULT_MAX_WIDTH",
    "DEFAULT_MAX_HEIGHT",
    "reduce_dimension",
]

DEFAULT_MAX_WIDTH = 300
DEFAULT_MAX_HEIGHT = 500


def _positive_int(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def reduce_dimension(
    width: int,
    height: int,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
) -> Tuple[int, int]:
    """
    Return (width, height) reduced to fit max_width x max_height.

    Width is clamped first, then height is clamped using the already
    corrected height, so an image that is still too tall after the first
    step is narrowed again. Images that already fit are returned unchanged.
    A side that floors to zero is kept at 1.
    """
    width = _positive_int("width", width)
    height = _positive_int("height", height)
    max_width = _positive_int("max_width", max_width)
    max_height = _positive_int("max_height", max_height)

    if width > max_width:
        height = (height * max_width) // width
        width = max_width
    if height > max_height:
        width = (width * max_height) // height
        height = max_height

    return max(1, width), max(1, height)
