#!/usr/bin/env python3
# ascii_image/rendering/glyphs.py
"""
Glyph ramp and grayscale-to-text assembly.

The ramp runs from the densest glyph ("$") to the sparsest (blank).
Callers may exclude glyphs per call; the shared ramp is never modified.

Output layout: every glyph is followed by a space, and the glyph that ends
a row carries a newline before that space:

    "$ @ B\\n $ @ B\\n "
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from ascii_image.errors import EmptyRamp

__all__ = [
    "GLYPH_RAMP",
    "normalize_avoided",
    "effective_ramp",
    "grayscale_to_indices",
    "grayscale_to_ascii",
]

log = logging.getLogger(__name__)

# 70 levels, dense -> sparse; "." is index 68, the last level (69) is a blank
GLYPH_RAMP: Tuple[str, ...] = tuple(
    "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
)

Avoided = Optional[Union[str, Iterable[str]]]


def normalize_avoided(avoided: Avoided) -> frozenset:
    """Return the exclusion set as a frozenset of single characters."""
    if not avoided:
        return frozenset()
    if isinstance(avoided, str):
        return frozenset(avoided)
    out = set()
    for ch in avoided:
        if not isinstance(ch, str) or len(ch) != 1:
            raise ValueError(f"avoided characters must be single characters, got {ch!r}")
        out.add(ch)
    return frozenset(out)


def effective_ramp(avoided: Avoided = None) -> Tuple[str, ...]:
    """Return the ramp with every avoided glyph removed, order preserved."""
    excluded = normalize_avoided(avoided)
    if not excluded:
        return GLYPH_RAMP
    ramp = tuple(ch for ch in GLYPH_RAMP if ch not in excluded)
    if not ramp:
        raise EmptyRamp()
    return ramp


def grayscale_to_indices(grayscale: Sequence[float], levels: int) -> np.ndarray:
    """
    Map grayscale values to ramp indices: ceil(g / 255 * (levels - 1)).
    Indices are clipped to the ramp so float noise at 255 stays in range.
    """
    if levels < 1:
        raise EmptyRamp()
    gray = np.asarray(grayscale, dtype=np.float64).ravel()
    idx = np.ceil((gray / 255) * (levels - 1))
    return np.clip(idx, 0, levels - 1).astype(np.int64)


def grayscale_to_ascii(
    grayscale: Sequence[float],
    width: int,
    avoided_characters: Avoided = None,
) -> str:
    """Return the ASCII image for a row-major grayscale sequence."""
    if width < 1:
        raise ValueError(f"width must be positive, got {width}")

    ramp = effective_ramp(avoided_characters)
    indices = grayscale_to_indices(grayscale, len(ramp))
    log.debug("Mapping %d pixels onto %d glyph levels", indices.size, len(ramp))

    parts = []
    for i, idx in enumerate(indices.tolist()):
        parts.append(ramp[idx])
        if (i + 1) % width == 0:
            parts.append("\n")
        parts.append(" ")
    return "".join(parts)
