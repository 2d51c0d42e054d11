#!/usr/bin/env python3
# ascii_image/errors.py
"""
Exception types raised by the conversion pipeline and its image loader.
"""

from __future__ import annotations
from typing import Any, Optional

__all__ = [
    "AsciiImageError",
    "InvalidSource",
    "LoadFailure",
    "EmptyRamp",
]


class AsciiImageError(Exception):
    """Base class for every error raised by ascii_image."""


class InvalidSource(AsciiImageError, ValueError):
    """Image source is missing or empty."""

    def __init__(self, message: str = "Invalid image source"):
        super().__init__(message)


class LoadFailure(AsciiImageError):
    """
    The image could not be fetched or decoded.
    The underlying exception, if any, is chained as __cause__.
    """

    def __init__(self, source: Any, reason: Optional[str] = None):
        self.source = source
        self.reason = reason or "Unable to load image"
        super().__init__(f"{self.reason}: {_describe(source)}")


class EmptyRamp(AsciiImageError, ValueError):
    """Every glyph of the ramp was excluded."""

    def __init__(self, message: str = "All glyphs were excluded from the ramp"):
        super().__init__(message)


def _describe(source: Any) -> str:
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    s = str(source)
    # data URIs can be huge
    return s if len(s) <= 80 else s[:77] + "..."
