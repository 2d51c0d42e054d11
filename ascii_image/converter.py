#!/usr/bin/env python3
# ascii_image/converter.py
"""
Image to ASCII conversion pipeline.

    source --load--> SourceImage --reduce_dimension--> (w, h)
           --pixel_buffer--> RGBA --canvas_to_grayscale--> gray
           --grayscale_to_ascii--> str

convert_to_ascii() is the coroutine entry point. Loading and mapping run in
the loop's default executor as a single job, so concurrent conversions share
nothing but the (read-only) glyph ramp.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from PIL import Image

from ascii_image.config import ConversionOptions
from ascii_image.errors import InvalidSource
from ascii_image.geometry import reduce_dimension
from ascii_image.loader import ImageLoader, SourceImage
from ascii_image.rendering.glyphs import Avoided, effective_ramp, grayscale_to_ascii
from ascii_image.rendering.grayscale import canvas_to_grayscale

__all__ = [
    "AsciiConverter",
    "convert_pixels",
    "convert_to_ascii",
    "validate_source",
]

log = logging.getLogger(__name__)


def validate_source(source: Any) -> Any:
    """Raise InvalidSource for a missing or empty source, else return it."""
    if source is None:
        raise InvalidSource()
    if isinstance(source, Image.Image) or isinstance(source, Path):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        if len(source) == 0:
            raise InvalidSource()
        return source
    if not str(source).strip():
        raise InvalidSource()
    return source


def convert_pixels(pixels: Any, width: int, height: int, avoided_characters: Avoided = None) -> str:
    """Run grayscale extraction and glyph mapping over an in-memory RGBA buffer."""
    gray = canvas_to_grayscale(pixels, width, height)
    return grayscale_to_ascii(gray, width, avoided_characters)


@dataclass
class AsciiConverter:
    """
    Synchronous converter bound to one set of options and one loader.
    The loader is created lazily with default settings if none is given.
    """
    options: ConversionOptions = field(default_factory=ConversionOptions)
    loader: Optional[ImageLoader] = None

    def __post_init__(self):
        if self.loader is None:
            self.loader = ImageLoader()

    def convert(self, source: Any) -> str:
        validate_source(source)
        # Fail on an empty ramp before doing any I/O
        effective_ramp(self.options.avoided_characters)

        t0 = time.time()
        image = self.loader.load(source)
        text = self.convert_image(image)
        log.info(
            "Converted %dx%d image in %.1f ms",
            image.width, image.height, (time.time() - t0) * 1000.0,
        )
        return text

    def convert_image(self, image: SourceImage) -> str:
        opts = self.options
        width, height = reduce_dimension(image.width, image.height, opts.max_width, opts.max_height)
        log.debug("Grid %dx%d for source %dx%d", width, height, image.width, image.height)
        pixels = image.pixel_buffer(width, height)
        return convert_pixels(pixels, width, height, opts.avoided_characters)


async def convert_to_ascii(
    image_source: Any,
    config: Any = None,
    *,
    loader: Optional[ImageLoader] = None,
) -> str:
    """
    Convert image_source to an ASCII image string.

    config may be a ConversionOptions, a Config, or a mapping with
    max_width / max_height / avoided_characters (camelCase accepted).
    Raises InvalidSource before any loading for an empty source, EmptyRamp
    when every glyph is avoided and LoadFailure when the image cannot be
    fetched or decoded.
    """
    validate_source(image_source)
    options = ConversionOptions.coerce(config)
    effective_ramp(options.avoided_characters)

    owned = loader is None
    converter = AsciiConverter(options, loader)
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, converter.convert, image_source)
    finally:
        if owned:
            converter.loader.close()
