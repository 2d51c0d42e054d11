import asyncio

import numpy as np
import pytest
from PIL import Image

from ascii_image.config import ConversionOptions
from ascii_image.converter import AsciiConverter, convert_pixels, convert_to_ascii
from ascii_image.errors import EmptyRamp, InvalidSource, LoadFailure
from ascii_image.loader import ImageLoader
from ascii_image.rendering.glyphs import GLYPH_RAMP


class RecordingLoader(ImageLoader):
    def __init__(self):
        super().__init__()
        self.loaded = []

    def load(self, source):
        self.loaded.append(source)
        return super().load(source)


def run(coro):
    return asyncio.run(coro)


def test_black_image(png_path):
    out = run(convert_to_ascii(str(png_path(size=(4, 2)))))
    assert out == "$ $ $ $\n $ $ $ $\n "


def test_white_image(png_path):
    out = run(convert_to_ascii(str(png_path(size=(2, 1), color=(255, 255, 255, 255)))))
    assert out == "   \n "


def test_camel_case_config(png_path):
    out = run(convert_to_ascii(str(png_path(size=(4, 2))), {"maxWidth": 2}))
    assert out == "$ $\n "


def test_downscale_row_count(png_path):
    p = png_path(size=(1000, 500), color=(90, 120, 200, 255))
    out = run(convert_to_ascii(str(p), ConversionOptions(max_width=30, max_height=500)))
    assert out.count("\n") == 15
    rows = out.split("\n")[:-1]
    assert all(len(r.split()) == 30 for r in rows)


def test_avoided_characters(png_path):
    out = run(convert_to_ascii(str(png_path(size=(3, 1))), {"avoided_characters": "$@"}))
    assert out == "B B B\n "


@pytest.mark.parametrize("source", [None, "", "   ", b""])
def test_invalid_source_before_load(source):
    loader = RecordingLoader()
    with pytest.raises(InvalidSource):
        run(convert_to_ascii(source, loader=loader))
    assert loader.loaded == []


def test_invalid_source_is_value_error():
    with pytest.raises(ValueError):
        run(convert_to_ascii(""))


def test_empty_ramp_before_load(png_path):
    loader = RecordingLoader()
    with pytest.raises(EmptyRamp):
        run(convert_to_ascii(str(png_path()), {"avoided_characters": GLYPH_RAMP}, loader=loader))
    assert loader.loaded == []


def test_load_failure_propagates(tmp_path):
    with pytest.raises(LoadFailure):
        run(convert_to_ascii(str(tmp_path / "missing.png")))


def test_injected_loader_used_once(png_path):
    loader = RecordingLoader()
    src = str(png_path(size=(2, 2)))
    run(convert_to_ascii(src, loader=loader))
    assert loader.loaded == [src]


def test_concurrent_conversions(png_path):
    black = str(png_path(size=(2, 1), name="black.png"))
    white = str(png_path(size=(2, 1), color=(255, 255, 255, 255), name="white.png"))

    async def both():
        return await asyncio.gather(convert_to_ascii(black), convert_to_ascii(white))

    assert run(both()) == ["$ $\n ", "   \n "]


def test_sync_converter_idempotent():
    img = Image.fromarray(np.arange(48, dtype=np.uint8).reshape(4, 4, 3) * 5)
    conv = AsciiConverter(ConversionOptions(max_width=4))
    first = conv.convert(img)
    assert conv.convert(img) == first
    assert first.count("\n") == 4


def test_convert_pixels_matches_pipeline():
    pixels = [(0, 0, 0, 255), (255, 255, 255, 255), (255, 255, 255, 255), (0, 0, 0, 255)]
    assert convert_pixels(pixels, 2, 2) == "$  \n   $\n "
    assert convert_pixels(pixels, 2, 2) == convert_pixels(pixels, 2, 2)
