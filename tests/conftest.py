import io

import pytest
from PIL import Image

from ascii_image.config import Config


def make_png(size, color=(0, 0, 0, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def png_path(tmp_path):
    """Write a solid-colour PNG and return its path."""
    def _make(size=(4, 2), color=(0, 0, 0, 255), name="img.png"):
        p = tmp_path / name
        p.write_bytes(make_png(size, color))
        return p
    return _make


@pytest.fixture
def cfg(tmp_path):
    return Config.load(str(tmp_path / "cfg.json"))


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ASCII_IMAGE_CONFIG", str(tmp_path / "default_cfg.json"))
