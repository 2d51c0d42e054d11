#!/usr/bin/env python3
# ascii_image/loader.py
"""
Image loading and resampling.

Resolves an image source to a decoded Pillow image and renders it into an
RGBA pixel buffer at any target grid size.
Features:
- http/https URLs through a requests session with urllib3 Retry.
- file:// URIs, data: URIs (base64 or percent-encoded) and plain paths.
- Raw bytes and already decoded Pillow images.
- Every failure surfaces as LoadFailure with the cause chained.
"""

from __future__ import annotations
import base64, binascii, io, logging
from pathlib import Path
from typing import Any, Dict, Tuple
from urllib.parse import unquote_to_bytes, unquote, urlparse

import numpy as np
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from PIL import Image, UnidentifiedImageError

from ascii_image.config import Config
from ascii_image.errors import LoadFailure

__all__ = ["ImageLoader", "SourceImage", "RESAMPLE"]

log = logging.getLogger(__name__)

RESAMPLE: Dict[str, int] = {
    "lanczos": Image.LANCZOS,
    "bilinear": Image.BILINEAR,
    "bicubic": Image.BICUBIC,
    "nearest": Image.NEAREST,
    "box": Image.BOX,
    "hamming": Image.HAMMING,
}


# -------------------------
# SourceImage
# -------------------------

class SourceImage:
    """
    A decoded image at its natural size.
    render() and pixel_buffer() never modify the decoded original.
    """

    def __init__(self, image: Image.Image, resample: str = "lanczos"):
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        self.image = image
        self.resample = RESAMPLE.get(resample, Image.LANCZOS)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def render(self, width: int, height: int) -> Image.Image:
        """Return the image resampled to width x height."""
        if self.image.width == width and self.image.height == height:
            return self.image
        return self.image.resize((width, height), self.resample)

    def pixel_buffer(self, width: int, height: int) -> np.ndarray:
        """Return an (width * height, 4) uint8 RGBA array in row-major order."""
        img = self.render(width, height)
        arr = np.asarray(img, dtype=np.uint8)
        return arr.reshape(width * height, 4)


# -------------------------
# ImageLoader
# -------------------------

class ImageLoader:
    """
    Resolve image sources to SourceImage objects.
    Holds one HTTP session; safe to reuse for several loads.
    """

    def __init__(
        self,
        user_agent: str = "ascii-image",
        connect_timeout: float = 5.0,
        read_timeout: float = 15.0,
        retries: int = 3,
        pool_size: int = 4,
        resample: str = "lanczos",
    ):
        self.timeout = (connect_timeout, read_timeout)
        self.resample = resample

        # HTTP session with retry
        self.session = requests.Session()
        self.session.headers["User-Agent"] = user_agent
        retry = Retry(
            total=retries,
            connect=retries,
            read=retries,
            backoff_factor=0.3,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=False,
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=pool_size, pool_maxsize=pool_size)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    @classmethod
    def from_config(cls, cfg: Config) -> "ImageLoader":
        n = cfg["network"]
        return cls(
            user_agent=n["user_agent"],
            connect_timeout=float(n["connect_timeout_s"]),
            read_timeout=float(n["read_timeout_s"]),
            retries=int(n["retries"]),
            pool_size=int(n["pool_size"]),
            resample=cfg["render"]["resample"],
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ImageLoader":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # -------------
    # Fetch logic
    # -------------

    def load(self, source: Any) -> SourceImage:
        """Fetch and decode source. Raises LoadFailure on any failure."""
        if isinstance(source, Image.Image):
            return SourceImage(source, self.resample)
        if isinstance(source, (bytes, bytearray, memoryview)):
            return SourceImage(self._decode(bytes(source), "<bytes>"), self.resample)
        if isinstance(source, Path):
            return SourceImage(self._decode(self._read_file(source, source), source), self.resample)

        s = str(source).strip()
        scheme = urlparse(s).scheme.lower()
        if scheme in ("http", "https"):
            data = self._fetch_http(s)
        elif scheme == "data":
            data = self._decode_data_uri(s)
        elif scheme == "file":
            data = self._read_file(Path(unquote(urlparse(s).path)), s)
        else:
            data = self._read_file(Path(s).expanduser(), s)
        img = self._decode(data, s)
        log.debug("Loaded %s (%dx%d)", s if len(s) <= 80 else s[:77] + "...", img.width, img.height)
        return SourceImage(img, self.resample)

    def _fetch_http(self, url: str) -> bytes:
        try:
            r = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            log.debug("GET %s failed: %s", url, e)
            raise LoadFailure(url, "Unable to fetch image") from e
        if r.status_code != 200 or not r.content:
            raise LoadFailure(url, f"Unable to fetch image (HTTP {r.status_code})")
        return r.content

    @staticmethod
    def _decode_data_uri(uri: str) -> bytes:
        header, sep, payload = uri.partition(",")
        if not sep:
            raise LoadFailure(uri, "Malformed data URI")
        try:
            if header.lower().endswith(";base64"):
                return base64.b64decode(unquote(payload), validate=True)
            return unquote_to_bytes(payload)
        except (binascii.Error, ValueError) as e:
            raise LoadFailure(uri, "Malformed data URI") from e

    @staticmethod
    def _read_file(path: Path, source: Any) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            raise LoadFailure(source, "Unable to read image") from e

    @staticmethod
    def _decode(data: bytes, source: Any) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
            raise LoadFailure(source, "Unable to decode image") from e
        return img
