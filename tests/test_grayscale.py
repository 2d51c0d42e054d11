import numpy as np
import pytest

from ascii_image.rendering.grayscale import canvas_to_grayscale, rgb_to_grayscale


def test_black_and_white():
    assert rgb_to_grayscale(0, 0, 0) == 0
    assert rgb_to_grayscale(255, 255, 255) == pytest.approx(255)


def test_weights():
    assert rgb_to_grayscale(100, 0, 0) == pytest.approx(30)
    assert rgb_to_grayscale(0, 100, 0) == pytest.approx(59)
    assert rgb_to_grayscale(0, 0, 100) == pytest.approx(11)


def test_tuple_buffer_row_major():
    pixels = [(0, 0, 0, 255), (255, 255, 255, 255), (100, 0, 0, 0), (0, 0, 100, 255)]
    gray = canvas_to_grayscale(pixels, 2, 2)
    assert gray.dtype == np.float64
    assert gray.tolist() == pytest.approx([0, 255, 30, 11])


def test_alpha_ignored():
    a = canvas_to_grayscale([(10, 20, 30, 0)], 1, 1)
    b = canvas_to_grayscale([(10, 20, 30, 255)], 1, 1)
    assert a[0] == b[0] == rgb_to_grayscale(10, 20, 30)


def test_flat_bytes_layout():
    data = bytes([0, 0, 0, 255, 255, 255, 255, 255, 0, 100, 0, 255])
    gray = canvas_to_grayscale(data, 3, 1)
    assert gray.tolist() == pytest.approx([0, 255, 59])


def test_numpy_image_shape():
    arr = np.zeros((2, 3, 4), dtype=np.uint8)
    arr[1, 2] = (255, 255, 255, 255)
    gray = canvas_to_grayscale(arr, 3, 2)
    assert len(gray) == 6
    assert gray[5] == pytest.approx(255)
    assert gray[:5].tolist() == [0, 0, 0, 0, 0]


def test_no_rounding():
    gray = canvas_to_grayscale([(1, 1, 1, 255), (3, 0, 0, 255)], 2, 1)
    assert gray[1] == pytest.approx(0.9)
    assert gray[1] != round(gray[1])


def test_length_mismatch():
    with pytest.raises(ValueError):
        canvas_to_grayscale([(0, 0, 0, 255)] * 3, 2, 2)


def test_empty():
    assert canvas_to_grayscale([], 0, 0).size == 0
