# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""Tests for the pixel source adapter."""

import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
import requests
from PIL import Image

from tincture.errors import (
    AcquisitionError,
    PixelAccessDeniedError,
    SourceNotReadyError,
    UnsupportedSourceError,
)
from tincture.extract.sources import load_pixel_buffer
from tincture.schema import PixelBuffer


def _png_bytes(mode="RGB", size=(10, 10), color="red"):
    image = Image.new(mode, size, color=color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def _first_pixel(buffer):
    return tuple(int(v) for v in buffer.rgba()[0])


class TestInMemorySources:

    def test_pixel_buffer_passthrough(self):
        buffer = PixelBuffer(data=np.zeros(8, dtype=np.uint8), pixel_count=2)
        assert load_pixel_buffer(buffer) is buffer

    def test_rgb_array_gets_opaque_alpha(self):
        pixels = np.full((4, 5, 3), [1, 2, 3], dtype=np.uint8)
        buffer = load_pixel_buffer(pixels)
        assert buffer.pixel_count == 20
        assert _first_pixel(buffer) == (1, 2, 3, 255)

    def test_rgba_array_keeps_alpha(self):
        pixels = np.full((2, 2, 4), [9, 8, 7, 6], dtype=np.uint8)
        buffer = load_pixel_buffer(pixels)
        assert buffer.pixel_count == 4
        assert _first_pixel(buffer) == (9, 8, 7, 6)

    def test_zero_size_array(self):
        buffer = load_pixel_buffer(np.zeros((0, 0, 3), dtype=np.uint8))
        assert buffer.pixel_count == 0

    def test_invalid_shape_raises(self):
        with pytest.raises(UnsupportedSourceError, match="Expected.*H, W, 3"):
            load_pixel_buffer(np.zeros((10, 10), dtype=np.uint8))

    def test_invalid_dtype_raises(self):
        with pytest.raises(UnsupportedSourceError, match="Expected uint8"):
            load_pixel_buffer(np.zeros((10, 10, 3), dtype=np.float32))

    def test_pil_image(self):
        buffer = load_pixel_buffer(Image.new("RGB", (3, 2), color=(10, 20, 30)))
        assert buffer.pixel_count == 6
        assert _first_pixel(buffer) == (10, 20, 30, 255)

    def test_pil_image_other_modes_converted(self):
        buffer = load_pixel_buffer(Image.new("L", (2, 2), color=77))
        assert _first_pixel(buffer) == (77, 77, 77, 255)

    def test_pil_rgba_image_keeps_alpha(self):
        buffer = load_pixel_buffer(Image.new("RGBA", (2, 2), color=(1, 2, 3, 4)))
        assert _first_pixel(buffer) == (1, 2, 3, 4)

    def test_pil_image_without_dimensions(self):
        with pytest.raises(SourceNotReadyError, match="no dimensions"):
            load_pixel_buffer(Image.new("RGB", (0, 0)))

    def test_unloadable_pil_image(self):
        image = Image.new("RGB", (2, 2))
        with patch.object(image, "load", side_effect=OSError("image file is truncated")):
            with pytest.raises(SourceNotReadyError, match="could not be loaded"):
                load_pixel_buffer(image)


class TestEncodedSources:

    def test_file_path_str_and_path(self, tmp_path):
        path = tmp_path / "blue.png"
        Image.new("RGB", (10, 10), color="blue").save(path)

        for source in (str(path), Path(path)):
            buffer = load_pixel_buffer(source)
            assert buffer.pixel_count == 100
            assert _first_pixel(buffer) == (0, 0, 255, 255)

    def test_bytes(self):
        buffer = load_pixel_buffer(_png_bytes())
        assert buffer.pixel_count == 100
        assert _first_pixel(buffer) == (255, 0, 0, 255)

    def test_bytearray_and_memoryview(self):
        data = _png_bytes()
        assert load_pixel_buffer(bytearray(data)).pixel_count == 100
        assert load_pixel_buffer(memoryview(data)).pixel_count == 100

    def test_file_object(self):
        buffer = load_pixel_buffer(io.BytesIO(_png_bytes()))
        assert buffer.pixel_count == 100

    def test_transparent_png_keeps_alpha(self, tmp_path):
        path = tmp_path / "transparent.png"
        Image.new("RGBA", (4, 4), color=(10, 20, 30, 0)).save(path)
        assert _first_pixel(load_pixel_buffer(path)) == (10, 20, 30, 0)

    def test_missing_file(self):
        with pytest.raises(AcquisitionError, match="/non/existent/file.png"):
            load_pixel_buffer("/non/existent/file.png")

    def test_acquisition_error_is_os_error(self):
        with pytest.raises(OSError):
            load_pixel_buffer("/non/existent/file.png")

    def test_undecodable_bytes(self):
        with pytest.raises(AcquisitionError, match="<bytes>"):
            load_pixel_buffer(b"definitely not an image")

    def test_decompression_bomb_is_access_denied(self, tmp_path, monkeypatch):
        path = tmp_path / "large.png"
        Image.new("RGB", (20, 20)).save(path)
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

        with pytest.raises(PixelAccessDeniedError, match="MAX_IMAGE_PIXELS"):
            load_pixel_buffer(path)


class TestUrlSources:

    def test_url_success(self):
        with patch("requests.get") as mock_get:
            mock_response = MagicMock()
            mock_response.content = _png_bytes(color="red")
            mock_response.raise_for_status.return_value = None
            mock_get.return_value = mock_response

            url = "http://example.com/image.png"
            buffer = load_pixel_buffer(url)

            mock_get.assert_called_once_with(url, timeout=10)
            assert buffer.pixel_count == 100
            assert _first_pixel(buffer) == (255, 0, 0, 255)

    def test_url_http_error(self):
        with patch("requests.get") as mock_get:
            mock_response = MagicMock()
            mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                "404 Client Error"
            )
            mock_get.return_value = mock_response

            with pytest.raises(AcquisitionError, match="404"):
                load_pixel_buffer("https://example.com/nonexistent.png")

    def test_url_connection_error(self):
        with patch("requests.get", side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(AcquisitionError, match="refused"):
                load_pixel_buffer("https://example.com/image.png")


class TestUnsupportedSources:

    @pytest.mark.parametrize("source", [42, None, 3.5, ["a.png"]])
    def test_unsupported(self, source):
        with pytest.raises(UnsupportedSourceError, match="Unsupported source type"):
            load_pixel_buffer(source)

    def test_unsupported_is_type_error(self):
        with pytest.raises(TypeError):
            load_pixel_buffer(object())
