# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Pixel source adapter.

Turns any supported image source into an RGBA PixelBuffer:
- PixelBuffer: returned as-is
- NumPy uint8 array of shape (H, W, 4) or (H, W, 3): already-decoded pixels
- PIL.Image.Image: in-memory image handle
- str / os.PathLike: encoded image file (http:// and https:// are fetched)
- bytes, bytearray, memoryview or a binary file object: encoded image data

Decoded files with an embedded ICC profile are converted to sRGB, so
sampled values match what color pickers show.
"""

from __future__ import annotations

import io
import logging
import os
from typing import Any, BinaryIO, Union

import numpy as np
import requests
from numpy.typing import NDArray
from PIL import Image, ImageCms

from tincture.errors import (
    AcquisitionError,
    PixelAccessDeniedError,
    SourceNotReadyError,
    UnsupportedSourceError,
)
from tincture.schema import PixelBuffer

logger = logging.getLogger(__name__)

URL_TIMEOUT = 10

PixelSource = Union[
    PixelBuffer,
    NDArray[np.uint8],
    Image.Image,
    str,
    os.PathLike,
    bytes,
    bytearray,
    memoryview,
    BinaryIO,
]


def load_pixel_buffer(source: Any) -> PixelBuffer:
    """
    Produce an RGBA pixel buffer from a supported source.

    Raises:
        UnsupportedSourceError: Unrecognized source, or an array with the
            wrong shape or dtype.
        SourceNotReadyError: A PIL image with zero dimensions or pixel data
            that cannot be loaded.
        PixelAccessDeniedError: Pillow refused to decode an image larger
            than PIL.Image.MAX_IMAGE_PIXELS.
        AcquisitionError: A file, URL or byte buffer could not be read or
            decoded.
    """
    if isinstance(source, PixelBuffer):
        return source

    if isinstance(source, np.ndarray):
        return _from_array(source)

    if isinstance(source, Image.Image):
        return _from_image(source)

    if isinstance(source, str) and source.startswith(("http://", "https://")):
        return _decode(_fetch(source), source)

    if isinstance(source, (str, os.PathLike)):
        return _decode(source, os.fspath(source))

    if isinstance(source, (bytes, bytearray, memoryview)):
        return _decode(io.BytesIO(bytes(source)), "<bytes>")

    if hasattr(source, "read"):
        return _decode(source, getattr(source, "name", "<stream>"))

    raise UnsupportedSourceError(
        f"Unsupported source type {type(source).__name__}. Expected a "
        f"PixelBuffer, NumPy array, PIL image, file path, URL or image bytes"
    )


def _from_array(pixels: NDArray) -> PixelBuffer:
    """Wrap an already-decoded (H, W, 3|4) uint8 array."""
    if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
        raise UnsupportedSourceError(
            f"Expected (H, W, 3) or (H, W, 4) array, got shape {pixels.shape}"
        )

    if pixels.dtype != np.uint8:
        raise UnsupportedSourceError(f"Expected uint8 array, got {pixels.dtype}")

    if pixels.shape[2] == 3:
        alpha = np.full(pixels.shape[:2] + (1,), 255, dtype=np.uint8)
        pixels = np.concatenate([pixels, alpha], axis=2)

    return PixelBuffer.from_rgba(pixels)


def _from_image(image: Image.Image) -> PixelBuffer:
    """Read pixels from an in-memory PIL image."""
    if image.width == 0 or image.height == 0:
        raise SourceNotReadyError(
            "Image has no dimensions. It may not have loaded successfully."
        )

    try:
        image.load()
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    except (OSError, ValueError) as exc:
        raise SourceNotReadyError(
            "Image pixel data could not be loaded. Make sure the image is "
            "fully read and not closed before extracting colors."
        ) from exc

    return PixelBuffer.from_rgba(np.asarray(rgba, dtype=np.uint8))


def _fetch(url: str) -> io.BytesIO:
    """Download an image over HTTP(S)."""
    logger.debug("Fetching image from %s", url)
    try:
        response = requests.get(url, timeout=URL_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise AcquisitionError(f"Failed to fetch image from {url}: {exc}") from exc
    return io.BytesIO(response.content)


def _decode(fp: Union[str, os.PathLike, BinaryIO], name: str) -> PixelBuffer:
    """Decode an encoded image into an RGBA buffer."""
    try:
        with Image.open(fp) as image:
            image.load()
            pixels = np.array(_to_srgb_rgba(image), dtype=np.uint8)
    except Image.DecompressionBombError as exc:
        raise PixelAccessDeniedError(
            f"Refused to decode {name}: {exc} Raise PIL.Image.MAX_IMAGE_PIXELS "
            f"(currently {Image.MAX_IMAGE_PIXELS}) if the image is trusted."
        ) from exc
    except (OSError, ValueError) as exc:
        raise AcquisitionError(f"Failed to decode image from {name}: {exc}") from exc

    logger.debug("Decoded %s: %dx%d", name, pixels.shape[1], pixels.shape[0])
    return PixelBuffer.from_rgba(pixels)


def _to_srgb_rgba(image: Image.Image) -> Image.Image:
    """
    Convert to RGBA, applying the embedded ICC profile if there is one.

    Pillow's convert() does NOT remap from embedded profiles (Display P3,
    Adobe RGB), so without this step the samples would be shifted.
    """
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")

    icc_profile = image.info.get("icc_profile")
    if not icc_profile:
        return rgba

    try:
        embedded_profile = ImageCms.ImageCmsProfile(io.BytesIO(icc_profile))
        srgb_profile = ImageCms.createProfile("sRGB")
        return ImageCms.profileToProfile(rgba, embedded_profile, srgb_profile)
    except (ImageCms.PyCMSError, OSError):
        logger.debug("ICC conversion failed; using unconverted pixels", exc_info=True)
        return rgba
