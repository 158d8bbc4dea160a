# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Tincture -- Palette and dominant color extraction from raster images.

Samples pixels at a fixed stride, filters out transparent, white and
(optionally) desaturated pixels, and clusters the rest into a small
ordered palette of RGB tuples.

Quick start::

    from tincture import get_color, get_palette

    get_color("image.png")                  # (r, g, b)
    get_palette("image.png", 8)             # [(r, g, b), ...]
    get_palette("image.png", {"color_count": 8, "ignore_white": False})
"""

from __future__ import annotations

import logging

__version__ = "1.0.0"

from tincture.errors import (
    AcquisitionError,
    PixelAccessDeniedError,
    SourceNotReadyError,
    TinctureError,
    UnsupportedSourceError,
    ValidationError,
)
from tincture.extract import (
    ColorMap,
    KMeansQuantizer,
    MedianCutQuantizer,
    Quantizer,
    extract_palette,
    get_color,
    get_color_async,
    get_palette,
    get_palette_async,
)
from tincture.schema import (
    ExtractionConfig,
    ExtractionOptions,
    PixelBuffer,
    RGBColor,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "get_color",
    "get_palette",
    "get_color_async",
    "get_palette_async",
    "extract_palette",
    # Types (commonly needed)
    "ExtractionOptions",
    "ExtractionConfig",
    "PixelBuffer",
    "RGBColor",
    # Clustering
    "Quantizer",
    "ColorMap",
    "MedianCutQuantizer",
    "KMeansQuantizer",
    # Errors
    "TinctureError",
    "ValidationError",
    "UnsupportedSourceError",
    "SourceNotReadyError",
    "PixelAccessDeniedError",
    "AcquisitionError",
    # Version
    "__version__",
]
