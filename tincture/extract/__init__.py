# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Extraction core for Tincture.

Deterministic palette and dominant-color extraction from pixel data.
Clustering is pluggable through the Quantizer interface.
"""

from tincture.extract.pipeline import (
    extract_palette,
    get_color,
    get_color_async,
    get_palette,
    get_palette_async,
)
from tincture.extract.quantize import (
    ColorMap,
    KMeansQuantizer,
    MedianCutQuantizer,
    Quantizer,
)
from tincture.extract.sources import load_pixel_buffer

__all__ = [
    "get_color",
    "get_palette",
    "get_color_async",
    "get_palette_async",
    "extract_palette",
    "load_pixel_buffer",
    "Quantizer",
    "ColorMap",
    "MedianCutQuantizer",
    "KMeansQuantizer",
]
