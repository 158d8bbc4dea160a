# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Schema definitions for extraction options, pixel buffers and colors.

Configuration types are immutable (frozen dataclasses) and created fresh
for each extraction call.
"""

from tincture.schema.options import (
    DEFAULT_ALPHA_THRESHOLD,
    DEFAULT_COLOR_COUNT,
    DEFAULT_IGNORE_WHITE,
    DEFAULT_MIN_SATURATION,
    DEFAULT_QUALITY,
    DEFAULT_WHITE_THRESHOLD,
    DOMINANT_COLOR_COUNT,
    MAX_COLOR_COUNT,
    MIN_COLOR_COUNT,
    ExtractionConfig,
    ExtractionOptions,
    FilterSet,
    Palette,
    PixelBuffer,
    RGBColor,
    normalize_options,
)

__all__ = [
    # Color types
    "RGBColor",
    "Palette",
    # Configuration
    "ExtractionOptions",
    "ExtractionConfig",
    "FilterSet",
    "normalize_options",
    # Pixel data
    "PixelBuffer",
    # Defaults
    "DEFAULT_COLOR_COUNT",
    "DEFAULT_QUALITY",
    "DEFAULT_IGNORE_WHITE",
    "DEFAULT_WHITE_THRESHOLD",
    "DEFAULT_ALPHA_THRESHOLD",
    "DEFAULT_MIN_SATURATION",
    "DOMINANT_COLOR_COUNT",
    "MIN_COLOR_COUNT",
    "MAX_COLOR_COUNT",
]
