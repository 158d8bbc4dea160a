# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Main extraction API.

Every public function normalizes its arguments into an ExtractionConfig and
delegates to :func:`extract_palette`, the single implementation:

    options -> config -> pixel buffer -> samples (relaxed if empty)
            -> quantizer -> palette, or fallback average if it returns None

Two calling conventions are accepted everywhere:
- positional: ``get_palette(source, color_count, quality)``,
  ``get_color(source, quality)``
- options object: ``get_palette(source, {"color_count": 8, ...})`` or an
  ExtractionOptions instance. It takes precedence; trailing positional
  arguments are ignored.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Optional

from tincture.extract.fallback import average_color
from tincture.extract.quantize import MedianCutQuantizer, Quantizer
from tincture.extract.sampling import sample_with_relaxation, strided_pixels
from tincture.extract.sources import load_pixel_buffer
from tincture.schema import (
    DOMINANT_COLOR_COUNT,
    ExtractionConfig,
    Palette,
    PixelBuffer,
    RGBColor,
    normalize_options,
)
from tincture.schema.options import is_options_object, with_color_count

logger = logging.getLogger(__name__)


def extract_palette(
    buffer: PixelBuffer,
    config: ExtractionConfig,
    quantizer: Optional[Quantizer] = None,
) -> Optional[Palette]:
    """
    Extract a palette from an already-acquired pixel buffer.

    Args:
        buffer: RGBA pixels (never modified)
        config: Normalized extraction configuration
        quantizer: Clustering collaborator (default: MedianCutQuantizer)

    Returns:
        - up to config.color_count colors from the quantizer, dominant first
        - a single averaged color if the quantizer could not partition the
          samples
        - None only if the buffer has no pixels to sample
    """
    if quantizer is None:
        quantizer = MedianCutQuantizer()

    samples = sample_with_relaxation(buffer, config.quality, config.filters)

    if len(samples) > 0:
        color_map = quantizer.quantize(samples, config.color_count)
        if color_map is not None:
            palette = color_map.palette()
            if palette:
                return palette
        logger.debug(
            "Quantizer could not partition %d samples; averaging", len(samples)
        )
    else:
        # Only reachable when a saturation filter rejects every pixel or the
        # buffer is empty; average the unfiltered stride instead.
        samples = strided_pixels(buffer, config.quality)
        logger.debug("No samples after relaxation; averaging %d pixels", len(samples))

    return average_color(samples)


def get_palette(
    source: Any,
    color_count_or_options: Any = None,
    quality: Any = None,
    *,
    quantizer: Optional[Quantizer] = None,
) -> Optional[Palette]:
    """
    Extract a color palette from an image.

    Args:
        source: Any source accepted by :func:`load_pixel_buffer` (array,
            PIL image, PixelBuffer, file path, URL or image bytes)
        color_count_or_options: Number of colors (2-20, default 10) or an
            options object (mapping or ExtractionOptions)
        quality: Sampling stride (1 = every pixel, default 10); ignored
            when an options object is given
        quantizer: Clustering collaborator (default: MedianCutQuantizer)

    Returns:
        List of (r, g, b) tuples, dominant first, or None when no color
        could be derived.

    Raises:
        ValidationError: color_count is 1 (raised before reading the source)
        TinctureError: The source could not be read; see tincture.errors

    Example:
        >>> from tincture import get_palette
        >>> get_palette("photo.jpg", 5)
        [(212, 180, 140), (40, 44, 52), ...]
        >>> get_palette("photo.jpg", {"color_count": 5, "min_saturation": 0.2})
    """
    config = normalize_options(color_count_or_options, quality)
    buffer = load_pixel_buffer(source)
    return extract_palette(buffer, config, quantizer)


def get_color(
    source: Any,
    quality_or_options: Any = None,
    *,
    quantizer: Optional[Quantizer] = None,
) -> Optional[RGBColor]:
    """
    Extract the dominant color of an image.

    The dominant color is the first entry of a 5-color palette. The color
    count is always 5; a color_count in the options is overridden.

    Args:
        source: Any source accepted by get_palette()
        quality_or_options: Sampling stride or an options object
        quantizer: Clustering collaborator (default: MedianCutQuantizer)

    Returns:
        (r, g, b) tuple, or None when no color could be derived.
    """
    palette = get_palette(
        source, _dominant_config(quality_or_options), quantizer=quantizer
    )
    return None if palette is None else palette[0]


def get_palette_async(
    source: Any,
    color_count_or_options: Any = None,
    quality: Any = None,
    *,
    quantizer: Optional[Quantizer] = None,
) -> Awaitable[Optional[Palette]]:
    """
    Awaitable variant of :func:`get_palette`.

    Options are validated immediately, so ValidationError raises at call
    time. Reading and decoding the source runs in a worker thread; its
    failures (e.g. AcquisitionError for a missing file) raise on await.
    """
    config = normalize_options(color_count_or_options, quality)
    return _extract_from_source(source, config, quantizer)


def get_color_async(
    source: Any,
    quality_or_options: Any = None,
    *,
    quantizer: Optional[Quantizer] = None,
) -> Awaitable[Optional[RGBColor]]:
    """Awaitable variant of :func:`get_color`."""
    config = normalize_options(_dominant_config(quality_or_options))
    return _first_color(_extract_from_source(source, config, quantizer))


def _dominant_config(quality_or_options: Any) -> dict:
    """Options for a dominant-color request: color_count forced to 5."""
    if is_options_object(quality_or_options):
        return with_color_count(quality_or_options, DOMINANT_COLOR_COUNT)
    return {"color_count": DOMINANT_COLOR_COUNT, "quality": quality_or_options}


async def _extract_from_source(
    source: Any,
    config: ExtractionConfig,
    quantizer: Optional[Quantizer],
) -> Optional[Palette]:
    buffer = await asyncio.to_thread(load_pixel_buffer, source)
    return extract_palette(buffer, config, quantizer)


async def _first_color(
    palette: Awaitable[Optional[Palette]],
) -> Optional[RGBColor]:
    result = await palette
    return None if result is None else result[0]
