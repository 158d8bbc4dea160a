# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Strided pixel sampling with transparency, whiteness and saturation filters.

Filters apply in a fixed order (transparency, whiteness, saturation) and a
pixel is skipped as soon as it fails one. Samples keep buffer scan order.

When the filters remove every sampled pixel, sampling is retried with
progressively weaker filters (see RELAXATION_LADDER) so that clustering is
never starved when weaker criteria would have produced samples.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from tincture.schema import FilterSet, PixelBuffer

logger = logging.getLogger(__name__)


# Filter overrides tried in order; the first non-empty sample set wins.
RELAXATION_LADDER: tuple[dict, ...] = (
    {},
    {"ignore_white": False},
    {"ignore_white": False, "alpha_threshold": 0},
)


def strided_pixels(buffer: PixelBuffer, quality: int) -> NDArray[np.uint8]:
    """Return every ``quality``-th pixel of the buffer as an (N, 4) view."""
    if quality < 1:
        raise ValueError(f"quality must be >= 1, got {quality}")
    return buffer.rgba()[::quality]


def sample_pixels(
    buffer: PixelBuffer,
    quality: int,
    filters: FilterSet,
) -> NDArray[np.uint8]:
    """
    Sample the buffer at a fixed stride, keeping pixels that pass the filters.

    Visits pixel indices 0, quality, 2*quality, ... below pixel_count.
    A visited pixel is skipped when:
    1. its alpha is below alpha_threshold (transparent), or
    2. ignore_white is set and R, G and B all exceed white_threshold, or
    3. min_saturation > 0 and its HSV saturation is below min_saturation
       (pure black has undefined saturation and is always skipped).

    Args:
        buffer: RGBA pixel buffer (never modified)
        quality: Sampling stride, >= 1
        filters: Active filter set

    Returns:
        (N, 3) uint8 array of RGB samples in scan order. N may be 0.
    """
    pixels = strided_pixels(buffer, quality)
    rgb = pixels[:, :3]

    keep = pixels[:, 3] >= float(filters.alpha_threshold)

    if filters.ignore_white:
        keep &= ~np.all(rgb > float(filters.white_threshold), axis=1)

    if filters.min_saturation > 0:
        channel_max = rgb.max(axis=1).astype(np.float64)
        channel_min = rgb.min(axis=1).astype(np.float64)
        with np.errstate(divide="ignore", invalid="ignore"):
            saturation = (channel_max - channel_min) / channel_max
        keep &= (channel_max > 0) & (saturation >= filters.min_saturation)

    return rgb[keep]


def sample_with_relaxation(
    buffer: PixelBuffer,
    quality: int,
    filters: FilterSet,
) -> NDArray[np.uint8]:
    """
    Sample the buffer, relaxing the filters while the result is empty.

    Stages (at most three sampling passes):
    1. The filters as configured
    2. ignore_white disabled
    3. ignore_white disabled and alpha_threshold 0 (opacity ignored)

    Each stage replaces the previous samples; nothing is merged.

    Returns:
        (N, 3) uint8 array from the first stage that kept any pixel, or the
        empty result of the last stage.
    """
    samples = np.empty((0, 3), dtype=np.uint8)
    for stage, overrides in enumerate(RELAXATION_LADDER, start=1):
        active = filters.relaxed(**overrides)
        samples = sample_pixels(buffer, quality, active)
        if len(samples) > 0:
            if stage > 1:
                logger.debug(
                    "Relaxed filters to stage %d (%s); kept %d samples",
                    stage, overrides, len(samples),
                )
            return samples
        logger.debug("Sampling stage %d kept no pixels", stage)
    return samples
