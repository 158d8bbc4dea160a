# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Extraction options and the types that flow through the pipeline.

Design principles:
- Immutable: configuration and buffers are frozen dataclasses
- Per call: every value here is created for one extraction and discarded
- Forgiving input, strict output: loosely typed options are normalized
  into a fully populated ExtractionConfig, which validates itself

Defaults:
    color_count     10   (valid 2-20; 1 is rejected, use get_color())
    quality         10   (sampling stride, >= 1; 1 inspects every pixel)
    ignore_white    True
    white_threshold 250  (all of R, G, B above this is "white")
    alpha_threshold 125  (alpha below this is "transparent")
    min_saturation  0.0  (clamped to 0-1; 0 disables the filter)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from numbers import Integral, Real
from typing import Any, Optional, Union

import numpy as np
from numpy.typing import NDArray

from tincture.errors import ValidationError


# =============================================================================
# Color Types
# =============================================================================

RGBColor = tuple[int, int, int]
"""An sRGB color, each channel a plain int in 0-255."""

Palette = list[RGBColor]
"""Ordered colors, dominant first."""


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_COLOR_COUNT = 10
MIN_COLOR_COUNT = 2
MAX_COLOR_COUNT = 20
DEFAULT_QUALITY = 10
DEFAULT_IGNORE_WHITE = True
DEFAULT_WHITE_THRESHOLD = 250
DEFAULT_ALPHA_THRESHOLD = 125
DEFAULT_MIN_SATURATION = 0.0

# get_color() always asks for this many colors and returns the first
DOMINANT_COLOR_COUNT = 5


# =============================================================================
# Configuration Types
# =============================================================================


@dataclass(frozen=True, slots=True)
class ExtractionOptions:
    """
    Caller-facing extraction options.

    Every field is optional; ``None`` means "use the default". Values are
    not validated here. They are normalized by :func:`normalize_options`.
    A plain mapping with the same keys is accepted wherever this type is.
    """
    color_count: Any = None
    quality: Any = None
    ignore_white: Any = None
    white_threshold: Any = None
    alpha_threshold: Any = None
    min_saturation: Any = None

    def to_dict(self) -> dict:
        """Serialize the fields that were set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True, slots=True)
class FilterSet:
    """
    The pixel filters applied while sampling.

    Attributes:
        ignore_white: Skip pixels whose R, G and B all exceed white_threshold
        white_threshold: Channel value above which a pixel counts as white
        alpha_threshold: Alpha below which a pixel counts as transparent
        min_saturation: Minimum HSV saturation (0-1); 0 disables the check
    """
    ignore_white: bool = DEFAULT_IGNORE_WHITE
    white_threshold: float = DEFAULT_WHITE_THRESHOLD
    alpha_threshold: float = DEFAULT_ALPHA_THRESHOLD
    min_saturation: float = DEFAULT_MIN_SATURATION

    def relaxed(self, **overrides: Any) -> FilterSet:
        """Return a copy with some filters weakened."""
        return replace(self, **overrides)


@dataclass(frozen=True, slots=True)
class ExtractionConfig:
    """
    Canonical, fully populated extraction configuration.

    Produced by :func:`normalize_options`; constructing one directly with
    out-of-range values raises ValidationError.
    """
    color_count: int = DEFAULT_COLOR_COUNT
    quality: int = DEFAULT_QUALITY
    ignore_white: bool = DEFAULT_IGNORE_WHITE
    white_threshold: float = DEFAULT_WHITE_THRESHOLD
    alpha_threshold: float = DEFAULT_ALPHA_THRESHOLD
    min_saturation: float = DEFAULT_MIN_SATURATION

    def __post_init__(self) -> None:
        """Validate ranges."""
        if not MIN_COLOR_COUNT <= self.color_count <= MAX_COLOR_COUNT:
            raise ValidationError(
                f"color_count must be {MIN_COLOR_COUNT}-{MAX_COLOR_COUNT}, "
                f"got {self.color_count}"
            )
        if self.quality < 1:
            raise ValidationError(f"quality must be >= 1, got {self.quality}")
        if not 0.0 <= self.min_saturation <= 1.0:
            raise ValidationError(
                f"min_saturation must be 0-1, got {self.min_saturation}"
            )

    @property
    def filters(self) -> FilterSet:
        """The filter subset of this configuration."""
        return FilterSet(
            ignore_white=self.ignore_white,
            white_threshold=self.white_threshold,
            alpha_threshold=self.alpha_threshold,
            min_saturation=self.min_saturation,
        )

    def to_dict(self) -> dict:
        """Serialize to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# =============================================================================
# Pixel Buffer
# =============================================================================


@dataclass(frozen=True, slots=True)
class PixelBuffer:
    """
    Decoded RGBA pixels, 4 bytes per pixel in row-major order.

    Attributes:
        data: Flat uint8 array of length >= pixel_count * 4
        pixel_count: Number of pixels the sampler may visit
    """
    data: NDArray[np.uint8]
    pixel_count: int

    def __post_init__(self) -> None:
        if self.pixel_count < 0:
            raise ValueError(f"pixel_count must be >= 0, got {self.pixel_count}")
        if self.data.ndim != 1 or self.data.dtype != np.uint8:
            raise ValueError(
                f"Expected flat uint8 data, got {self.data.dtype} "
                f"array of shape {self.data.shape}"
            )
        if len(self.data) < self.pixel_count * 4:
            raise ValueError(
                f"Buffer holds {len(self.data)} bytes, "
                f"need {self.pixel_count * 4} for {self.pixel_count} pixels"
            )

    @classmethod
    def from_rgba(cls, rgba: NDArray[np.uint8]) -> PixelBuffer:
        """Wrap an (H, W, 4) array without copying it."""
        flat = np.ascontiguousarray(rgba).reshape(-1)
        return cls(data=flat, pixel_count=len(flat) // 4)

    def rgba(self) -> NDArray[np.uint8]:
        """View of the first pixel_count pixels as an (N, 4) array."""
        return self.data[: self.pixel_count * 4].reshape(-1, 4)


# =============================================================================
# Option Normalization
# =============================================================================

OptionsLike = Union[ExtractionOptions, Mapping]


def is_options_object(value: Any) -> bool:
    """True if value is an options object rather than a positional scalar."""
    return isinstance(value, (ExtractionOptions, Mapping))


def normalize_options(
    color_count_or_options: Any = None,
    quality: Any = None,
) -> ExtractionConfig:
    """
    Normalize either calling convention into an ExtractionConfig.

    Accepts ``(color_count, quality)`` positionally or a single options
    object (ExtractionOptions or mapping). When an options object is given,
    ``quality`` is ignored.

    Raises:
        ValidationError: If the effective color_count is exactly 1.
    """
    if is_options_object(color_count_or_options):
        raw = _options_as_dict(color_count_or_options)
    else:
        raw = {"color_count": color_count_or_options, "quality": quality}

    return ExtractionConfig(
        color_count=_normalize_color_count(raw.get("color_count")),
        quality=_normalize_quality(raw.get("quality")),
        ignore_white=_normalize_flag(raw.get("ignore_white"), DEFAULT_IGNORE_WHITE),
        white_threshold=_normalize_number(
            raw.get("white_threshold"), DEFAULT_WHITE_THRESHOLD
        ),
        alpha_threshold=_normalize_number(
            raw.get("alpha_threshold"), DEFAULT_ALPHA_THRESHOLD
        ),
        min_saturation=_normalize_saturation(raw.get("min_saturation")),
    )


def with_color_count(options: Any, color_count: int) -> dict:
    """Options as a dict with color_count forced to the given value."""
    raw = _options_as_dict(options) if is_options_object(options) else {}
    raw["color_count"] = color_count
    return raw


def _options_as_dict(options: OptionsLike) -> dict:
    if isinstance(options, ExtractionOptions):
        return options.to_dict()
    return dict(options)


def _as_integer(value: Any) -> Optional[int]:
    """Return value as an int if it is integral, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, Real):
        as_float = float(value)
        if math.isfinite(as_float) and as_float.is_integer():
            return int(as_float)
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return value


def _normalize_color_count(value: Any) -> int:
    color_count = _as_integer(value)
    if color_count is None:
        return DEFAULT_COLOR_COUNT
    if color_count == 1:
        raise ValidationError(
            f"color_count should be between {MIN_COLOR_COUNT} and "
            f"{MAX_COLOR_COUNT}. To get one color, call get_color() "
            f"instead of get_palette()"
        )
    return min(max(color_count, MIN_COLOR_COUNT), MAX_COLOR_COUNT)


def _normalize_quality(value: Any) -> int:
    quality = _as_integer(value)
    if quality is None or quality < 1:
        return DEFAULT_QUALITY
    return quality


def _normalize_flag(value: Any, default: bool) -> bool:
    return default if value is None else bool(value)


def _normalize_number(value: Any, default: float) -> float:
    number = _as_number(value)
    return default if number is None else number


def _normalize_saturation(value: Any) -> float:
    number = _as_number(value)
    if number is None or math.isnan(number):
        return DEFAULT_MIN_SATURATION
    return float(min(max(number, 0.0), 1.0))
