# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Exception types raised by Tincture.

Every error is terminal for the call that raised it. A ``None`` result
from the extraction functions is not an error: it means no representative
color could be derived.
"""

from __future__ import annotations


class TinctureError(Exception):
    """Base class for all Tincture errors."""


class ValidationError(TinctureError, ValueError):
    """Invalid extraction options (raised before any pixel access)."""


class UnsupportedSourceError(TinctureError, TypeError):
    """The pixel source is of a kind the source adapter cannot read."""


class SourceNotReadyError(TinctureError):
    """An in-memory image has no dimensions or its pixel data cannot be loaded."""


class PixelAccessDeniedError(TinctureError):
    """Reading pixels was refused by a security guard.

    The message names the setting the caller has to change.
    """


class AcquisitionError(TinctureError, OSError):
    """Reading, fetching or decoding an encoded image failed."""
