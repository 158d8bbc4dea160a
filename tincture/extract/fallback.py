# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""Mean-color fallback for samples that clustering could not partition."""

from __future__ import annotations

from typing import Optional

import numpy as np
from numpy.typing import NDArray

from tincture.schema import Palette


def average_color(samples: NDArray[np.uint8]) -> Optional[Palette]:
    """
    Average the samples into a single-color palette.

    Each channel is the arithmetic mean rounded half up to an int.

    Args:
        samples: Array of shape (N, 3) or (N, 4); only RGB is averaged

    Returns:
        ``[(r, g, b)]``, or None if there are no samples
    """
    if len(samples) == 0:
        return None

    mean = samples[:, :3].astype(np.float64).mean(axis=0)
    r, g, b = np.floor(mean + 0.5).astype(int)
    return [(int(r), int(g), int(b))]
