# Copyright (c) 2026 Tincture
# SPDX-License-Identifier: MIT

"""
Color clustering behind a single-operation interface.

A quantizer turns RGB samples into at most ``color_count`` representative
colors, or returns None when the samples cannot be partitioned (no samples,
or fewer than two distinct colors). None is an expected outcome, not an
error; the pipeline falls back to averaging.

Two implementations:
1. MedianCutQuantizer: Pillow's median cut (default)
2. KMeansQuantizer: seeded k-means++ in RGB, pure NumPy

Both order colors by population, most populous first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray
from PIL import Image

from tincture.schema import RGBColor


@dataclass(frozen=True, slots=True)
class ColorMap:
    """
    Result of a successful clustering.

    Attributes:
        colors: Representative colors, most populous first
        counts: Number of samples assigned to each color
    """
    colors: tuple[RGBColor, ...]
    counts: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.colors) != len(self.counts):
            raise ValueError(
                f"Got {len(self.colors)} colors but {len(self.counts)} counts"
            )

    def palette(self) -> list[RGBColor]:
        """Colors as a list, dominant first."""
        return list(self.colors)

    @classmethod
    def from_clusters(
        cls,
        centers: NDArray,
        counts: NDArray,
    ) -> ColorMap:
        """Build from cluster centers and sizes, dropping empty clusters."""
        order = sorted(
            (i for i in range(len(counts)) if counts[i] > 0),
            key=lambda i: -int(counts[i]),
        )
        colors = tuple(_to_rgb(centers[i]) for i in order)
        return cls(colors=colors, counts=tuple(int(counts[i]) for i in order))


@runtime_checkable
class Quantizer(Protocol):
    """Interface for color clustering algorithms."""

    def quantize(
        self,
        samples: NDArray[np.uint8],
        color_count: int,
    ) -> Optional[ColorMap]:
        """Cluster (N, 3) samples into at most color_count colors, or None."""


def distinct_color_count(samples: NDArray[np.uint8]) -> int:
    """Number of distinct RGB values in the samples."""
    if len(samples) == 0:
        return 0
    return len(np.unique(samples, axis=0))


class MedianCutQuantizer:
    """
    Median cut clustering via Pillow.

    The samples are laid out as a one-row RGB image and quantized with
    ``Image.Quantize.MEDIANCUT``. Deterministic for identical input.
    """

    def quantize(
        self,
        samples: NDArray[np.uint8],
        color_count: int,
    ) -> Optional[ColorMap]:
        if distinct_color_count(samples) < 2:
            return None

        row = np.ascontiguousarray(samples, dtype=np.uint8).reshape(1, -1, 3)
        quantized = Image.fromarray(row).quantize(
            colors=color_count,
            method=Image.Quantize.MEDIANCUT,
        )

        palette_data = quantized.getpalette()
        if not palette_data:
            return None

        n_entries = min(color_count, len(palette_data) // 3)
        centers = np.array(palette_data[: n_entries * 3]).reshape(-1, 3)
        counts = np.array(quantized.histogram()[:n_entries])
        return ColorMap.from_clusters(centers, counts)


class KMeansQuantizer:
    """
    K-means clustering in RGB with k-means++ initialization.

    Returns fewer than color_count colors when the samples hold fewer
    distinct values. Averaged centroids make it better suited to photos
    and gradients than to flat UI screenshots.

    Args:
        max_iter: Maximum k-means iterations
        seed: Random seed for reproducibility
    """

    def __init__(self, max_iter: int = 100, seed: Optional[int] = 42) -> None:
        self.max_iter = max_iter
        self.seed = seed

    def quantize(
        self,
        samples: NDArray[np.uint8],
        color_count: int,
    ) -> Optional[ColorMap]:
        if distinct_color_count(samples) < 2:
            return None

        data = samples.astype(np.float64)
        centroids, labels = _kmeans(
            data,
            k=color_count,
            max_iter=self.max_iter,
            seed=self.seed,
        )
        counts = np.bincount(labels, minlength=len(centroids))
        return ColorMap.from_clusters(centroids, counts)


def _to_rgb(center: NDArray) -> RGBColor:
    r, g, b = np.clip(np.floor(np.asarray(center, dtype=np.float64) + 0.5), 0, 255)
    return int(r), int(g), int(b)


def _kmeans(
    data: NDArray[np.float64],
    k: int,
    max_iter: int = 100,
    seed: Optional[int] = None,
) -> tuple[NDArray[np.float64], NDArray[np.int64]]:
    """
    Vectorized k-means with k-means++ initialization.

    Args:
        data: Array of shape (N, D)
        k: Number of clusters (reduced to the number of unique points)
        max_iter: Maximum iterations
        seed: Random seed

    Returns:
        (centroids, labels) where:
        - centroids: (k, D) array of cluster centers
        - labels: (N,) array of cluster assignments
    """
    rng = np.random.default_rng(seed)
    n, d = data.shape

    unique_data = np.unique(data, axis=0)
    n_unique = len(unique_data)
    k = min(k, n_unique)

    if k == 0:
        raise ValueError("No valid data points for clustering")

    centroids = np.empty((k, d), dtype=np.float64)
    centroids[0] = unique_data[rng.integers(n_unique)]

    # Remaining centroids: weighted by squared distance to the nearest one
    for i in range(1, k):
        dists = np.min(
            np.sum(
                (unique_data[:, np.newaxis, :] - centroids[np.newaxis, :i, :]) ** 2,
                axis=2,
            ),
            axis=1,
        )
        total = dists.sum()
        if total == 0:
            centroids[i] = unique_data[rng.integers(n_unique)]
        else:
            centroids[i] = unique_data[rng.choice(n_unique, p=dists / total)]

    labels = np.zeros(n, dtype=np.int64)
    for iteration in range(max_iter):
        dists = np.sum(
            (data[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2,
            axis=2,
        )
        new_labels = np.argmin(dists, axis=1)

        if iteration > 0 and np.array_equal(new_labels, labels):
            break
        labels = new_labels

        for j in range(k):
            mask = labels == j
            if np.any(mask):
                centroids[j] = data[mask].mean(axis=0)

    return centroids, labels
