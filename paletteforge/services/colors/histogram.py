"""
Histogram Builder

Counts exact RGB occurrences over the 24-bit color lattice. Colors are packed
into a single integer key (r << 16 | g << 8 | b) and counted with numpy, so
memory scales with the number of distinct colors rather than 256^3.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, List

import numpy as np
from loguru import logger

from .errors import InvalidSampleError
from .samples import ColorSample


@dataclass
class Histogram:
    """Sparse color histogram: sorted packed keys with their counts."""
    keys: np.ndarray
    counts: np.ndarray
    total: int

    def __len__(self) -> int:
        return int(self.keys.shape[0])

    def count(self, rgb) -> int:
        """Return the count recorded for an RGB triple (0 if absent)."""
        key = pack_rgb(np.asarray([rgb], dtype=np.int64))[0]
        idx = np.searchsorted(self.keys, key)
        if idx < len(self.keys) and self.keys[idx] == key:
            return int(self.counts[idx])
        return 0

    def to_samples(self) -> List[ColorSample]:
        """Flatten into ColorSamples, ascending by packed key."""
        r, g, b = unpack_keys(self.keys)
        return [
            ColorSample(int(ri), int(gi), int(bi), int(ci))
            for ri, gi, bi, ci in zip(r, g, b, self.counts)
        ]


def pack_rgb(rgb: np.ndarray) -> np.ndarray:
    """Pack an (N, 3) integer array into 24-bit keys."""
    return (rgb[:, 0] << 16) | (rgb[:, 1] << 8) | rgb[:, 2]


def unpack_keys(keys: np.ndarray):
    """Split packed keys back into r, g, b arrays."""
    return (keys >> 16) & 0xFF, (keys >> 8) & 0xFF, keys & 0xFF


def _as_pixel_array(pixels: Any) -> np.ndarray:
    try:
        if not isinstance(pixels, (np.ndarray, Sequence)):
            pixels = list(pixels)
        arr = np.asarray(pixels)
    except (ValueError, TypeError) as e:
        raise InvalidSampleError(f"Pixels must be uniform RGB triples: {e}") from e

    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.int64)

    if arr.ndim < 2 or arr.shape[-1] != 3:
        raise InvalidSampleError(
            f"Expected RGB triples with a trailing dimension of 3, got shape {arr.shape}"
        )

    arr = arr.reshape(-1, 3)
    if not np.issubdtype(arr.dtype, np.integer):
        if not np.issubdtype(arr.dtype, np.number) or not np.all(np.floor(arr) == arr):
            raise InvalidSampleError("Pixel values must be integers")

    if arr.min() < 0 or arr.max() > 255:
        raise InvalidSampleError("Pixel values must lie in [0, 255]")

    return arr.astype(np.int64)


def build_histogram(pixels: Any) -> Histogram:
    """
    Count occurrences of every exact RGB value in a pixel stream.

    Args:
        pixels: Iterable of (r, g, b) triples, or an (N, 3) / (H, W, 3) array

    Returns:
        Sparse Histogram holding only colors with a non-zero count

    Raises:
        InvalidSampleError: If values are not integers in [0, 255]
    """
    arr = _as_pixel_array(pixels)
    keys, counts = np.unique(pack_rgb(arr), return_counts=True)
    histogram = Histogram(keys=keys, counts=counts, total=int(arr.shape[0]))
    logger.debug(f"Histogram built: {histogram.total} pixels, {len(histogram)} distinct colors")
    return histogram
