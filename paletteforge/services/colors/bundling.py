"""
Color Bundling

Collapses near-duplicate colors (anti-aliasing, compression noise, gradients)
into representative survivors. The merge threshold is derived from the data:
the mean pairwise RGB distance over a strided subsample of the colors.
"""

from typing import List, Optional, Sequence

import numpy as np
from loguru import logger

from .errors import InsufficientDataError, InvalidConfigError
from .samples import ColorSample, copy_samples, samples_to_array

MASS_POLICIES = ("conserve", "distance_scaled")


def average_color_distance(samples: Sequence[ColorSample], stride: int = 1) -> float:
    """
    Mean Euclidean distance over all pairs of a strided subsample.

    The subsample is samples[::stride]; every pair i < j inside it is visited.
    If the stride leaves fewer than two samples, every pair of the full set
    is used instead.

    Args:
        samples: Colors in their current order
        stride: Pair sampling step, >= 1. Larger is faster but noisier.

    Returns:
        Mean pairwise distance

    Raises:
        InvalidConfigError: If stride < 1
        InsufficientDataError: If fewer than two samples are given
    """
    if isinstance(stride, bool) or not isinstance(stride, int) or stride < 1:
        raise InvalidConfigError(f"stride must be an integer >= 1, got {stride!r}")
    if len(samples) < 2:
        raise InsufficientDataError(
            f"Average color distance needs at least 2 colors, got {len(samples)}"
        )

    coords = samples_to_array(samples)
    subsample = coords[::stride]
    if len(subsample) < 2:
        subsample = coords

    total_distance = 0.0
    pair_count = 0
    for i in range(len(subsample) - 1):
        distances = np.linalg.norm(subsample[i + 1:] - subsample[i], axis=1)
        total_distance += float(distances.sum())
        pair_count += distances.size

    return total_distance / pair_count


def bundle_colors(samples: Sequence[ColorSample],
                  stride: int = 1,
                  threshold: Optional[float] = None,
                  mass_policy: str = "conserve") -> List[ColorSample]:
    """
    Merge colors closer than the threshold into the heavier survivor.

    Samples are visited in descending amount order (stable, so ties keep their
    incoming order). Each survivor absorbs every later survivor strictly
    closer than the threshold. A survivor's color never changes, so one pass
    over the sorted list leaves no pair below the threshold.

    Args:
        samples: Filtered sample set
        stride: Pair sampling step for the threshold estimate
        threshold: Explicit merge threshold; computed when None
        mass_policy: "conserve" adds the absorbed sample's full amount;
            "distance_scaled" adds amount * distance / threshold

    Returns:
        Survivors in descending pre-merge amount order
    """
    if mass_policy not in MASS_POLICIES:
        raise InvalidConfigError(f"mass_policy must be one of {MASS_POLICIES}, got {mass_policy!r}")

    if len(samples) < 2:
        return copy_samples(samples)

    if threshold is None:
        threshold = average_color_distance(samples, stride)

    ordered = sorted(samples, key=lambda s: -s.amount)
    coords = samples_to_array(ordered)
    amounts = np.array([s.amount for s in ordered], dtype=np.float64)
    alive = np.ones(len(ordered), dtype=bool)

    merged = 0
    for i in range(len(ordered) - 1):
        if not alive[i]:
            continue

        distances = np.linalg.norm(coords[i + 1:] - coords[i], axis=1)
        absorb = alive[i + 1:] & (distances < threshold)
        if not absorb.any():
            continue

        absorbed_idx = np.nonzero(absorb)[0] + i + 1
        if mass_policy == "conserve":
            amounts[i] += amounts[absorbed_idx].sum()
        else:
            amounts[i] += (amounts[absorbed_idx] * distances[absorb] / threshold).sum()

        alive[absorbed_idx] = False
        merged += absorbed_idx.size

    survivors = [
        ColorSample(s.r, s.g, s.b, float(amounts[k]))
        for k, s in enumerate(ordered) if alive[k]
    ]

    logger.debug(f"Bundling (threshold={threshold:.2f}, stride={stride}): "
                 f"{len(ordered)} → {len(survivors)} colors, {merged} merged")
    return survivors
