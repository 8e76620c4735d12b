"""
Color Scoring and Finalization

Each surviving color is scored by how much of the image it covers plus how
far it sits from the average surviving color, the latter damped by the log of
its mass so rare outliers cannot dominate common colors.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np
from loguru import logger

from .errors import InsufficientDataError, InvalidSampleError
from .samples import RGB, ColorSample, samples_to_array


def find_colors_center(samples: Sequence[ColorSample]) -> Tuple[float, float, float]:
    """
    Unweighted mean of the sample coordinates.

    Each color counts once regardless of its mass.
    """
    if not samples:
        raise InsufficientDataError("Cannot compute the center of zero colors")
    center = samples_to_array(samples).mean(axis=0)
    return float(center[0]), float(center[1]), float(center[2])


def distances_to_center(samples: Sequence[ColorSample]) -> np.ndarray:
    """Distance of every sample to the unweighted center, in input order."""
    center = np.array(find_colors_center(samples), dtype=np.float64)
    return np.linalg.norm(samples_to_array(samples) - center, axis=1)


def average_distance_to_center(samples: Sequence[ColorSample]) -> float:
    """Mean distance of every sample to the unweighted center."""
    return float(distances_to_center(samples).mean())


def calculate_scores(samples: Sequence[ColorSample]) -> List[ColorSample]:
    """
    Populate each sample's score.

    score = amount / total_mass
            + (distance_to_center / average_distance_to_center) * ln(amount)

    When every color sits on the center (a single color) the distance term is 0.

    Returns:
        New samples, same order as the input, with score set

    Raises:
        InsufficientDataError: If no samples are given
        InvalidSampleError: If any sample has amount <= 0
    """
    if not samples:
        raise InsufficientDataError("No colors left to score")

    for s in samples:
        if s.amount <= 0:
            raise InvalidSampleError(f"Color {s.rgb} has non-positive amount {s.amount}")

    distances = distances_to_center(samples)
    avg_distance = float(distances.mean())
    mass = float(sum(s.amount for s in samples))

    scored = []
    for s, distance in zip(samples, distances):
        score = s.amount / mass
        if avg_distance > 0:
            score += (float(distance) / avg_distance) * math.log(s.amount)
        scored.append(ColorSample(s.r, s.g, s.b, s.amount, score))

    logger.debug(f"Scored {len(scored)} colors (avg_distance={avg_distance:.2f})")
    return scored


def finalize_colors(samples: Sequence[ColorSample], colors_to_pick: int) -> List[RGB]:
    """Sort by score descending, keep the top colors_to_pick, return RGB tuples."""
    ranked = sorted(samples, key=lambda s: -s.score)
    return [s.rgb for s in ranked[:colors_to_pick]]
