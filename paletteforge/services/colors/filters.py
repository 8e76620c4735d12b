"""
Coverage and extremity filters.

Both filters only remove samples; neither merges nor rescales mass.
"""

from typing import List, Sequence

import numpy as np
from loguru import logger

from .samples import BLACK, MAX_COLOR_DISTANCE, WHITE, ColorSample, copy_samples, samples_to_array


def remove_low_coverage_colors(samples: Sequence[ColorSample],
                               min_coverage: float,
                               total_pixel_count: float) -> List[ColorSample]:
    """
    Drop colors covering less than a fraction of the image.

    Args:
        samples: Working sample set
        min_coverage: Minimum coverage fraction in [0, 1]
        total_pixel_count: Pixel count of the source image, captured by the
            histogram before any filtering

    Returns:
        Samples with amount >= min_coverage * total_pixel_count
    """
    min_amount = min_coverage * total_pixel_count
    kept = [s.copy() for s in samples if s.amount >= min_amount]

    logger.debug(f"Coverage filter (min_amount={min_amount:.2f}): kept {len(kept)}/{len(samples)} colors")
    return kept


def remove_extreme_colors(samples: Sequence[ColorSample],
                          min_white_distance: float = 0.0,
                          min_black_distance: float = 0.0) -> List[ColorSample]:
    """
    Drop colors too close to pure white or pure black.

    Distances are fractions of the RGB cube diagonal. A sample survives only
    if it is strictly farther than both limits.
    """
    if min_white_distance == 0 and min_black_distance == 0:
        return copy_samples(samples)

    if not samples:
        return []

    coords = samples_to_array(samples)
    to_white = np.linalg.norm(coords - np.array(WHITE, dtype=np.float64), axis=1)
    to_black = np.linalg.norm(coords - np.array(BLACK, dtype=np.float64), axis=1)

    keep = (to_white > min_white_distance * MAX_COLOR_DISTANCE) & \
           (to_black > min_black_distance * MAX_COLOR_DISTANCE)
    kept = [s.copy() for s, k in zip(samples, keep) if k]

    logger.debug(f"Extremity filter (white={min_white_distance}, black={min_black_distance}): "
                 f"kept {len(kept)}/{len(samples)} colors")
    return kept
