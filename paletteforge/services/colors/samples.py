"""
Color sample model and RGB distance utilities.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

RGB = Tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)

# Diagonal of the RGB cube: sqrt(3 * 255^2)
MAX_COLOR_DISTANCE = math.sqrt(3 * 255 ** 2)


@dataclass
class ColorSample:
    """A distinct RGB color with its accumulated mass and score."""
    r: int
    g: int
    b: int
    amount: float
    score: float = 0.0

    @property
    def rgb(self) -> RGB:
        return (self.r, self.g, self.b)

    @property
    def key(self) -> int:
        """Packed 24-bit color identity."""
        return (self.r << 16) | (self.g << 8) | self.b

    def copy(self) -> "ColorSample":
        return ColorSample(self.r, self.g, self.b, self.amount, self.score)


def color_distance(c1: Sequence[float], c2: Sequence[float]) -> float:
    """Euclidean distance between two colors in RGB space."""
    dr = c1[0] - c2[0]
    dg = c1[1] - c2[1]
    db = c1[2] - c2[2]
    return math.sqrt(dr * dr + dg * dg + db * db)


def samples_to_array(samples: Sequence[ColorSample]) -> np.ndarray:
    """Stack sample coordinates into an (N, 3) float64 array."""
    if not samples:
        return np.zeros((0, 3), dtype=np.float64)
    return np.array([s.rgb for s in samples], dtype=np.float64)


def copy_samples(samples: Iterable[ColorSample]) -> List[ColorSample]:
    return [s.copy() for s in samples]


def rgb_to_hex(rgb: Sequence[int]) -> str:
    """Convert an RGB triple to a #RRGGBB hex string."""
    r, g, b = [int(x) for x in rgb]
    return f"#{r:02X}{g:02X}{b:02X}"


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert a #RRGGBB hex string to an RGB tuple."""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))
