"""
PaletteForge Colors Module

Provides histogram building, coverage and extremity filtering, bundling of
near-identical colors, and scoring for dominant palette extraction.
"""

from .errors import (
    PaletteError,
    InvalidConfigError,
    InsufficientDataError,
    InvalidSampleError,
    ImageDecodeError,
)
from .samples import ColorSample, color_distance, rgb_to_hex, hex_to_rgb
from .extraction import PaletteOptions, PaletteExtractor, extract_palette, run_pipeline

__version__ = "1.0.0"

__all__ = [
    'PaletteError',
    'InvalidConfigError',
    'InsufficientDataError',
    'InvalidSampleError',
    'ImageDecodeError',
    'ColorSample',
    'color_distance',
    'rgb_to_hex',
    'hex_to_rgb',
    'PaletteOptions',
    'PaletteExtractor',
    'extract_palette',
    'run_pipeline',
]
