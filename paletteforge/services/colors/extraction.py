"""
Palette extraction pipeline.

This module wires the palette stages together: histogram → coverage filter →
extremity filter → bundling → scoring → finalization. Options are validated
before any pixel is counted, and each stage hands a fresh sample list to the
next.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from paletteforge.config import Config
from paletteforge.services.observability import StageEvent, StageTracer
from .bundling import MASS_POLICIES, bundle_colors
from .errors import InvalidConfigError
from .filters import remove_extreme_colors, remove_low_coverage_colors
from .histogram import build_histogram
from .samples import RGB, ColorSample
from .scoring import calculate_scores, finalize_colors


@dataclass(frozen=True)
class SpeedProfile:
    """Pair sampling stride for the bundling threshold and source downscale factor."""
    stride: int
    scale: float


SPEED_PROFILES: Dict[str, SpeedProfile] = {
    "fast": SpeedProfile(stride=8, scale=0.2),
    "medium": SpeedProfile(stride=5, scale=0.3),
    "slow": SpeedProfile(stride=3, scale=0.5),
}


@dataclass
class PaletteOptions:
    """
    Per-call palette extraction options.

    mass_policy "conserve" adds the full mass of every absorbed color to its
    survivor. "distance_scaled" adds amount * distance / threshold instead, so
    a color right next to its survivor contributes little of its mass and one
    just under the threshold contributes almost all of it.
    """
    colors_to_pick: int = 5
    min_coverage: float = 0.0
    min_white_distance: float = 0.0
    min_black_distance: float = 0.0
    bundling_speed: str = "medium"
    mass_policy: str = "conserve"

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> "PaletteOptions":
        """Build options from service defaults, replacing any given fields."""
        values = {
            "colors_to_pick": config.DEFAULT_COLORS,
            "min_coverage": config.DEFAULT_MIN_COVERAGE,
            "min_white_distance": config.DEFAULT_MIN_WHITE_DISTANCE,
            "min_black_distance": config.DEFAULT_MIN_BLACK_DISTANCE,
            "bundling_speed": config.DEFAULT_SPEED,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    @property
    def speed_profile(self) -> SpeedProfile:
        return SPEED_PROFILES[self.bundling_speed]

    def validate(self) -> "PaletteOptions":
        """
        Check every option against its documented range.

        Raises:
            InvalidConfigError: On the first out-of-range option
        """
        if not Config.validate_colors(self.colors_to_pick):
            raise InvalidConfigError(
                f"colors_to_pick must be an integer between 1 and {Config.MAX_COLORS}, "
                f"got {self.colors_to_pick!r}"
            )
        for name in ("min_coverage", "min_white_distance", "min_black_distance"):
            value = getattr(self, name)
            if not Config.validate_fraction(value):
                raise InvalidConfigError(f"{name} must be between 0 and 1, got {value!r}")
        if not Config.validate_speed(self.bundling_speed):
            raise InvalidConfigError(
                f"bundling_speed must be one of {Config.SPEEDS}, got {self.bundling_speed!r}"
            )
        if self.mass_policy not in MASS_POLICIES:
            raise InvalidConfigError(
                f"mass_policy must be one of {MASS_POLICIES}, got {self.mass_policy!r}"
            )
        return self


@dataclass
class PaletteResult:
    """Palette plus the scored survivors and per-stage trace of one run."""
    palette: List[RGB]
    samples: List[ColorSample]
    total_pixels: int
    stages: List[StageEvent] = field(default_factory=list)


def run_pipeline(pixels: Any,
                 options: Optional[PaletteOptions] = None,
                 on_stage: Optional[Callable[[StageEvent], None]] = None) -> PaletteResult:
    """
    Run the full palette pipeline over a pixel stream.

    Args:
        pixels: RGB triples at their final resolution (iterable or numpy array)
        options: Extraction options; defaults when None
        on_stage: Optional callback receiving a StageEvent after every stage

    Returns:
        PaletteResult with the ordered palette

    Raises:
        InvalidConfigError: Before any work, if options are out of range
        InsufficientDataError: If no colors survive to be scored
        InvalidSampleError: If pixel values or sample masses are invalid
    """
    options = (options or PaletteOptions()).validate()
    tracer = StageTracer(on_stage)

    def timed(stage: str, fn: Callable, *args, **kwargs):
        start = time.time()
        result = fn(*args, **kwargs)
        tracer.record(stage, result, (time.time() - start) * 1000)
        return result

    start = time.time()
    histogram = build_histogram(pixels)
    samples = histogram.to_samples()
    tracer.record("histogram", samples, (time.time() - start) * 1000)

    samples = timed("coverage", remove_low_coverage_colors,
                    samples, options.min_coverage, histogram.total)
    samples = timed("extremity", remove_extreme_colors,
                    samples, options.min_white_distance, options.min_black_distance)
    samples = timed("bundling", bundle_colors,
                    samples, stride=options.speed_profile.stride, mass_policy=options.mass_policy)
    samples = timed("scoring", calculate_scores, samples)

    start = time.time()
    palette = finalize_colors(samples, options.colors_to_pick)
    picked = set(palette)
    tracer.record("finalize", [s for s in samples if s.rgb in picked], (time.time() - start) * 1000)

    logger.info(f"Palette extracted: {len(palette)} colors from {histogram.total} pixels "
                f"({len(histogram)} distinct, speed={options.bundling_speed})")

    return PaletteResult(
        palette=palette,
        samples=samples,
        total_pixels=histogram.total,
        stages=tracer.events
    )


def extract_palette(pixels: Any,
                    options: Optional[PaletteOptions] = None,
                    on_stage: Optional[Callable[[StageEvent], None]] = None) -> List[RGB]:
    """Return the ordered palette for a pixel stream."""
    return run_pipeline(pixels, options, on_stage).palette


class PaletteExtractor:
    """Reusable extractor bound to one validated set of options."""

    def __init__(self, options: Optional[PaletteOptions] = None, **kwargs: Any):
        if options is not None and kwargs:
            raise InvalidConfigError("Pass either a PaletteOptions instance or keyword options, not both")
        self.options = (options or PaletteOptions(**kwargs)).validate()

    @property
    def scale(self) -> float:
        """Downscale factor a pixel source should apply for this extractor's speed."""
        return self.options.speed_profile.scale

    def get_palette(self, pixels: Any,
                    on_stage: Optional[Callable[[StageEvent], None]] = None) -> List[RGB]:
        return extract_palette(pixels, self.options, on_stage)
