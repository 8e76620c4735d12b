"""
Integration tests for the palette extraction pipeline.

Covers option validation, the end-to-end scenarios and the stage tracing hook.
"""

import numpy as np
import pytest

from paletteforge.config import Config
from paletteforge.services.colors import (
    InsufficientDataError, InvalidConfigError, InvalidSampleError, PaletteExtractor, PaletteOptions,
    extract_palette, run_pipeline
)


def block_image(blocks):
    """Build a 1-row pixel stream from (color, count) pairs."""
    pixels = []
    for color, count in blocks:
        pixels.extend([color] * count)
    return np.array(pixels, dtype=np.uint8)


class TestScenarios:
    """End-to-end palette scenarios"""

    def test_uniform_image(self, uniform_image):
        palette = extract_palette(uniform_image, PaletteOptions(colors_to_pick=5))
        assert palette == [(10, 20, 30)]

    def test_two_equal_halves(self):
        img = np.zeros((10, 10, 3), dtype=np.uint8)
        img[:, 5:] = (255, 255, 255)

        palette = extract_palette(img, PaletteOptions(colors_to_pick=2, min_coverage=0.0))
        assert sorted(palette) == [(0, 0, 0), (255, 255, 255)]

    @pytest.mark.parametrize("speed", ["fast", "medium", "slow"])
    def test_two_equal_halves_any_speed(self, speed):
        pixels = block_image([((0, 0, 0), 50), ((255, 255, 255), 50)])
        palette = extract_palette(pixels, PaletteOptions(colors_to_pick=2, bundling_speed=speed))
        assert len(palette) == 2

    def test_coverage_exclusion(self):
        pixels = block_image([
            ((255, 0, 0), 10000),
            ((0, 0, 255), 9990),
            ((0, 255, 0), 10),  # 0.0005 of the image
        ])
        palette = extract_palette(pixels, PaletteOptions(colors_to_pick=5, min_coverage=0.001))

        assert (0, 255, 0) not in palette
        assert sorted(palette) == [(0, 0, 255), (255, 0, 0)]

    def test_near_duplicates_bundled(self):
        pixels = block_image([
            ((200, 30, 30), 400),
            ((202, 31, 29), 40),
            ((20, 40, 220), 300),
            ((22, 41, 219), 30),
        ])
        result = run_pipeline(pixels, PaletteOptions(colors_to_pick=4))

        assert sorted(result.palette) == [(20, 40, 220), (200, 30, 30)]

    def test_palette_size_bound(self):
        rng = np.random.default_rng(7)
        pixels = rng.integers(0, 256, size=(500, 3), dtype=np.uint8)

        for k in (1, 3, 50, 1000):
            result = run_pipeline(pixels, PaletteOptions(colors_to_pick=k))
            assert len(result.palette) == min(k, len(result.samples))
            assert len(set(result.palette)) == len(result.palette)

    def test_deterministic(self):
        rng = np.random.default_rng(3)
        pixels = rng.integers(0, 256, size=(40, 40, 3), dtype=np.uint8)

        assert extract_palette(pixels) == extract_palette(pixels)

    def test_extremity_filter_applied(self):
        pixels = block_image([
            ((255, 255, 255), 500),
            ((250, 250, 250), 100),
            ((0, 0, 0), 500),
            ((180, 40, 90), 50),
        ])
        options = PaletteOptions(colors_to_pick=5, min_white_distance=0.1, min_black_distance=0.1)
        assert extract_palette(pixels, options) == [(180, 40, 90)]

    def test_everything_filtered_out(self):
        pixels = block_image([((255, 255, 255), 10)])
        with pytest.raises(InsufficientDataError):
            extract_palette(pixels, PaletteOptions(min_white_distance=0.5))

    def test_empty_pixels(self):
        with pytest.raises(InsufficientDataError):
            extract_palette([])

    def test_iterator_pixels(self):
        pixels = iter([(10, 20, 30)] * 50 + [(200, 0, 0)] * 50)
        palette = extract_palette(pixels, PaletteOptions(colors_to_pick=2))

        assert sorted(palette) == [(10, 20, 30), (200, 0, 0)]

    def test_ragged_pixels_rejected(self):
        with pytest.raises(InvalidSampleError):
            extract_palette([(1, 2, 3), (1, 2)])


class TestOptionValidation:
    """Test fail-fast option validation"""

    @pytest.mark.parametrize("overrides", [
        {"colors_to_pick": 0},
        {"colors_to_pick": Config.MAX_COLORS + 1},
        {"colors_to_pick": 2.5},
        {"colors_to_pick": True},
        {"min_coverage": -0.1},
        {"min_coverage": 1.5},
        {"min_white_distance": 2},
        {"min_black_distance": float("nan")},
        {"bundling_speed": "warp"},
        {"mass_policy": "double"},
    ])
    def test_out_of_range_rejected(self, overrides):
        with pytest.raises(InvalidConfigError):
            PaletteOptions(**overrides).validate()

    def test_numpy_scalars_accepted(self):
        options = PaletteOptions(colors_to_pick=np.int64(3), min_coverage=np.float32(0.25)).validate()
        assert options.colors_to_pick == 3

    def test_numpy_bool_rejected(self):
        with pytest.raises(InvalidConfigError):
            PaletteOptions(colors_to_pick=np.bool_(True)).validate()

    def test_boundaries_accepted(self):
        PaletteOptions(colors_to_pick=1, min_coverage=0, min_white_distance=1.0).validate()
        PaletteOptions(colors_to_pick=Config.MAX_COLORS, min_black_distance=1).validate()

    def test_config_checked_before_pixels(self):
        """Invalid options fail before invalid pixels are looked at"""
        with pytest.raises(InvalidConfigError):
            extract_palette([(999, 0, 0)], PaletteOptions(colors_to_pick=0))

    def test_invalid_config_is_value_error(self):
        with pytest.raises(ValueError):
            PaletteOptions(bundling_speed="turbo").validate()

    def test_from_config_ignores_missing_overrides(self):
        options = PaletteOptions.from_config(Config(), colors_to_pick=3, bundling_speed=None)
        assert options.colors_to_pick == 3
        assert options.bundling_speed == Config.DEFAULT_SPEED


class TestStageTracing:
    """Test the per-stage tracing hook"""

    def test_events_in_stage_order(self):
        events = []
        pixels = block_image([((0, 0, 0), 30), ((255, 0, 0), 20), ((254, 1, 0), 5)])
        result = run_pipeline(pixels, PaletteOptions(), on_stage=events.append)

        names = ["histogram", "coverage", "extremity", "bundling", "scoring", "finalize"]
        assert [e.stage for e in events] == names
        assert result.stages == events

    def test_histogram_mass_and_conservation(self):
        pixels = block_image([((0, 0, 0), 30), ((255, 0, 0), 20), ((254, 1, 0), 5)])
        result = run_pipeline(pixels)
        stages = {e.stage: e for e in result.stages}

        assert stages["histogram"].total_mass == 55
        assert stages["histogram"].sample_count == 3
        assert stages["bundling"].total_mass == pytest.approx(stages["extremity"].total_mass)
        assert all(e.duration_ms >= 0 for e in result.stages)

    def test_no_callback_needed(self, uniform_image):
        assert len(run_pipeline(uniform_image).stages) == 6


class TestPaletteExtractor:
    """Test the reusable extractor"""

    def test_get_palette(self, uniform_image):
        extractor = PaletteExtractor(colors_to_pick=3, bundling_speed="fast")
        assert extractor.get_palette(uniform_image) == [(10, 20, 30)]
        assert extractor.scale == 0.2

    def test_rejects_invalid_options(self):
        with pytest.raises(InvalidConfigError):
            PaletteExtractor(colors_to_pick=0)

    def test_rejects_mixed_arguments(self):
        with pytest.raises(InvalidConfigError):
            PaletteExtractor(PaletteOptions(), colors_to_pick=3)
