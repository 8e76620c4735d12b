"""
PaletteForge Configuration
Manages environment variables and defaults for the palette service.
"""
import numbers
import os
from typing import Literal


class Config:
    """Configuration class for PaletteForge services."""

    # Upload limits
    MAX_FILE_MB: int = int(os.environ.get("PALETTE_MAX_FILE_MB", "10"))

    # Palette defaults
    DEFAULT_COLORS: int = int(os.environ.get("PALETTE_DEFAULT_COLORS", "5"))
    DEFAULT_SPEED: Literal["fast", "medium", "slow"] = os.environ.get("PALETTE_DEFAULT_SPEED", "medium")
    DEFAULT_MIN_COVERAGE: float = float(os.environ.get("PALETTE_DEFAULT_MIN_COVERAGE", "0.0"))
    DEFAULT_MIN_WHITE_DISTANCE: float = float(os.environ.get("PALETTE_DEFAULT_MIN_WHITE_DISTANCE", "0.0"))
    DEFAULT_MIN_BLACK_DISTANCE: float = float(os.environ.get("PALETTE_DEFAULT_MIN_BLACK_DISTANCE", "0.0"))

    # Logging
    LOG_LEVEL: str = os.environ.get("PALETTE_LOG_LEVEL", "INFO")
    LOG_JSON: bool = bool(int(os.environ.get("PALETTE_LOG_JSON", "0")))

    # CORS settings
    ALLOWED_ORIGINS: str = os.environ.get("PALETTE_ALLOWED_ORIGINS", "")

    # Observability
    METRICS_ENABLED: bool = bool(int(os.environ.get("PALETTE_METRICS_ENABLED", "1")))

    # 256^3
    MAX_COLORS: int = 16777216

    SPEEDS = ("fast", "medium", "slow")

    # Supported image formats
    SUPPORTED_MIME_TYPES = ["image/jpeg", "image/png", "image/gif", "image/webp", "image/bmp"]

    @classmethod
    def validate_colors(cls, colors) -> bool:
        """Validate palette size."""
        return isinstance(colors, numbers.Integral) and not isinstance(colors, bool) and 1 <= colors <= cls.MAX_COLORS

    @classmethod
    def validate_fraction(cls, value) -> bool:
        """Validate a [0, 1] fraction such as coverage or extremity distance."""
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        return 0.0 <= value <= 1.0

    @classmethod
    def validate_speed(cls, speed: str) -> bool:
        """Validate bundling speed parameter."""
        return speed in cls.SPEEDS


# Global config instance
config = Config()
