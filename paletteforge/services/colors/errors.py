"""
Palette pipeline errors.
"""


class PaletteError(Exception):
    """Base class for palette extraction failures."""
    pass


class InvalidConfigError(PaletteError, ValueError):
    """A configuration value is outside its documented range."""
    pass


class InsufficientDataError(PaletteError):
    """Too few colors reached a stage that needs them."""
    pass


class InvalidSampleError(PaletteError):
    """A sample violates the pipeline's value invariants."""
    pass


class ImageDecodeError(PaletteError):
    """Image bytes could not be turned into pixels."""
    pass
