"""
PaletteForge
Dominant color palette extraction service.
"""

__version__ = "1.0.0"
