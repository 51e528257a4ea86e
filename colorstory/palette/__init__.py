"""
Palette parsing and normalization.
"""

from .normalizer import (
    DEFAULT_PALETTE_NAME,
    Palette,
    PaletteItem,
    classify_palette_input,
    is_valid_hex,
    normalize_palette,
)

__all__ = [
    "DEFAULT_PALETTE_NAME",
    "Palette",
    "PaletteItem",
    "classify_palette_input",
    "is_valid_hex",
    "normalize_palette",
]
