"""
ColorStory package exposing palette normalization, the generation pipeline, and storage.
"""

from .api import dispatch
from .palette import Palette, PaletteItem, normalize_palette
from .pipeline import (
    ColorStory,
    ColorStoryOrchestrator,
    GenerationResult,
    RetryResult,
    StageName,
    VariantResult,
)

__all__ = [
    "ColorStory",
    "ColorStoryOrchestrator",
    "GenerationResult",
    "Palette",
    "PaletteItem",
    "RetryResult",
    "StageName",
    "VariantResult",
    "dispatch",
    "normalize_palette",
]
