"""
Image and audio generation for color stories.
"""

from .fallback import (
    FALLBACK_MODEL,
    FALLBACK_PROVIDER,
    FallbackAsset,
    render_gradient_hero,
)
from .prompting import HeroPrompt, build_hero_prompt
from .replicate_service import GeneratedImage, ReplicateImageGenerator
from .speech_service import SpeechSynthesizer, VoiceSpec

__all__ = [
    "FALLBACK_MODEL",
    "FALLBACK_PROVIDER",
    "FallbackAsset",
    "render_gradient_hero",
    "HeroPrompt",
    "build_hero_prompt",
    "GeneratedImage",
    "ReplicateImageGenerator",
    "SpeechSynthesizer",
    "VoiceSpec",
]
