"""
Text generation for color stories: narration and usage guide.
"""

from .narration_service import NarrationGenerator
from .prompting import TextPrompt, build_narration_prompt, build_usage_guide_prompt
from .usage_guide import (
    USAGE_GUIDE_LENGTH_RANGE,
    UsageGuideGenerator,
    UsageItem,
    parse_usage_guide,
)

__all__ = [
    "NarrationGenerator",
    "TextPrompt",
    "build_narration_prompt",
    "build_usage_guide_prompt",
    "USAGE_GUIDE_LENGTH_RANGE",
    "UsageGuideGenerator",
    "UsageItem",
    "parse_usage_guide",
]
