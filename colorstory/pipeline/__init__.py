"""
End-to-end orchestration of color-story generation.
"""

from .guard import require_identity, require_owner
from .ledger import ProgressCallback, StorySession
from .pipeline import (
    ColorStoryOrchestrator,
    GenerationResult,
    RetryResult,
    VariantResult,
)
from .requests import RetryRequest, StoryRequest, VariantRequest
from .stages import STAGE_ORDER, StageName, StageResult
from .story import ColorStory, StoryContext

__all__ = [
    "ColorStory",
    "ColorStoryOrchestrator",
    "GenerationResult",
    "ProgressCallback",
    "RetryRequest",
    "RetryResult",
    "STAGE_ORDER",
    "StageName",
    "StageResult",
    "StoryContext",
    "StoryRequest",
    "StorySession",
    "VariantRequest",
    "VariantResult",
    "require_identity",
    "require_owner",
]
