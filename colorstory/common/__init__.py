"""
Common utilities shared across ColorStory modules.
"""

from .errors import (
    ColorStoryError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
    UnauthenticatedError,
)
from .llm import (
    ChatResult,
    CompletionCallable,
    SpeechCallable,
    call_chat_completion,
    call_speech_synthesis,
    provider_from_model,
)

__all__ = [
    "ChatResult",
    "CompletionCallable",
    "SpeechCallable",
    "call_chat_completion",
    "call_speech_synthesis",
    "provider_from_model",
    "ColorStoryError",
    "InternalError",
    "InvalidArgumentError",
    "NotFoundError",
    "PermissionDeniedError",
    "UnauthenticatedError",
]
