"""
Service layer for producing the spoken color-story narration via LiteLLM-compatible models.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from colorstory.common import ChatResult, CompletionCallable, call_chat_completion

from .prompting import TextPrompt, build_narration_prompt

if TYPE_CHECKING:
    from colorstory.pipeline.story import StoryContext


class NarrationGenerator:
    """
    High-level helper that turns a story context into narration text.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        completion_fn: CompletionCallable | None = None,
    ) -> None:
        self._api_key = (
            api_key
            or os.getenv("COLORSTORY_TEXT_API_KEY")
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("LITELLM_API_KEY")
        )
        self._model = (
            model
            or os.getenv("COLORSTORY_NARRATION_MODEL")
            or os.getenv("COLORSTORY_TEXT_MODEL")
            or os.getenv("LITELLM_MODEL")
            or "gemini/gemini-1.5-pro-latest"
        )
        self._completion_fn: CompletionCallable = completion_fn or call_chat_completion

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    def generate_narration(
        self,
        context: "StoryContext",
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 1200,
        **response_kwargs: Any,
    ) -> str:
        """
        Invoke the configured LLM to produce the narration. May return an empty string.
        """
        prompt: TextPrompt = build_narration_prompt(context)
        result: ChatResult = self._completion_fn(
            model=self._model,
            messages=[
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            temperature=temperature,
            max_tokens=max_output_tokens,
            api_key=self._api_key,
            **response_kwargs,
        )
        return (result.text or "").strip()
