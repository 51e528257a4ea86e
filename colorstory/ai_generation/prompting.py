"""
Prompt construction for the hero image.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from colorstory.pipeline.story import StoryContext

DEFAULT_CAMERA = "Natural daylight, clean staging, wide angle (~24mm), f/4."

NEGATIVE_PROMPT = "people, text, logos, watermark, clutter, distorted architecture"


@dataclass(frozen=True)
class HeroPrompt:
    """Container for the positive and negative prompts passed to the image model."""

    positive: str
    negative: str = NEGATIVE_PROMPT


def _join(values: Sequence[str]) -> str:
    return ", ".join(value for value in values if value)


def build_hero_prompt(context: "StoryContext", *, camera: str | None = None) -> HeroPrompt:
    """
    Build the photographic prompt for the room rendered in the story's palette.
    """
    lines = [f"Ultra-realistic interior photograph of a {context.room} in {context.style} style."]
    if context.is_variant and context.emphasis:
        lines.append(f"Variant emphasis: {context.emphasis}.")
    lines.append(camera.strip() if camera else DEFAULT_CAMERA)
    lines.append(f"Palette applied subtly on appropriate surfaces: {_join(context.hexes)}.")
    lines.append(f"Mood: {_join(context.vibe_words)}.")
    if context.is_variant and context.emphasis:
        lines.append(f"Special focus: {context.emphasis}.")
    lines.append("No people, no text, no logos. 1600x900 composition.")
    return HeroPrompt(positive="\n".join(lines))
