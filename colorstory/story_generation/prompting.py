"""
Prompt construction utilities for the narration and usage-guide text stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from colorstory.pipeline.story import StoryContext

DEFAULT_LENGTH_GUIDANCE = "Write 300-600 words."

ROLE_GUIDANCE = "main/trim/ceiling/accent/door/cabinet"

SYSTEM_PROMPT = """You are an interior color expert who writes color stories for homeowners.
You explain how a paint palette should be placed in a specific room and style, with practical,
confident advice a painter could follow.

Writing directives:
- Tone: warm, expert, practical.
- Ground every recommendation in the provided paints; never invent extra colors.
- Do not include author notes, process explanations, or meta commentary. Do not mention you are an AI.
"""


@dataclass(frozen=True)
class TextPrompt:
    """
    Container for the system and user prompts passed to the text model.
    """

    system: str
    user: str


def _join(values: Sequence[str]) -> str:
    return ", ".join(value for value in values if value)


def build_narration_prompt(
    context: "StoryContext",
    *,
    length_guidance: str = DEFAULT_LENGTH_GUIDANCE,
) -> TextPrompt:
    """
    Build the prompt pair used to solicit the spoken color story.
    """
    lines = [f"{length_guidance} The story is for a {context.room} in {context.style} style."]

    if context.is_variant:
        lines.append(f"This is a VARIANT with emphasis on: {context.emphasis}.")

    lines.append(f"Vibe words: {_join(context.vibe_words)}.")
    if context.brand_hints:
        lines.append(f"Brand hints: {_join(context.brand_hints)}.")
    lines.append(
        "Use these paints (hex + brand/name/code if provided): "
        f"{_join(context.paint_descriptors)}."
    )
    lines.append(
        f"Explain role placement ({ROLE_GUIDANCE}), finish & sheen, and simple lighting tips."
    )

    if context.is_variant and context.emphasis:
        lines.append(f"Focus on the variant emphasis: {context.emphasis}.")

    lines.append("Respond with the narration text only.")

    return TextPrompt(system=SYSTEM_PROMPT, user="\n".join(lines))


def build_usage_guide_prompt(context: "StoryContext") -> TextPrompt:
    """
    Build the prompt pair that asks for a strict JSON usage guide.
    """
    match_clause = f"Match room={context.room}, style={context.style}"
    if context.is_variant:
        match_clause += f', emphasis="{context.emphasis}"'
    match_clause += f", vibe={_join(context.vibe_words)}"
    if context.brand_hints:
        match_clause += f", brands={_join(context.brand_hints)}"
    match_clause += " and the provided palette."

    lines = [
        "Return STRICT JSON array (4-6 items), no prose, no Markdown fences.",
        "Each item keys: role, hex, name, brandName, code, surface, "
        "finishRecommendation, sheen, howToUse. Every value is a string; hex is '#RRGGBB'.",
        match_clause,
        f"Palette: {_join(context.paint_descriptors)}.",
        "Roles should include main, trim, ceiling, accent and add door/cabinet if present.",
    ]
    if context.is_variant and context.emphasis:
        lines.append(f"Focus on variant emphasis: {context.emphasis}.")

    return TextPrompt(system=SYSTEM_PROMPT, user="\n".join(lines))
