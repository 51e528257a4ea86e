"""
Stage executors: narration, usage guide, hero image and audio.

Each executor is a function of a :class:`StoryContext` only, so the same object
serves fresh runs, variants and single-stage retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from colorstory.ai_generation import (
    FALLBACK_MODEL,
    FALLBACK_PROVIDER,
    ReplicateImageGenerator,
    SpeechSynthesizer,
    build_hero_prompt,
    render_gradient_hero,
)
from colorstory.common import InvalidArgumentError, provider_from_model
from colorstory.storage import ObjectStore
from colorstory.story_generation import NarrationGenerator, UsageGuideGenerator

from .story import NARRATION_FILLER, StoryContext

logger = logging.getLogger(__name__)

HERO_PATH_TEMPLATE = "color_stories/heroes/{story_id}.{extension}"
AUDIO_PATH_TEMPLATE = "color_stories/audio/{story_id}.mp3"


class StageName(str, Enum):
    NARRATION = "narration"
    USAGE_GUIDE = "usage-guide"
    HERO = "hero"
    AUDIO = "audio"

    @property
    def base_progress(self) -> float:
        return _BASE_PROGRESS[self]

    def start_message(self, *, variant: bool = False) -> str:
        label = _MESSAGES[self]
        return f"{label[0]} variant {label[1]}…" if variant else f"{label[0]} {label[1]}…"

    @property
    def retry_message(self) -> str:
        return f"Retrying {_RETRY_LABELS[self]}…"

    @classmethod
    def parse(cls, value: Any) -> "StageName":
        if isinstance(value, str):
            key = value.strip().lower()
            key = _ALIASES.get(key, key)
            for member in cls:
                if member.value == key:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise InvalidArgumentError(
            f"Invalid step. Must be one of: {valid}",
            {"step": value, "validSteps": [member.value for member in cls]},
        )


_BASE_PROGRESS = {
    StageName.NARRATION: 0.3,
    StageName.USAGE_GUIDE: 0.5,
    StageName.HERO: 0.7,
    StageName.AUDIO: 0.9,
}

_MESSAGES = {
    StageName.NARRATION: ("Writing", "narration"),
    StageName.USAGE_GUIDE: ("Building", "usage guide"),
    StageName.HERO: ("Rendering", "hero image"),
    StageName.AUDIO: ("Mixing", "audio"),
}

_RETRY_LABELS = {
    StageName.NARRATION: "narration",
    StageName.USAGE_GUIDE: "usage guide",
    StageName.HERO: "hero image",
    StageName.AUDIO: "audio",
}

# Step names used by earlier clients.
_ALIASES = {"writing": "narration", "usage": "usage-guide", "usage_guide": "usage-guide"}

STAGE_ORDER = (StageName.NARRATION, StageName.USAGE_GUIDE, StageName.HERO, StageName.AUDIO)


@dataclass
class StageResult:
    """Fields a stage merge-writes to the story, plus whether it fell back."""

    stage: StageName
    fields: dict[str, Any] = field(default_factory=dict)
    degraded: bool = False


class StageExecutor(Protocol):
    name: StageName

    def run(self, context: StoryContext) -> StageResult: ...


class NarrationStage:
    name = StageName.NARRATION

    def __init__(self, generator: NarrationGenerator) -> None:
        self._generator = generator

    def run(self, context: StoryContext) -> StageResult:
        try:
            narration = self._generator.generate_narration(context)
        except Exception:
            logger.exception("Narration generation failed for story %s.", context.story_id)
            narration = ""

        if not narration:
            logger.warning("Story %s: narration is empty.", context.story_id)

        return StageResult(
            stage=self.name,
            fields={
                "narration": narration,
                "modelAttribution": {
                    "provider": provider_from_model(self._generator.model),
                    "model": self._generator.model,
                    "promptVersion": context.prompt_version,
                },
            },
            degraded=not narration,
        )


class UsageGuideStage:
    name = StageName.USAGE_GUIDE

    def __init__(self, generator: UsageGuideGenerator) -> None:
        self._generator = generator

    def run(self, context: StoryContext) -> StageResult:
        try:
            items = self._generator.generate_usage_guide(context)
        except ValueError as exc:
            logger.warning("Story %s: usage guide rejected: %s", context.story_id, exc)
            items = []
        except Exception:
            logger.exception("Usage guide generation failed for story %s.", context.story_id)
            items = []

        return StageResult(
            stage=self.name,
            fields={"usageGuide": [item.to_dict() for item in items]},
            degraded=not items,
        )


class HeroImageStage:
    name = StageName.HERO

    def __init__(
        self,
        generator: ReplicateImageGenerator | None,
        object_store: ObjectStore,
    ) -> None:
        self._generator = generator
        self._object_store = object_store

    def run(self, context: StoryContext) -> StageResult:
        prompt = build_hero_prompt(context)
        try:
            if self._generator is None:
                raise RuntimeError("No image generator is configured.")
            image = self._generator.generate_image(prompt)
            if not image.data:
                raise RuntimeError("No image data received from the image model.")
            extension = image.extension.lstrip(".")
            url = self._object_store.store(
                HERO_PATH_TEMPLATE.format(story_id=context.story_id, extension=extension),
                image.data,
                image.content_type,
            )
        except Exception as exc:
            logger.warning(
                "Story %s: hero image generation failed, using fallback: %s",
                context.story_id,
                exc,
            )
            return self._fallback(context, prompt.positive)

        return StageResult(
            stage=self.name,
            fields={
                "heroImageUrl": url,
                "heroPrompt": prompt.positive,
                "heroImageAttribution": {
                    "provider": self._generator.provider,
                    "model": self._generator.model_identifier,
                    "mimeType": image.content_type,
                },
            },
        )

    def _fallback(self, context: StoryContext, prompt_text: str) -> StageResult:
        asset = render_gradient_hero(context.hexes)
        url = self._object_store.store(
            HERO_PATH_TEMPLATE.format(story_id=context.story_id, extension=asset.extension),
            asset.data,
            asset.content_type,
        )
        return StageResult(
            stage=self.name,
            fields={
                "heroImageUrl": url,
                "heroPrompt": prompt_text,
                "heroImageAttribution": {"provider": FALLBACK_PROVIDER, "model": FALLBACK_MODEL},
            },
            degraded=True,
        )


class AudioStage:
    name = StageName.AUDIO

    def __init__(self, synthesizer: SpeechSynthesizer, object_store: ObjectStore) -> None:
        self._synthesizer = synthesizer
        self._object_store = object_store

    def run(self, context: StoryContext) -> StageResult:
        text = context.narration.strip() or NARRATION_FILLER
        audio = self._synthesizer.synthesize(text)
        url = self._object_store.store(
            AUDIO_PATH_TEMPLATE.format(story_id=context.story_id),
            audio,
            self._synthesizer.voice.content_type,
        )
        return StageResult(
            stage=self.name,
            fields={"audioUrl": url, "audioAttribution": self._synthesizer.attribution()},
        )
