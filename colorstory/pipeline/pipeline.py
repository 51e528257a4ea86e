"""
Orchestrates the color-story pipeline for fresh stories, variants and single-stage retries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from colorstory.ai_generation import ReplicateImageGenerator, SpeechSynthesizer
from colorstory.common import (
    ColorStoryError,
    CompletionCallable,
    InternalError,
    NotFoundError,
    SpeechCallable,
)
from colorstory.storage import DocumentStore, ObjectStore
from colorstory.story_generation import NarrationGenerator, UsageGuideGenerator

from .guard import require_identity, require_owner
from .ledger import (
    COMPLETE_PROGRESS,
    INITIAL_PROGRESS,
    STATUS_COMPLETE,
    STATUS_PROCESSING,
    ProgressCallback,
    StorySession,
)
from .requests import RetryRequest, StoryRequest, VariantRequest
from .stages import (
    STAGE_ORDER,
    AudioStage,
    HeroImageStage,
    NarrationStage,
    StageExecutor,
    StageName,
    UsageGuideStage,
)
from .story import StoryContext

logger = logging.getLogger(__name__)

RETRY_PROGRESS_BUMP = 0.05


def _default_image_generator() -> ReplicateImageGenerator | None:
    try:
        return ReplicateImageGenerator()
    except ValueError as exc:
        logger.warning("Hero images will use the gradient fallback: %s", exc)
        return None


@dataclass(frozen=True)
class GenerationResult:
    story_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"storyId": self.story_id}


@dataclass(frozen=True)
class VariantResult:
    story_id: str
    variant_of: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "storyId": self.story_id, "variantOf": self.variant_of}


@dataclass(frozen=True)
class RetryResult:
    story_id: str
    step: str

    @property
    def message(self) -> str:
        return f"{self.step} step completed successfully"

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "storyId": self.story_id, "step": self.step, "message": self.message}


class ColorStoryOrchestrator:
    """
    High-level coordinator that chains the four generation stages over a story document.
    """

    def __init__(
        self,
        *,
        document_store: DocumentStore,
        object_store: ObjectStore,
        narration_generator: NarrationGenerator | None = None,
        usage_guide_generator: UsageGuideGenerator | None = None,
        image_generator: ReplicateImageGenerator | None = None,
        speech_synthesizer: SpeechSynthesizer | None = None,
        text_model: str | None = None,
        text_api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        speech_fn: SpeechCallable | None = None,
    ) -> None:
        self._store = document_store
        narration_generator = narration_generator or NarrationGenerator(
            api_key=text_api_key,
            model=text_model,
            completion_fn=completion_fn,
        )
        usage_guide_generator = usage_guide_generator or UsageGuideGenerator(
            api_key=text_api_key,
            model=text_model,
            completion_fn=completion_fn,
        )
        image_generator = image_generator or _default_image_generator()
        speech_synthesizer = speech_synthesizer or SpeechSynthesizer(speech_fn=speech_fn)

        self._stages: dict[StageName, StageExecutor] = {
            StageName.NARRATION: NarrationStage(narration_generator),
            StageName.USAGE_GUIDE: UsageGuideStage(usage_guide_generator),
            StageName.HERO: HeroImageStage(image_generator, object_store),
            StageName.AUDIO: AudioStage(speech_synthesizer, object_store),
        }

    def get_story(self, story_id: str) -> dict[str, Any] | None:
        return self._store.get(story_id)

    def generate_story(
        self,
        uid: str | None,
        payload: Mapping[str, Any],
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> GenerationResult:
        """
        Create a new story from a palette and run every stage.
        """
        owner_id = require_identity(uid)
        request = StoryRequest.from_mapping(payload)
        palette = request.palette
        logger.info(
            "Generating color story for %s: palette=%r items=%d room=%s style=%s",
            owner_id,
            palette.name,
            len(palette.items),
            request.room,
            request.style,
        )

        story_id = self._store.new_id()
        session = StorySession(self._store, story_id, progress_callback=progress_callback)
        self._create(
            session,
            {
                "ownerId": owner_id,
                "name": palette.name,
                "sourcePaletteId": palette.id,
                "palette": palette.to_dict(),
                "room": request.room,
                "style": request.style,
                "vibeWords": list(request.vibe_words),
                "brandHints": list(request.brand_hints),
                "access": "private",
                "status": STATUS_PROCESSING,
                "progress": INITIAL_PROGRESS,
                "progressMessage": "Starting generation…",
            },
        )

        context = StoryContext(
            story_id=story_id,
            room=request.room,
            style=request.style,
            palette=palette,
            vibe_words=request.vibe_words,
            brand_hints=request.brand_hints,
            prompt_version="v1",
        )
        self._run_pipeline(session, context, complete_message="Story ready")
        return GenerationResult(story_id=story_id)

    def generate_story_variant(
        self,
        uid: str | None,
        payload: Mapping[str, Any],
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> VariantResult:
        """
        Derive a new story from an owned parent, adding an emphasis and vibe tweaks.
        """
        owner_id = require_identity(uid)
        request = VariantRequest.from_mapping(payload)
        parent = self._store.get(request.story_id)
        if parent is None:
            raise NotFoundError(request.story_id)
        require_owner(owner_id, parent)

        inherited = StoryContext.from_document(request.story_id, parent)
        vibe_words = tuple(
            word
            for word in (*inherited.vibe_words, request.emphasis, *request.vibe_tweaks)
            if word
        )

        story_id = self._store.new_id()
        session = StorySession(self._store, story_id, progress_callback=progress_callback)
        self._create(
            session,
            {
                "ownerId": owner_id,
                "name": parent.get("name") or (inherited.palette.name if inherited.palette else ""),
                "sourcePaletteId": parent.get("sourcePaletteId"),
                "palette": inherited.palette.to_dict() if inherited.palette else None,
                "variantOf": request.story_id,
                "emphasis": request.emphasis,
                "vibeTweaks": list(request.vibe_tweaks),
                "room": inherited.room,
                "style": inherited.style,
                "vibeWords": list(vibe_words),
                "brandHints": list(inherited.brand_hints),
                "access": "private",
                "status": STATUS_PROCESSING,
                "progress": INITIAL_PROGRESS,
                "progressMessage": "Starting…",
            },
        )

        context = StoryContext(
            story_id=story_id,
            room=inherited.room,
            style=inherited.style,
            palette=inherited.palette,
            vibe_words=vibe_words,
            brand_hints=inherited.brand_hints,
            variant_of=request.story_id,
            emphasis=request.emphasis,
            vibe_tweaks=request.vibe_tweaks,
            prompt_version="v1-variant",
        )
        self._run_pipeline(session, context, complete_message="Variant ready")
        return VariantResult(story_id=story_id, variant_of=request.story_id)

    def retry_story_step(
        self,
        uid: str | None,
        payload: Mapping[str, Any],
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> RetryResult:
        """
        Re-run a single stage of an owned story from its persisted context.
        """
        owner_id = require_identity(uid)
        request = RetryRequest.from_mapping(payload)
        story = self._store.get(request.story_id)
        if story is None:
            raise NotFoundError(request.story_id)
        require_owner(owner_id, story)
        stage_name = request.stage()

        prior_status = story.get("status")
        session = StorySession(
            self._store,
            request.story_id,
            progress=float(story.get("progress") or 0.0),
            degraded_stages=story.get("degradedStages") or (),
            progress_callback=progress_callback,
        )
        context = StoryContext.from_document(request.story_id, story, prompt_version="v1-retry")
        logger.info("Retrying %s for story %s.", stage_name.value, request.story_id)

        try:
            if prior_status != STATUS_COMPLETE:
                session.write_progress(
                    STATUS_PROCESSING, stage_name.base_progress, stage_name.retry_message
                )
            self._execute(session, self._stages[stage_name], context)
            if prior_status != STATUS_COMPLETE:
                session.write_progress(
                    prior_status or STATUS_PROCESSING,
                    round(stage_name.base_progress + RETRY_PROGRESS_BUMP, 2),
                    f"{stage_name.value} step completed",
                )
        except Exception as exc:
            message = f"{stage_name.value} retry failed: {exc}"
            logger.exception("Retry of %s failed for story %s.", stage_name.value, request.story_id)
            session.fail(message, progress=stage_name.base_progress)
            raise InternalError(message, {"storyId": request.story_id}) from exc

        return RetryResult(story_id=request.story_id, step=stage_name.value)

    def _create(self, session: StorySession, document: Mapping[str, Any]) -> None:
        try:
            session.create(document)
        except ColorStoryError:
            raise
        except Exception as exc:
            logger.exception("Failed to create story %s.", session.story_id)
            raise InternalError(str(exc) or "Failed to create story.") from exc

    def _run_pipeline(
        self,
        session: StorySession,
        context: StoryContext,
        *,
        complete_message: str,
    ) -> None:
        try:
            for stage_name in STAGE_ORDER:
                session.write_progress(
                    STATUS_PROCESSING,
                    stage_name.base_progress,
                    stage_name.start_message(variant=context.is_variant),
                )
                context = self._execute(session, self._stages[stage_name], context)
            session.write_progress(STATUS_COMPLETE, COMPLETE_PROGRESS, complete_message)
        except Exception as exc:
            message = str(exc) or "Color story generation failed"
            logger.exception("Generation pipeline failed for story %s.", session.story_id)
            session.fail(message)
            raise InternalError(message, {"storyId": session.story_id}) from exc

        logger.info("Story %s complete.", session.story_id)

    @staticmethod
    def _execute(
        session: StorySession,
        stage: StageExecutor,
        context: StoryContext,
    ) -> StoryContext:
        result = stage.run(context)
        session.record_stage_outcome(result.stage.value, degraded=result.degraded)
        session.save({**result.fields, "degradedStages": session.degraded_stages})
        if result.stage is StageName.NARRATION:
            return context.with_narration(result.fields.get("narration", ""))
        return context
