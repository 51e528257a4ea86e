"""
Callable entry points: ``generateStory``, ``generateStoryVariant`` and ``retryStoryStep``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from colorstory.common import ColorStoryError, InternalError, InvalidArgumentError
from colorstory.pipeline import ColorStoryOrchestrator, ProgressCallback

logger = logging.getLogger(__name__)

OPERATIONS: dict[str, Callable[..., Any]] = {
    "generateStory": ColorStoryOrchestrator.generate_story,
    "generateStoryVariant": ColorStoryOrchestrator.generate_story_variant,
    "retryStoryStep": ColorStoryOrchestrator.retry_story_step,
}


def dispatch(
    orchestrator: ColorStoryOrchestrator,
    operation: str,
    uid: str | None,
    payload: Mapping[str, Any] | None,
    *,
    progress_callback: ProgressCallback | None = None,
) -> dict[str, Any]:
    """
    Invoke an operation and return its success payload or ``{"error": {...}}``.
    """
    try:
        handler = OPERATIONS.get(operation)
        if handler is None:
            raise InvalidArgumentError(
                f"Unknown operation '{operation}'.",
                {"operations": sorted(OPERATIONS)},
            )
        result = handler(orchestrator, uid, payload, progress_callback=progress_callback)
        return result.to_dict()
    except ColorStoryError as exc:
        logger.warning("%s failed with %s: %s", operation, exc.code, exc.message)
        return {"error": exc.to_dict()}
    except Exception as exc:
        logger.exception("%s failed unexpectedly.", operation)
        return {"error": InternalError(str(exc) or "Unexpected error").to_dict()}
