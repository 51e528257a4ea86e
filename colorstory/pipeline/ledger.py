"""
Progress ledger: incremental, merge-only updates to a single story document.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from colorstory.storage import SERVER_TIMESTAMP, DocumentStore

STATUS_PROCESSING = "processing"
STATUS_COMPLETE = "complete"
STATUS_ERROR = "error"

INITIAL_PROGRESS = 0.1
COMPLETE_PROGRESS = 1.0

ProgressCallback = Callable[[str, dict[str, Any]], None]

logger = logging.getLogger(__name__)


class StorySession:
    """
    Handle on one story document for the duration of a single pipeline invocation.

    Tracks the last progress value written so a terminal failure can be recorded
    at the failing stage's starting value.
    """

    def __init__(
        self,
        store: DocumentStore,
        story_id: str,
        *,
        progress: float = 0.0,
        degraded_stages: Iterable[str] = (),
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        self._store = store
        self._story_id = story_id
        self._progress = progress
        self._degraded = set(degraded_stages)
        self._progress_callback = progress_callback

    @property
    def story_id(self) -> str:
        return self._story_id

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def degraded_stages(self) -> list[str]:
        return sorted(self._degraded)

    def create(self, document: Mapping[str, Any]) -> None:
        payload = dict(document)
        payload.update(
            {
                "id": self._story_id,
                "createdAt": SERVER_TIMESTAMP,
                "updatedAt": SERVER_TIMESTAMP,
            }
        )
        self._store.create(self._story_id, payload)
        self._progress = float(payload.get("progress", self._progress))
        self._notify(
            "story:created",
            status=payload.get("status"),
            progress=self._progress,
            message=payload.get("progressMessage"),
        )

    def write_progress(self, status: str, progress: float, message: str) -> None:
        """
        Merge-write the ledger fields and refresh ``updatedAt``; nothing else is touched.
        """
        self._store.merge(
            self._story_id,
            {
                "status": status,
                "progress": progress,
                "progressMessage": message,
                "updatedAt": SERVER_TIMESTAMP,
            },
        )
        self._progress = progress
        logger.info(
            "Story %s progress: status=%s progress=%.2f message=%s",
            self._story_id,
            status,
            progress,
            message,
        )
        self._notify("story:progress", status=status, progress=progress, message=message)

    def save(self, fields: Mapping[str, Any]) -> None:
        """
        Merge-write stage outputs.
        """
        payload = dict(fields)
        payload["updatedAt"] = SERVER_TIMESTAMP
        self._store.merge(self._story_id, payload)

    def record_stage_outcome(self, stage: str, *, degraded: bool) -> None:
        if degraded:
            self._degraded.add(stage)
        else:
            self._degraded.discard(stage)

    def fail(self, message: str, *, progress: float | None = None) -> None:
        """
        Record a terminal error, by default at the last progress value written.

        A failure while writing the error state is logged, never raised, so the
        caller can surface the original error.
        """
        held = self._progress if progress is None else progress
        try:
            self.write_progress(STATUS_ERROR, held, message)
        except Exception:
            logger.exception("Failed to write error progress for story %s.", self._story_id)

    def _notify(self, event: str, **payload: Any) -> None:
        if self._progress_callback is not None:
            self._progress_callback(event, {"story_id": self._story_id, **payload})
