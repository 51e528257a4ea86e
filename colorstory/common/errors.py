"""
Error taxonomy surfaced by the ColorStory entry points.
"""

from __future__ import annotations

from typing import Any, Mapping


class ColorStoryError(Exception):
    """Base exception for all errors returned to callers."""

    code = "internal"

    def __init__(self, message: str, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": dict(self.details)}


class InvalidArgumentError(ColorStoryError):
    """Raised when the request payload is malformed or incomplete."""

    code = "invalid-argument"


class UnauthenticatedError(ColorStoryError):
    """Raised when no caller identity accompanies the request."""

    code = "unauthenticated"


class PermissionDeniedError(ColorStoryError):
    """Raised when the caller does not own the referenced story."""

    code = "permission-denied"


class NotFoundError(ColorStoryError):
    """Raised when a referenced story does not exist."""

    code = "not-found"

    def __init__(self, story_id: str) -> None:
        super().__init__("Story not found.", {"storyId": story_id})


class InternalError(ColorStoryError):
    """Raised when a stage or the orchestrator fails unexpectedly."""

    code = "internal"
