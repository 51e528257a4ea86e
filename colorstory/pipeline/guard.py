"""
Authorization checks shared by the entry points.
"""

from __future__ import annotations

from typing import Any, Mapping

from colorstory.common import PermissionDeniedError, UnauthenticatedError


def require_identity(uid: str | None) -> str:
    """
    Return the caller identity, raising when it is missing.
    """
    if uid is None or not str(uid).strip():
        raise UnauthenticatedError("Login required.")
    return str(uid)


def require_owner(uid: str | None, story: Mapping[str, Any]) -> str:
    """
    Ensure the caller is signed in and owns ``story``.
    """
    caller = require_identity(uid)
    if story.get("ownerId") != caller:
        raise PermissionDeniedError("Not your story.", {"storyId": story.get("id")})
    return caller
