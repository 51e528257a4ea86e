"""
Validation of the request payloads accepted by the three entry points.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from colorstory.common import InvalidArgumentError
from colorstory.palette import Palette, normalize_palette

from .stages import StageName
from .story import DEFAULT_ROOM, DEFAULT_STYLE


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise InvalidArgumentError("Request payload must be an object.")
    return payload


def _string_list(payload: Mapping[str, Any], key: str) -> tuple[str, ...]:
    value = payload.get(key)
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise InvalidArgumentError(f"Invalid input: '{key}' must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise InvalidArgumentError(f"Invalid input: '{key}' must contain only strings.")
    return tuple(item.strip() for item in value if item.strip())


def _required_string(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Invalid input: '{key}' must be a string.")
    return value.strip()


@dataclass(frozen=True)
class StoryRequest:
    """Validated payload for fresh story generation."""

    palette: Palette
    room: str
    style: str
    vibe_words: tuple[str, ...] = ()
    brand_hints: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, payload: Any) -> "StoryRequest":
        data = _require_mapping(payload)
        room = _required_string(data, "room") or DEFAULT_ROOM
        style = _required_string(data, "style") or DEFAULT_STYLE
        vibe_words = _string_list(data, "vibeWords")
        brand_hints = _string_list(data, "brandHints")
        return cls(
            palette=normalize_palette(data),
            room=room,
            style=style,
            vibe_words=vibe_words,
            brand_hints=brand_hints,
        )


@dataclass(frozen=True)
class VariantRequest:
    """Validated payload for variant generation."""

    story_id: str
    emphasis: str = ""
    vibe_tweaks: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, payload: Any) -> "VariantRequest":
        data = _require_mapping(payload)
        story_id = data.get("storyId")
        if not isinstance(story_id, str) or not story_id.strip():
            raise InvalidArgumentError("storyId is required.")
        emphasis = data.get("emphasis") or ""
        if not isinstance(emphasis, str):
            raise InvalidArgumentError("Invalid input: 'emphasis' must be a string.")
        return cls(
            story_id=story_id.strip(),
            emphasis=emphasis.strip(),
            vibe_tweaks=_string_list(data, "vibeTweaks"),
        )


@dataclass(frozen=True)
class RetryRequest:
    """Retry payload; the step name is checked only after ownership is confirmed."""

    story_id: str
    step: str

    @classmethod
    def from_mapping(cls, payload: Any) -> "RetryRequest":
        data = _require_mapping(payload)
        story_id = data.get("storyId")
        step = data.get("step")
        if not story_id or not step or not isinstance(story_id, str):
            raise InvalidArgumentError("storyId and step are required")
        return cls(story_id=story_id.strip(), step=str(step))

    def stage(self) -> StageName:
        return StageName.parse(self.step)
