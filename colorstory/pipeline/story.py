"""
Story records: the per-run stage context and the read-side story model.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Sequence

import yaml

from colorstory.palette import Palette, PaletteItem, is_valid_hex

DEFAULT_ROOM = "living room"
DEFAULT_STYLE = "modern"
NARRATION_FILLER = "This color story is ready for you."


def _string_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        return ()
    return tuple(str(item).strip() for item in value if item is not None and str(item).strip())


def _usage_guide_palette(document: Mapping[str, Any]) -> Palette | None:
    guide = document.get("usageGuide")
    if not isinstance(guide, Sequence) or isinstance(guide, (str, bytes)):
        return None
    hexes = [
        entry["hex"]
        for entry in guide
        if isinstance(entry, Mapping) and is_valid_hex(entry.get("hex"))
    ]
    if not hexes:
        return None
    return Palette(
        id=document.get("sourcePaletteId"),
        name=str(document.get("name") or "Untitled"),
        items=tuple(PaletteItem(hex=value) for value in hexes),
    )


def palette_from_story(document: Mapping[str, Any]) -> Palette | None:
    """
    Recover the palette of a persisted story, falling back to its usage-guide colors.
    """
    return Palette.from_document(document.get("palette")) or _usage_guide_palette(document)


@dataclass(frozen=True)
class StoryContext:
    """
    Everything a stage needs to run, derived from the request or a persisted story.
    """

    story_id: str
    room: str
    style: str
    palette: Palette | None
    vibe_words: tuple[str, ...] = ()
    brand_hints: tuple[str, ...] = ()
    variant_of: str | None = None
    emphasis: str = ""
    vibe_tweaks: tuple[str, ...] = ()
    narration: str = ""
    prompt_version: str = "v1"

    @property
    def is_variant(self) -> bool:
        return self.variant_of is not None

    @property
    def hexes(self) -> list[str]:
        return self.palette.hexes if self.palette else []

    @property
    def paint_descriptors(self) -> list[str]:
        if not self.palette:
            return []
        return [item.describe() for item in self.palette.items]

    def with_narration(self, narration: str) -> "StoryContext":
        return replace(self, narration=narration)

    @classmethod
    def from_document(
        cls,
        story_id: str,
        document: Mapping[str, Any],
        *,
        prompt_version: str = "v1-retry",
    ) -> "StoryContext":
        """
        Rebuild the context of an existing story from its persisted fields only.
        """
        return cls(
            story_id=story_id,
            room=str(document.get("room") or "").strip() or DEFAULT_ROOM,
            style=str(document.get("style") or "").strip() or DEFAULT_STYLE,
            palette=palette_from_story(document),
            vibe_words=_string_tuple(document.get("vibeWords")),
            brand_hints=_string_tuple(document.get("brandHints")),
            variant_of=document.get("variantOf"),
            emphasis=str(document.get("emphasis") or "").strip(),
            vibe_tweaks=_string_tuple(document.get("vibeTweaks")),
            narration=str(document.get("narration") or ""),
            prompt_version=prompt_version,
        )


@dataclass
class ColorStory:
    """Read-side view of a story document."""

    id: str
    owner_id: str
    status: str
    progress: float
    progress_message: str = ""
    name: str = ""
    access: str = "private"
    room: str = ""
    style: str = ""
    vibe_words: tuple[str, ...] = ()
    narration: str = ""
    usage_guide: list[dict[str, Any]] = field(default_factory=list)
    hero_image_url: str | None = None
    audio_url: str | None = None
    variant_of: str | None = None
    degraded_stages: tuple[str, ...] = ()

    @property
    def display_narration(self) -> str:
        """Narration text, substituting a ready message when the stage produced none."""
        return self.narration or NARRATION_FILLER

    @classmethod
    def from_document(cls, story_id: str, document: Mapping[str, Any]) -> "ColorStory":
        guide = document.get("usageGuide") or []
        return cls(
            id=story_id,
            owner_id=str(document.get("ownerId") or ""),
            status=str(document.get("status") or "processing"),
            progress=float(document.get("progress") or 0.0),
            progress_message=str(document.get("progressMessage") or ""),
            name=str(document.get("name") or ""),
            access=str(document.get("access") or "private"),
            room=str(document.get("room") or ""),
            style=str(document.get("style") or ""),
            vibe_words=_string_tuple(document.get("vibeWords")),
            narration=str(document.get("narration") or ""),
            usage_guide=[dict(entry) for entry in guide if isinstance(entry, Mapping)],
            hero_image_url=document.get("heroImageUrl"),
            audio_url=document.get("audioUrl"),
            variant_of=document.get("variantOf"),
            degraded_stages=_string_tuple(document.get("degradedStages")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "status": self.status,
            "progress": self.progress,
            "progress_message": self.progress_message,
            "access": self.access,
            "room": self.room,
            "style": self.style,
            "vibe_words": list(self.vibe_words),
            "narration": self.display_narration,
            "usage_guide": [dict(entry) for entry in self.usage_guide],
            "hero_image_url": self.hero_image_url,
            "audio_url": self.audio_url,
            "variant_of": self.variant_of,
            "degraded_stages": list(self.degraded_stages),
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
