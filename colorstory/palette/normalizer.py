"""
Canonical palette representation and normalization of the accepted input shapes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Mapping, Sequence

from colorstory.common import InvalidArgumentError

HEX_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")

DEFAULT_PALETTE_NAME = "Untitled"

SHAPE_ERROR_MESSAGE = (
    "Provide a palette with colors: either palette.items[] or "
    "paletteName + colors[] (list of hex strings)."
)

PaletteShape = Literal["modern", "legacy", "invalid"]


def is_valid_hex(value: Any) -> bool:
    return isinstance(value, str) and bool(HEX_PATTERN.match(value))


def _coerce_optional_str(value: Any) -> str | None:
    if value is None:
        return None

    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class PaletteItem:
    """
    A single paint color within a palette.
    """

    hex: str
    brand_name: str | None = None
    color_name: str | None = None
    code: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PaletteItem":
        hex_value = data.get("hex")
        if not is_valid_hex(hex_value):
            raise InvalidArgumentError(
                f"Palette item hex must be a 6-digit color like '#A1B2C3', got {hex_value!r}.",
                {"item": dict(data)},
            )
        return cls(
            hex=hex_value,
            brand_name=_coerce_optional_str(data.get("brandName")),
            color_name=_coerce_optional_str(data.get("colorName") or data.get("name")),
            code=_coerce_optional_str(data.get("code")),
        )

    def describe(self) -> str:
        """
        Render the item as a short prompt-friendly descriptor.
        """
        details = [part for part in (self.brand_name, self.color_name, self.code) if part]
        if not details:
            return self.hex
        return f"{self.hex} ({' '.join(details)})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"hex": self.hex}
        if self.brand_name:
            payload["brandName"] = self.brand_name
        if self.color_name:
            payload["colorName"] = self.color_name
        if self.code:
            payload["code"] = self.code
        return payload


@dataclass(frozen=True)
class Palette:
    """
    Canonical palette used by every pipeline stage.

    Attributes
    ----------
    id:
        Optional caller-owned reference to the source palette.
    name:
        Display name, defaulted to ``"Untitled"``.
    items:
        Ordered, non-empty tuple of palette items.
    """

    id: str | None
    name: str
    items: tuple[PaletteItem, ...]

    @property
    def hexes(self) -> list[str]:
        return [item.hex for item in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "hexes": self.hexes,
        }

    @classmethod
    def from_document(cls, data: Mapping[str, Any] | None) -> "Palette | None":
        """
        Rebuild a palette persisted on a story, skipping entries without a valid hex.
        """
        if not isinstance(data, Mapping):
            return None

        items: list[PaletteItem] = []
        raw_items = data.get("items")
        if isinstance(raw_items, Sequence) and not isinstance(raw_items, (str, bytes)):
            for entry in raw_items:
                if isinstance(entry, Mapping) and is_valid_hex(entry.get("hex")):
                    items.append(PaletteItem.from_mapping(entry))
        if not items:
            raw_hexes = data.get("hexes") or []
            items = [PaletteItem(hex=value) for value in raw_hexes if is_valid_hex(value)]
        if not items:
            return None

        return cls(
            id=_coerce_optional_str(data.get("id")),
            name=_coerce_optional_str(data.get("name")) or DEFAULT_PALETTE_NAME,
            items=tuple(items),
        )


def classify_palette_input(data: Mapping[str, Any]) -> PaletteShape:
    """
    Decide which accepted shape a request carries; the modern shape wins when both match.
    """
    palette = data.get("palette")
    if isinstance(palette, Mapping):
        items = palette.get("items")
        if isinstance(items, Sequence) and not isinstance(items, (str, bytes)) and items:
            return "modern"

    colors = data.get("colors")
    name = data.get("paletteName")
    if (
        isinstance(colors, Sequence)
        and not isinstance(colors, (str, bytes))
        and len(colors) > 0
        and isinstance(name, str)
        and name.strip()
    ):
        return "legacy"

    return "invalid"


def normalize_palette(data: Mapping[str, Any]) -> Palette:
    """
    Convert either accepted request shape into a :class:`Palette`.

    The modern shape is ``{"palette": {"id"?, "name"?, "items": [{"hex", ...}]}}``;
    the legacy shape is ``{"paletteName": str, "colors": [hex, ...]}``.
    """
    shape = classify_palette_input(data)

    if shape == "modern":
        palette = data["palette"]
        items = []
        for entry in palette["items"]:
            if not isinstance(entry, Mapping):
                raise InvalidArgumentError(
                    "Palette items must be objects with a 'hex' field.",
                    {"item": entry},
                )
            items.append(PaletteItem.from_mapping(entry))
        return Palette(
            id=_coerce_optional_str(palette.get("id")),
            name=_coerce_optional_str(palette.get("name")) or DEFAULT_PALETTE_NAME,
            items=tuple(items),
        )

    if shape == "legacy":
        colors = list(data["colors"])
        invalid = [value for value in colors if not is_valid_hex(value)]
        if invalid:
            raise InvalidArgumentError(
                "Legacy colors must be 6-digit hex strings.",
                {"invalid": invalid},
            )
        return Palette(
            id=None,
            name=data["paletteName"].strip(),
            items=tuple(PaletteItem(hex=value) for value in colors),
        )

    raise InvalidArgumentError(SHAPE_ERROR_MESSAGE)
