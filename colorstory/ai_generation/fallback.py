"""
Deterministic placeholder artwork used when hero image generation fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from colorstory.palette import is_valid_hex

DEFAULT_GRADIENT_STOPS = ("#888888", "#444444")
HERO_WIDTH = 1600
HERO_HEIGHT = 900

FALLBACK_PROVIDER = "fallback"
FALLBACK_MODEL = "gradient"


@dataclass(frozen=True)
class FallbackAsset:
    data: bytes
    content_type: str = "image/svg+xml"
    extension: str = "svg"


def render_gradient_hero(hexes: Sequence[str] | None) -> FallbackAsset:
    """
    Render a two-stop vertical gradient SVG from the first two palette colors.
    """
    values = list(hexes or [])[:2]
    stops = [
        values[index] if index < len(values) and is_valid_hex(values[index]) else default
        for index, default in enumerate(DEFAULT_GRADIENT_STOPS)
    ]
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{HERO_WIDTH}" height="{HERO_HEIGHT}">\n'
        '  <defs><linearGradient id="g" x1="0" y1="0" x2="0" y2="1">\n'
        f'    <stop offset="0%" stop-color="{stops[0]}"/>'
        f'<stop offset="100%" stop-color="{stops[1]}"/></linearGradient></defs>\n'
        f'  <rect width="{HERO_WIDTH}" height="{HERO_HEIGHT}" fill="url(#g)"/></svg>'
    )
    return FallbackAsset(data=svg.encode("utf-8"))
