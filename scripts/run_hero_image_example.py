"""
Utility script to exercise the Replicate integration with a sample room.

Usage:
    python scripts/run_hero_image_example.py \
        --room kitchen --style modern --hex "#112233" --hex "#E8E2D6" \
        --output hero.jpg

Environment variables:
    REPLICATE_API_TOKEN  - required unless you pass --api-token
    REPLICATE_MODEL      - optional model override (defaults to flux-schnell)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from colorstory.ai_generation import (  # noqa: E402
    ReplicateImageGenerator,
    build_hero_prompt,
    render_gradient_hero,
)
from colorstory.palette import Palette, PaletteItem  # noqa: E402
from colorstory.pipeline import StoryContext  # noqa: E402


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render a single ColorStory hero image via Replicate."
    )
    parser.add_argument("--room", default="living room", help="Room to depict.")
    parser.add_argument("--style", default="modern", help="Interior style.")
    parser.add_argument(
        "--hex",
        action="append",
        default=[],
        help="Palette color as #RRGGBB (repeatable).",
    )
    parser.add_argument(
        "--vibe",
        action="append",
        default=[],
        help="Vibe word to set the mood (repeatable).",
    )
    parser.add_argument("--output", default="hero.jpg", help="Where to write the image.")
    parser.add_argument(
        "--api-token",
        default=None,
        help="Optional Replicate API token override (otherwise uses environment variable).",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Optional Replicate model identifier override (owner/model[:version]).",
    )
    return parser.parse_args(argv)


def main(argv: list[str]) -> int:
    args = parse_args(argv)

    hexes = args.hex or ["#888888"]
    context = StoryContext(
        story_id="example",
        room=args.room,
        style=args.style,
        palette=Palette(id=None, name="Example", items=tuple(PaletteItem(hex=h) for h in hexes)),
        vibe_words=tuple(args.vibe),
    )
    generator = ReplicateImageGenerator(
        api_token=args.api_token,
        model_identifier=args.model,
    )
    prompt = build_hero_prompt(context)

    print("Running generation with the following parameters:")
    print(f"  Room   : {args.room}")
    print(f"  Style  : {args.style}")
    print(f"  Colors : {', '.join(hexes)}")
    print(f"  Model  : {generator.model_identifier}")

    image = generator.generate_image(prompt)
    output_path = Path(args.output)
    if image.data:
        output_path.write_bytes(image.data)
        print(f"\nSaved {image.content_type} image to {output_path}")
        return 0

    fallback_path = output_path.with_suffix(".svg")
    fallback_path.write_bytes(render_gradient_hero(hexes).data)
    print(f"\nModel returned no image; wrote gradient placeholder to {fallback_path}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
