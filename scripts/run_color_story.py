"""
CLI to run the ColorStory pipeline against local storage.

Usage:
    python scripts/run_color_story.py --owner alice generate --input request.yaml
    python scripts/run_color_story.py --owner alice variant --story-id <id> \
        --emphasis "warmer evenings" --tweak cozy
    python scripts/run_color_story.py --owner alice retry --story-id <id> --step hero
    python scripts/run_color_story.py --owner alice show --story-id <id>

Stories are written as YAML documents under ``--store-dir``; generated assets land
under ``--assets-dir``.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import yaml
from tqdm.auto import tqdm

# Ensure project root is on the Python path when running as a script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from colorstory import ColorStory, ColorStoryOrchestrator, dispatch  # noqa: E402
from colorstory.storage import (  # noqa: E402
    STORIES_COLLECTION,
    LocalObjectStore,
    YamlDocumentStore,
)


class ProgressTracker:
    """
    Mirrors ledger updates as a command-line progress bar.
    """

    def __init__(self) -> None:
        self._bar: tqdm | None = None

    def __call__(self, event: str, payload: Dict[str, Any]) -> None:
        progress = payload.get("progress")
        message = payload.get("message") or ""
        match event:
            case "story:created":
                self._write(f"Story {payload.get('story_id')} created. {message}")
                self._bar = tqdm(total=100, desc="Color story", unit="%")
                self._advance(progress)
            case "story:progress":
                if self._bar is not None:
                    self._bar.set_description(str(message)[:45])
                self._advance(progress)
                if payload.get("status") in {"complete", "error"}:
                    self._write(f"[{payload.get('status')}] {message}")
                    self.close()

    def _advance(self, progress: Any) -> None:
        if self._bar is None or not isinstance(progress, (int, float)):
            return
        target = int(round(progress * 100))
        if target > self._bar.n:
            self._bar.update(target - self._bar.n)

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None

    @staticmethod
    def _write(message: str) -> None:
        tqdm.write(message)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the ColorStory generation pipeline.")
    parser.add_argument("--owner", default=None, help="Caller identity (uid).")
    parser.add_argument(
        "--store-dir",
        default="colorstory_data",
        help="Directory holding the story YAML documents.",
    )
    parser.add_argument(
        "--assets-dir",
        default="colorstory_assets",
        help="Directory receiving hero images and audio.",
    )
    parser.add_argument(
        "--public-base-url",
        default=None,
        help="Optional URL prefix under which --assets-dir is served.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Create a new color story.")
    generate.add_argument(
        "--input",
        required=True,
        help="YAML/JSON request with a palette, room, style, vibeWords and brandHints.",
    )

    variant = subparsers.add_parser("variant", help="Derive a variant from an existing story.")
    variant.add_argument("--story-id", required=True)
    variant.add_argument("--emphasis", default="", help="What the variant should emphasize.")
    variant.add_argument(
        "--tweak",
        action="append",
        default=[],
        help="Extra vibe word for the variant (repeatable).",
    )

    retry = subparsers.add_parser("retry", help="Re-run one stage of a story.")
    retry.add_argument("--story-id", required=True)
    retry.add_argument("--step", required=True, help="narration, usage-guide, hero or audio.")

    show = subparsers.add_parser("show", help="Print a stored story as YAML.")
    show.add_argument("--story-id", required=True)

    return parser.parse_args(argv)


def load_request_mapping(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif suffix == ".json":
        data = json.loads(text)
    else:
        raise ValueError("Unsupported request file format. Use YAML or JSON.")

    if not isinstance(data, dict):
        raise ValueError("Request file must deserialize to a mapping.")
    return data


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    document_store = YamlDocumentStore(Path(args.store_dir) / STORIES_COLLECTION)

    if args.command == "show":
        document = document_store.get(args.story_id)
        if document is None:
            print(f"Story {args.story_id} not found.", file=sys.stderr)
            return 1
        print(ColorStory.from_document(args.story_id, document).to_yaml())
        return 0

    orchestrator = ColorStoryOrchestrator(
        document_store=document_store,
        object_store=LocalObjectStore(args.assets_dir, public_base_url=args.public_base_url),
    )

    if args.command == "generate":
        operation, payload = "generateStory", load_request_mapping(Path(args.input))
    elif args.command == "variant":
        operation = "generateStoryVariant"
        payload = {"storyId": args.story_id, "emphasis": args.emphasis, "vibeTweaks": args.tweak}
    else:
        operation, payload = "retryStoryStep", {"storyId": args.story_id, "step": args.step}

    tracker = ProgressTracker()
    try:
        response = dispatch(
            orchestrator,
            operation,
            args.owner,
            payload,
            progress_callback=tracker,
        )
    finally:
        tracker.close()

    print(json.dumps(response, indent=2, ensure_ascii=False))
    return 1 if "error" in response else 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
