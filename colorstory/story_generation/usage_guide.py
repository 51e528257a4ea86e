"""
Structured paint usage guide generation and validation.
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from colorstory.common import ChatResult, CompletionCallable, call_chat_completion
from colorstory.palette import is_valid_hex

from .prompting import TextPrompt, build_usage_guide_prompt

if TYPE_CHECKING:
    from colorstory.pipeline.story import StoryContext

USAGE_GUIDE_LENGTH_RANGE = (4, 6)

USAGE_ITEM_FIELDS = (
    "role",
    "hex",
    "name",
    "brandName",
    "code",
    "surface",
    "finishRecommendation",
    "sheen",
    "howToUse",
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class UsageItem:
    """
    One row of the usage guide: where and how a single paint color is applied.
    """

    role: str
    hex: str
    name: str
    brand_name: str
    code: str
    surface: str
    finish_recommendation: str
    sheen: str
    how_to_use: str

    @classmethod
    def from_mapping(cls, data: Any) -> "UsageItem":
        if not isinstance(data, dict):
            raise ValueError(f"Usage item must be an object, got {type(data).__name__}.")

        missing = [key for key in USAGE_ITEM_FIELDS if not isinstance(data.get(key), str)]
        if missing:
            raise ValueError(f"Usage item is missing string fields: {', '.join(missing)}.")

        if not is_valid_hex(data["hex"]):
            raise ValueError(f"Usage item hex must be '#RRGGBB', got {data['hex']!r}.")

        return cls(
            role=data["role"],
            hex=data["hex"],
            name=data["name"],
            brand_name=data["brandName"],
            code=data["code"],
            surface=data["surface"],
            finish_recommendation=data["finishRecommendation"],
            sheen=data["sheen"],
            how_to_use=data["howToUse"],
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "role": self.role,
            "hex": self.hex,
            "name": self.name,
            "brandName": self.brand_name,
            "code": self.code,
            "surface": self.surface,
            "finishRecommendation": self.finish_recommendation,
            "sheen": self.sheen,
            "howToUse": self.how_to_use,
        }


def parse_usage_guide(raw_text: str) -> list[UsageItem]:
    """
    Parse a model response into validated usage items.

    Raises ``ValueError`` when the text is not a JSON array of 4-6 valid items;
    partially valid responses are rejected as a whole.
    """
    text = raw_text.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        parsed = json.loads(text or "[]")
    except json.JSONDecodeError as exc:
        raise ValueError("Failed to parse usage guide response as JSON.") from exc

    if not isinstance(parsed, list):
        raise ValueError("Usage guide JSON must be an array.")

    items = _convert_items(parsed)
    _validate_length(items)
    return items


def _convert_items(entries: Iterable[Any]) -> list[UsageItem]:
    return [UsageItem.from_mapping(entry) for entry in entries]


def _validate_length(items: Sequence[UsageItem]) -> None:
    lower, upper = USAGE_GUIDE_LENGTH_RANGE
    if not lower <= len(items) <= upper:
        raise ValueError(f"Expected between {lower} and {upper} usage items, received {len(items)}.")


class UsageGuideGenerator:
    """
    Asks the text model for a strict JSON usage guide and validates the answer.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        completion_fn: CompletionCallable | None = None,
    ) -> None:
        self._api_key = (
            api_key
            or os.getenv("COLORSTORY_TEXT_API_KEY")
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("LITELLM_API_KEY")
        )
        self._model = (
            model
            or os.getenv("COLORSTORY_USAGE_MODEL")
            or os.getenv("COLORSTORY_TEXT_MODEL")
            or os.getenv("LITELLM_MODEL")
            or "gemini/gemini-1.5-pro-latest"
        )
        self._completion_fn: CompletionCallable = completion_fn or call_chat_completion

    @property
    def model(self) -> str:
        return self._model

    def generate_usage_guide(
        self,
        context: "StoryContext",
        *,
        temperature: float = 0.3,
        max_output_tokens: int = 1800,
        **response_kwargs: Any,
    ) -> list[UsageItem]:
        """
        Produce 4-6 usage items for the story's palette.
        """
        prompt: TextPrompt = build_usage_guide_prompt(context)
        result: ChatResult = self._completion_fn(
            model=self._model,
            messages=[
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            temperature=temperature,
            max_tokens=max_output_tokens,
            api_key=self._api_key,
            **response_kwargs,
        )
        return parse_usage_guide(result.text)
