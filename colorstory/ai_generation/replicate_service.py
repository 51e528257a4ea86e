"""
Integration with Replicate for hero image generation.
"""

from __future__ import annotations

import mimetypes
import os
from collections.abc import Iterable as IterableABC
from dataclasses import dataclass
from typing import Any, Callable

import replicate
import requests

from .prompting import HeroPrompt

DOWNLOAD_TIMEOUT_SECONDS = 60

DEFAULT_IMAGE_MODEL = "black-forest-labs/flux-schnell"


@dataclass(frozen=True)
class GeneratedImage:
    """
    Inline image bytes returned by the image model.
    """

    data: bytes | None
    content_type: str = "image/jpeg"

    @property
    def extension(self) -> str:
        guessed = mimetypes.guess_extension(self.content_type) or ".jpg"
        return ".jpg" if guessed == ".jpe" else guessed


def _build_flux_schnell_input(*, prompt: HeroPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": "16:9",
        "output_format": "jpg",
        "num_outputs": 1,
    }


def _build_flux_pro_input(*, prompt: HeroPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": "16:9",
        "output_format": "jpg",
        "safety_tolerance": 2,
        "prompt_upsampling": False,
    }


def _build_sdxl_input(*, prompt: HeroPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "negative_prompt": prompt.negative,
        "width": 1600,
        "height": 896,
        "num_outputs": 1,
    }


_MODEL_INPUT_BUILDERS: dict[str, Callable[..., dict[str, Any]]] = {
    "black-forest-labs/flux-schnell": _build_flux_schnell_input,
    "black-forest-labs/flux-dev": _build_flux_schnell_input,
    "black-forest-labs/flux-1.1-pro": _build_flux_pro_input,
    "stability-ai/sdxl": _build_sdxl_input,
}


def _build_replicate_input_payload(*, model_identifier: str, prompt: HeroPrompt) -> dict[str, Any]:
    normalized_identifier = model_identifier.strip().lower()
    builder = _MODEL_INPUT_BUILDERS.get(normalized_identifier)
    if builder is None and ":" in normalized_identifier:
        base_identifier = normalized_identifier.split(":", maxsplit=1)[0]
        builder = _MODEL_INPUT_BUILDERS.get(base_identifier)
    if builder is None:
        supported_models = ", ".join(sorted(_MODEL_INPUT_BUILDERS))
        raise ValueError(
            "Model identifier "
            f"'{model_identifier}' is not configured with a default input payload. "
            f"Supported models: {supported_models}."
        )
    return builder(prompt=prompt)


class ReplicateImageGenerator:
    """
    Convenience wrapper around the Replicate client for hero image generation.

    Parameters
    ----------
    api_token:
        Replicate API token. Falls back to ``REPLICATE_API_TOKEN`` environment variable.
    model_identifier:
        Model string in the ``owner/model[:version]`` format. Falls back to
        ``COLORSTORY_IMAGE_MODEL``, then ``REPLICATE_MODEL``, then flux-schnell.
    client:
        Optional pre-configured :class:`replicate.Client`. Mainly useful for testing.
    http_get:
        Callable used to download URL outputs; defaults to :func:`requests.get`.
    """

    provider = "Replicate"

    def __init__(
        self,
        *,
        api_token: str | None = None,
        model_identifier: str | None = None,
        client: replicate.Client | None = None,
        http_get: Callable[..., Any] | None = None,
    ) -> None:
        self._api_token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not self._api_token and not client:
            raise ValueError(
                "Replicate API token is required. Set REPLICATE_API_TOKEN or pass api_token."
            )

        self._model_identifier = (
            model_identifier
            or os.getenv("COLORSTORY_IMAGE_MODEL")
            or os.getenv("REPLICATE_MODEL")
            or DEFAULT_IMAGE_MODEL
        )
        self._client = client or replicate.Client(api_token=self._api_token)
        self._http_get = http_get or requests.get

    @property
    def model_identifier(self) -> str:
        """Return the model identifier currently used."""
        return self._model_identifier

    def generate_image(self, prompt: HeroPrompt, **model_kwargs: Any) -> GeneratedImage:
        """
        Run the configured model and return the first image as inline bytes.

        ``data`` is ``None`` when the model produced no usable output.
        """
        replicate_input = _build_replicate_input_payload(
            model_identifier=self._model_identifier,
            prompt=prompt,
        )
        replicate_input.update(model_kwargs)

        outputs = self._client.run(self._model_identifier, input=replicate_input)
        return self._first_image(outputs)

    def _first_image(self, outputs: Any) -> GeneratedImage:
        for output in _flatten_outputs(outputs):
            if isinstance(output, (bytes, bytearray)):
                if output:
                    return GeneratedImage(data=bytes(output))
                continue

            if hasattr(output, "read"):
                data = output.read()
                if data:
                    url = str(getattr(output, "url", "") or "")
                    return GeneratedImage(data=bytes(data), content_type=_content_type_for(url))
                continue

            url = str(output)
            if url.lower().startswith(("http://", "https://")):
                response = self._http_get(url, timeout=DOWNLOAD_TIMEOUT_SECONDS)
                response.raise_for_status()
                if response.content:
                    header = response.headers.get("Content-Type", "")
                    content_type = header.split(";")[0].strip() or _content_type_for(url)
                    return GeneratedImage(data=response.content, content_type=content_type)

        return GeneratedImage(data=None)


def _flatten_outputs(raw: Any) -> list[Any]:
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, bytearray)) or hasattr(raw, "read"):
        return [raw]
    if isinstance(raw, IterableABC):
        flattened: list[Any] = []
        for item in raw:
            flattened.extend(_flatten_outputs(item))
        return flattened
    return [raw]


def _content_type_for(url: str) -> str:
    guessed, _ = mimetypes.guess_type(url.split("?", 1)[0])
    if guessed and guessed.startswith("image/"):
        return guessed
    return "image/jpeg"
