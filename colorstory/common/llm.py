"""
LiteLLM-powered chat completion and speech synthesis helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, MutableMapping, Sequence

from litellm import completion, speech

ChatMessage = Mapping[str, Any]


@dataclass
class ChatResult:
    """
    Structured response returned from an LLM chat completion.
    """

    text: str
    raw: Any


CompletionCallable = Callable[..., ChatResult]
SpeechCallable = Callable[..., bytes]


def call_chat_completion(
    *,
    model: str,
    messages: Sequence[ChatMessage],
    temperature: float | None = None,
    max_tokens: int | None = None,
    api_key: str | None = None,
    **extra_kwargs: Any,
) -> ChatResult:
    """
    Invoke LiteLLM's `completion` API and return the consolidated text.
    """
    payload: MutableMapping[str, Any] = {
        "model": model,
        "messages": list(messages),
    }

    if temperature is not None:
        payload["temperature"] = temperature

    if max_tokens is not None:
        payload["max_tokens"] = max_tokens

    if api_key is not None:
        payload["api_key"] = api_key

    payload.update(extra_kwargs)

    response = completion(**payload)

    try:
        message = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise RuntimeError("Unexpected LiteLLM response format.") from exc

    text = str(message or "").strip()
    return ChatResult(text=text, raw=response)


def call_speech_synthesis(
    *,
    model: str,
    text: str,
    voice: str,
    response_format: str = "mp3",
    api_key: str | None = None,
    **extra_kwargs: Any,
) -> bytes:
    """
    Invoke LiteLLM's `speech` API and return the encoded audio bytes.
    """
    payload: MutableMapping[str, Any] = {
        "model": model,
        "input": text,
        "voice": voice,
        "response_format": response_format,
    }

    if api_key is not None:
        payload["api_key"] = api_key

    payload.update(extra_kwargs)

    response = speech(**payload)

    audio = getattr(response, "content", None)
    if not isinstance(audio, (bytes, bytearray)) or not audio:
        raise RuntimeError("LiteLLM speech response did not contain audio content.")
    return bytes(audio)


def provider_from_model(model: str) -> str:
    """
    Derive the provider tag from a LiteLLM ``provider/model`` identifier.
    """
    if "/" in model:
        return model.split("/", 1)[0]
    return "openai"
