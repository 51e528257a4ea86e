"""
Text-to-speech for the narrated audio track.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from colorstory.common import SpeechCallable, call_speech_synthesis, provider_from_model


@dataclass(frozen=True)
class VoiceSpec:
    """Voice selection forwarded to the speech endpoint."""

    model: str
    voice: str
    response_format: str = "mp3"
    content_type: str = "audio/mpeg"


class SpeechSynthesizer:
    """
    Wraps the speech endpoint and resolves the voice configuration.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        voice: str | None = None,
        speech_fn: SpeechCallable | None = None,
    ) -> None:
        self._api_key = (
            api_key or os.getenv("COLORSTORY_TTS_API_KEY") or os.getenv("OPENAI_API_KEY")
        )
        self._voice = VoiceSpec(
            model=model or os.getenv("COLORSTORY_TTS_MODEL") or "openai/tts-1",
            voice=voice or os.getenv("COLORSTORY_TTS_VOICE") or "alloy",
        )
        self._speech_fn: SpeechCallable = speech_fn or call_speech_synthesis

    @property
    def voice(self) -> VoiceSpec:
        return self._voice

    def attribution(self) -> dict[str, str]:
        return {
            "provider": provider_from_model(self._voice.model),
            "model": self._voice.model,
            "voice": self._voice.voice,
        }

    def synthesize(self, text: str, **extra_kwargs: Any) -> bytes:
        if not text.strip():
            raise ValueError("Speech text must be a non-empty string.")
        return self._speech_fn(
            model=self._voice.model,
            text=text,
            voice=self._voice.voice,
            response_format=self._voice.response_format,
            api_key=self._api_key,
            **extra_kwargs,
        )
