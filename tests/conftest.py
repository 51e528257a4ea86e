"""
Pytest configuration and shared fakes for the remote collaborators.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import pytest

from colorstory.ai_generation import ReplicateImageGenerator, SpeechSynthesizer
from colorstory.common import ChatResult
from colorstory.pipeline import ColorStoryOrchestrator
from colorstory.storage import InMemoryDocumentStore, InMemoryObjectStore
from colorstory.story_generation import NarrationGenerator, UsageGuideGenerator

OWNER = "user-123"

NARRATION_TEXT = "Deep navy anchors the kitchen walls while a crisp white trim frames the cabinets."

FAKE_JPEG = b"\xff\xd8\xff\xe0fake-jpeg"
FAKE_MP3 = b"ID3fake-mp3"


def usage_item(role: str, hex_value: str = "#112233") -> dict[str, str]:
    return {
        "role": role,
        "hex": hex_value,
        "name": "Naval",
        "brandName": "Sherwin-Williams",
        "code": "SW 6244",
        "surface": "walls",
        "finishRecommendation": "eggshell",
        "sheen": "low",
        "howToUse": "Roll two coats over a tinted primer.",
    }


def usage_guide_json(count: int = 4) -> str:
    roles = ["main", "trim", "ceiling", "accent", "door", "cabinet", "extra"]
    return json.dumps([usage_item(roles[index]) for index in range(count)])


class FakeCompletion:
    """
    Stands in for the LiteLLM completion helper; routes on the prompt content.
    """

    def __init__(
        self,
        *,
        narration: str = NARRATION_TEXT,
        usage_guide: str | None = None,
        narration_error: Exception | None = None,
        usage_error: Exception | None = None,
    ) -> None:
        self.narration = narration
        self.usage_guide = usage_guide if usage_guide is not None else usage_guide_json()
        self.narration_error = narration_error
        self.usage_error = usage_error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, **kwargs: Any) -> ChatResult:
        self.calls.append(kwargs)
        user_prompt = kwargs["messages"][-1]["content"]
        if "STRICT JSON" in user_prompt:
            if self.usage_error is not None:
                raise self.usage_error
            return ChatResult(text=self.usage_guide, raw=None)
        if self.narration_error is not None:
            raise self.narration_error
        return ChatResult(text=self.narration, raw=None)

    def prompts(self) -> list[str]:
        return [call["messages"][-1]["content"] for call in self.calls]


class FakeReplicateClient:
    def __init__(self, outputs: Any = None, error: Exception | None = None) -> None:
        self.outputs = [FAKE_JPEG] if outputs is None else outputs
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def run(self, model: str, input: dict[str, Any]) -> Any:
        self.calls.append((model, input))
        if self.error is not None:
            raise self.error
        return self.outputs


class FakeSpeech:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.texts: list[str] = []

    def __call__(self, **kwargs: Any) -> bytes:
        self.texts.append(kwargs["text"])
        if self.error is not None:
            raise self.error
        return FAKE_MP3


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def replicate_client() -> FakeReplicateClient:
    return FakeReplicateClient()


@pytest.fixture
def speech() -> FakeSpeech:
    return FakeSpeech()


@pytest.fixture
def make_orchestrator(
    document_store: InMemoryDocumentStore,
    object_store: InMemoryObjectStore,
    completion: FakeCompletion,
    replicate_client: FakeReplicateClient,
    speech: FakeSpeech,
) -> Callable[..., ColorStoryOrchestrator]:
    def _factory(
        *,
        completion_fn: FakeCompletion | None = None,
        client: FakeReplicateClient | None = None,
        speech_fn: FakeSpeech | None = None,
    ) -> ColorStoryOrchestrator:
        completion_fn = completion_fn or completion
        return ColorStoryOrchestrator(
            document_store=document_store,
            object_store=object_store,
            narration_generator=NarrationGenerator(
                api_key="test-key",
                model="gemini/gemini-1.5-pro-latest",
                completion_fn=completion_fn,
            ),
            usage_guide_generator=UsageGuideGenerator(
                api_key="test-key",
                model="gemini/gemini-1.5-pro-latest",
                completion_fn=completion_fn,
            ),
            image_generator=ReplicateImageGenerator(
                model_identifier="black-forest-labs/flux-schnell",
                client=client or replicate_client,
            ),
            speech_synthesizer=SpeechSynthesizer(
                api_key="test-key",
                model="openai/tts-1",
                voice="alloy",
                speech_fn=speech_fn or speech,
            ),
        )

    return _factory


@pytest.fixture
def orchestrator(make_orchestrator: Callable[..., ColorStoryOrchestrator]) -> ColorStoryOrchestrator:
    return make_orchestrator()


@pytest.fixture
def story_request() -> dict[str, Any]:
    return {
        "palette": {"items": [{"hex": "#112233"}], "name": "Test"},
        "room": "kitchen",
        "style": "modern",
    }
