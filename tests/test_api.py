import pytest

from conftest import OWNER

from colorstory import dispatch


def test_generate_story_returns_story_id(orchestrator, document_store, story_request):
    response = dispatch(orchestrator, "generateStory", OWNER, story_request)

    assert set(response) == {"storyId"}
    assert document_store.get(response["storyId"])["status"] == "complete"


@pytest.mark.parametrize(
    "operation, payload",
    [
        ("generateStory", {"palette": {"items": [{"hex": "#112233"}]}, "room": "den", "style": "boho"}),
        ("generateStoryVariant", {"storyId": "abc"}),
        ("retryStoryStep", {"storyId": "abc", "step": "hero"}),
    ],
)
def test_missing_identity_is_unauthenticated(orchestrator, document_store, operation, payload):
    response = dispatch(orchestrator, operation, None, payload)

    assert response["error"]["code"] == "unauthenticated"
    assert document_store.writes == []


def test_bad_palette_is_invalid_argument(orchestrator):
    response = dispatch(orchestrator, "generateStory", OWNER, {"colors": [], "room": "den", "style": "boho"})

    assert response["error"]["code"] == "invalid-argument"
    assert "palette.items[]" in response["error"]["message"]


def test_not_found_carries_story_id(orchestrator):
    response = dispatch(orchestrator, "generateStoryVariant", OWNER, {"storyId": "ghost"})

    assert response["error"] == {
        "code": "not-found",
        "message": "Story not found.",
        "details": {"storyId": "ghost"},
    }


def test_variant_and_retry_success_payloads(orchestrator, story_request):
    story_id = dispatch(orchestrator, "generateStory", OWNER, story_request)["storyId"]

    variant = dispatch(orchestrator, "generateStoryVariant", OWNER, {"storyId": story_id, "emphasis": "light"})
    retry = dispatch(orchestrator, "retryStoryStep", OWNER, {"storyId": story_id, "step": "audio"})

    assert variant["success"] is True
    assert variant["variantOf"] == story_id
    assert retry["message"] == "audio step completed successfully"


def test_unknown_operation(orchestrator):
    response = dispatch(orchestrator, "deleteStory", OWNER, {})

    assert response["error"]["code"] == "invalid-argument"


def test_unexpected_exception_is_internal(orchestrator, document_store, monkeypatch):
    def broken_get(doc_id):
        raise RuntimeError("datastore unreachable")

    monkeypatch.setattr(document_store, "get", broken_get)

    response = dispatch(orchestrator, "retryStoryStep", OWNER, {"storyId": "abc", "step": "hero"})

    assert response["error"]["code"] == "internal"
    assert "datastore unreachable" in response["error"]["message"]
