import pytest

from conftest import OWNER

from colorstory.common import NotFoundError, PermissionDeniedError, UnauthenticatedError


@pytest.fixture
def parent_id(orchestrator, story_request):
    story_request["vibeWords"] = ["calm"]
    story_request["brandHints"] = ["Benjamin Moore"]
    return orchestrator.generate_story(OWNER, story_request).story_id


def test_variant_inherits_parent_context(orchestrator, document_store, completion, parent_id):
    result = orchestrator.generate_story_variant(
        OWNER,
        {"storyId": parent_id, "emphasis": "evening light", "vibeTweaks": ["cozy", " "]},
    )

    assert result.variant_of == parent_id
    assert result.to_dict() == {"success": True, "storyId": result.story_id, "variantOf": parent_id}

    variant = document_store.get(result.story_id)
    assert variant["variantOf"] == parent_id
    assert variant["status"] == "complete"
    assert variant["progressMessage"] == "Variant ready"
    assert variant["room"] == "kitchen"
    assert variant["style"] == "modern"
    assert variant["brandHints"] == ["Benjamin Moore"]
    assert variant["palette"]["hexes"] == ["#112233"]
    assert variant["vibeWords"] == ["calm", "evening light", "cozy"]
    assert variant["modelAttribution"]["promptVersion"] == "v1-variant"

    assert any("VARIANT with emphasis on: evening light" in prompt for prompt in completion.prompts())


def test_variant_progress_messages_mention_variant(orchestrator, document_store, parent_id):
    result = orchestrator.generate_story_variant(OWNER, {"storyId": parent_id, "emphasis": "warmth"})

    messages = [
        write["progressMessage"]
        for write in document_store.writes_for(result.story_id)
        if "progressMessage" in write
    ]
    assert "Writing variant narration…" in messages
    assert messages[-1] == "Variant ready"


def test_variant_leaves_parent_untouched(orchestrator, document_store, parent_id):
    before = document_store.get(parent_id)

    orchestrator.generate_story_variant(OWNER, {"storyId": parent_id, "emphasis": "warmth"})

    assert document_store.get(parent_id) == before


def test_variant_of_missing_story(orchestrator, document_store):
    with pytest.raises(NotFoundError):
        orchestrator.generate_story_variant(OWNER, {"storyId": "missing"})

    assert document_store.writes == []


def test_variant_requires_ownership(orchestrator, document_store, parent_id):
    writes_before = len(document_store.writes)

    with pytest.raises(PermissionDeniedError):
        orchestrator.generate_story_variant("someone-else", {"storyId": parent_id})

    assert len(document_store.writes) == writes_before


def test_variant_requires_identity(orchestrator, parent_id):
    with pytest.raises(UnauthenticatedError):
        orchestrator.generate_story_variant(None, {"storyId": parent_id})


def test_variant_falls_back_to_usage_guide_colors(orchestrator, document_store):
    document_store.create(
        "legacy-story",
        {
            "ownerId": OWNER,
            "status": "complete",
            "room": "bedroom",
            "usageGuide": [{"hex": "#ABCDEF"}, {"hex": "not-a-hex"}],
        },
    )

    result = orchestrator.generate_story_variant(OWNER, {"storyId": "legacy-story"})

    variant = document_store.get(result.story_id)
    assert variant["palette"]["hexes"] == ["#ABCDEF"]
    assert variant["room"] == "bedroom"
    assert variant["style"] == "modern"
