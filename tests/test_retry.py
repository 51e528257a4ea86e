import pytest

from conftest import OWNER, FakeCompletion, FakeSpeech, usage_guide_json

from colorstory.common import InternalError, InvalidArgumentError, NotFoundError, PermissionDeniedError


@pytest.fixture
def story_id(orchestrator, story_request):
    return orchestrator.generate_story(OWNER, story_request).story_id


def test_retry_on_complete_story_keeps_status(orchestrator, document_store, replicate_client, story_id):
    writes_before = len(document_store.writes_for(story_id))

    result = orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": "hero"})

    assert result.to_dict() == {
        "success": True,
        "storyId": story_id,
        "step": "hero",
        "message": "hero step completed successfully",
    }
    story = document_store.get(story_id)
    assert story["status"] == "complete"
    assert story["progress"] == 1.0
    new_writes = document_store.writes_for(story_id)[writes_before:]
    assert all("status" not in write for write in new_writes)
    assert len(replicate_client.calls) == 2


def test_retry_on_errored_story_restores_prior_status(orchestrator, document_store, story_id):
    document_store.merge(story_id, {"status": "error", "progress": 0.9, "progressMessage": "boom"})

    orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": "audio"})

    story = document_store.get(story_id)
    assert story["status"] == "error"
    assert story["progress"] == 0.95
    assert story["progressMessage"] == "audio step completed"
    trail = [
        (w["status"], w["progressMessage"])
        for w in document_store.writes_for(story_id)
        if "progressMessage" in w
    ]
    assert trail[-2:] == [("processing", "Retrying audio…"), ("error", "audio step completed")]


def test_retry_narration_uses_retry_prompt_version(orchestrator, document_store, story_id):
    orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": "narration"})

    assert document_store.get(story_id)["modelAttribution"]["promptVersion"] == "v1-retry"


def test_retry_rebuilds_context_from_document(orchestrator, completion, story_id):
    orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": "usage-guide"})

    prompt = completion.prompts()[-1]
    assert "room=kitchen" in prompt
    assert "#112233" in prompt


@pytest.mark.parametrize(
    "alias, canonical",
    [("writing", "narration"), ("usage", "usage-guide"), ("HERO", "hero")],
)
def test_retry_accepts_step_aliases(orchestrator, story_id, alias, canonical):
    result = orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": alias})

    assert result.step == canonical


def test_successful_retry_clears_degraded_stage(make_orchestrator, document_store, story_request):
    broken = make_orchestrator(completion_fn=FakeCompletion(usage_guide=usage_guide_json(2)))
    story_id = broken.generate_story(OWNER, story_request).story_id
    assert document_store.get(story_id)["degradedStages"] == ["usage-guide"]

    healthy = make_orchestrator(completion_fn=FakeCompletion())
    healthy.retry_story_step(OWNER, {"storyId": story_id, "step": "usage-guide"})

    story = document_store.get(story_id)
    assert len(story["usageGuide"]) == 4
    assert story["degradedStages"] == []


def test_failed_audio_retry_records_error(make_orchestrator, document_store, story_id):
    failing = make_orchestrator(speech_fn=FakeSpeech(error=RuntimeError("voice unavailable")))

    with pytest.raises(InternalError, match="audio retry failed: voice unavailable"):
        failing.retry_story_step(OWNER, {"storyId": story_id, "step": "audio"})

    story = document_store.get(story_id)
    assert story["status"] == "error"
    assert story["progress"] == 0.9
    assert story["progressMessage"] == "audio retry failed: voice unavailable"


def test_unknown_step_is_rejected(orchestrator, document_store, story_id):
    writes_before = len(document_store.writes)

    with pytest.raises(InvalidArgumentError) as excinfo:
        orchestrator.retry_story_step(OWNER, {"storyId": story_id, "step": "framing"})

    message = excinfo.value.message
    for step in ("narration", "usage-guide", "hero", "audio"):
        assert step in message
    assert len(document_store.writes) == writes_before


def test_non_owner_cannot_retry(orchestrator, document_store, story_id):
    writes_before = len(document_store.writes)

    with pytest.raises(PermissionDeniedError):
        orchestrator.retry_story_step("intruder", {"storyId": story_id, "step": "framing"})

    assert len(document_store.writes) == writes_before


def test_retry_missing_story(orchestrator):
    with pytest.raises(NotFoundError):
        orchestrator.retry_story_step(OWNER, {"storyId": "nope", "step": "hero"})


def test_retry_requires_story_id_and_step(orchestrator):
    with pytest.raises(InvalidArgumentError, match="storyId and step are required"):
        orchestrator.retry_story_step(OWNER, {"storyId": "abc"})
