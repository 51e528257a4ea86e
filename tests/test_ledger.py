import logging

from colorstory.pipeline import StorySession
from colorstory.storage import InMemoryDocumentStore


class ExplodingStore(InMemoryDocumentStore):
    def merge(self, doc_id, data):
        raise RuntimeError("store offline")


def test_write_progress_merges_only_ledger_fields():
    store = InMemoryDocumentStore()
    session = StorySession(store, "s1")
    session.create({"ownerId": "u1", "status": "processing", "progress": 0.1, "narration": "kept"})

    session.write_progress("processing", 0.3, "Writing narration…")

    last_write = store.writes_for("s1")[-1]
    assert set(last_write) == {"status", "progress", "progressMessage", "updatedAt"}
    document = store.get("s1")
    assert document["narration"] == "kept"
    assert document["progress"] == 0.3
    assert session.progress == 0.3


def test_fail_holds_last_progress():
    store = InMemoryDocumentStore()
    session = StorySession(store, "s1")
    session.create({"status": "processing", "progress": 0.1})
    session.write_progress("processing", 0.9, "Mixing audio…")

    session.fail("speech endpoint down")

    document = store.get("s1")
    assert document["status"] == "error"
    assert document["progress"] == 0.9
    assert document["progressMessage"] == "speech endpoint down"


def test_fail_swallows_secondary_write_errors(caplog):
    session = StorySession(ExplodingStore(), "s1", progress=0.5)

    with caplog.at_level(logging.ERROR):
        session.fail("original problem")

    assert "Failed to write error progress" in caplog.text


def test_progress_callback_receives_updates():
    events = []
    session = StorySession(
        InMemoryDocumentStore(),
        "s1",
        progress_callback=lambda event, payload: events.append((event, payload)),
    )
    session.create({"status": "processing", "progress": 0.1, "progressMessage": "Starting…"})
    session.write_progress("complete", 1.0, "Story ready")

    assert [event for event, _ in events] == ["story:created", "story:progress"]
    assert events[-1][1]["progress"] == 1.0
    assert events[-1][1]["story_id"] == "s1"


def test_degraded_stage_bookkeeping():
    session = StorySession(InMemoryDocumentStore(), "s1", degraded_stages=["hero"])

    session.record_stage_outcome("usage-guide", degraded=True)
    session.record_stage_outcome("hero", degraded=False)

    assert session.degraded_stages == ["usage-guide"]
