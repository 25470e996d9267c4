import json
import time
from datetime import datetime, timedelta, timezone

import pytest

from shorts_workflow.application.pipeline import WorkflowPipeline
from shorts_workflow.domain.errors import InvalidSettings, NoUsableContent, PipelineError
from shorts_workflow.domain.models import FieldKind
from shorts_workflow.domain.serialization import workflow_to_payload

from conftest import (
    FailingFieldGenerator,
    FailingKindsGenerator,
    FakeFieldGenerator,
    FakePostSource,
    make_post,
)


def _sum(story):
    return sum(beat["duration"] for beat in story["beats"])


def test_two_stories_forty_seconds(raw_settings, posts):
    workflow = WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, posts[:2])

    assert len(workflow["stories"]) == 2
    for story in workflow["stories"]:
        assert _sum(story) == 40
        assert story["beats"][0]["timestamp"] == 0


def test_single_usable_post_gives_single_story(raw_settings):
    raw_settings["storyCount"] = 3
    candidates = [make_post("x", "", ""), make_post("ok", "Only one usable", "body"), make_post("y", "[deleted]", "")]
    workflow = WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, candidates)
    assert len(workflow["stories"]) == 1
    assert workflow["stories"][0]["id"] == "ok-1"


def test_no_usable_posts(raw_settings):
    with pytest.raises(NoUsableContent):
        WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, [make_post("x", " ", "")])


def test_invalid_settings_cross_the_boundary(raw_settings, posts):
    raw_settings["duration"] = 90
    raw_settings["voiceProfile"] = "whisper"
    with pytest.raises(InvalidSettings) as exc_info:
        WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, posts)
    assert set(exc_info.value.field_errors) == {"duration", "voiceProfile"}
    assert isinstance(exc_info.value, PipelineError)


def test_broll_failures_are_filled_from_fallback(raw_settings, posts):
    generator = FailingKindsGenerator([FieldKind.BEAT_BROLL_PROMPT])
    workflow = WorkflowPipeline(field_generator=generator).generate(raw_settings, posts[:2])
    for story in workflow["stories"]:
        assert all(beat.get("broll_prompt") for beat in story["beats"])


def test_no_broll_anywhere_when_disabled(raw_settings, posts):
    raw_settings["includeBroll"] = "false"
    workflow = WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, posts)
    assert all("broll_prompt" not in beat for story in workflow["stories"] for beat in story["beats"])
    payload = workflow_to_payload(workflow)
    assert all("brollPrompt" not in beat for story in payload["stories"] for beat in story["beats"])


def test_everything_failing_still_produces_workflow(raw_settings, posts):
    workflow = WorkflowPipeline(field_generator=FailingFieldGenerator()).generate(raw_settings, posts[:2])
    assert len(workflow["stories"]) == 2
    for story in workflow["stories"]:
        assert story["hook"]
        assert story["call_to_action"]
        assert any(beat["voiceover"] for beat in story["beats"])
    assert workflow["notes"]["upload_copy"]
    assert workflow["notes"]["hashtags"]


def test_output_is_identical_apart_from_generated_at(raw_settings, posts):
    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    first = WorkflowPipeline(field_generator=FakeFieldGenerator(), clock=lambda: t0).generate(raw_settings, posts)
    second = WorkflowPipeline(
        field_generator=FakeFieldGenerator(), clock=lambda: t0 + timedelta(minutes=5)
    ).generate(raw_settings, posts)

    a, b = workflow_to_payload(first), workflow_to_payload(second)
    assert a["generatedAt"] != b["generatedAt"]
    a.pop("generatedAt")
    b.pop("generatedAt")
    assert json.dumps(a, sort_keys=True) == json.dumps(b, sort_keys=True)


class ReverseDelayGenerator(FakeFieldGenerator):
    """Earlier posts answer last, so completion order is the reverse of selection order."""

    def generate_field(self, kind, context):
        if context["title"].startswith("My neighbor"):
            time.sleep(0.05)
        return super().generate_field(kind, context)


def test_story_order_follows_selection_order(raw_settings, posts):
    raw_settings["storyCount"] = 3
    workflow = WorkflowPipeline(field_generator=ReverseDelayGenerator(), max_workers=4).generate(raw_settings, posts)
    assert [s["id"] for s in workflow["stories"]] == ["abc1-1", "abc2-2", "abc3-3"]


def test_run_fetches_twice_the_story_count(raw_settings, posts):
    source = FakePostSource(posts)
    workflow = WorkflowPipeline(field_generator=FakeFieldGenerator(), post_source=source).run(raw_settings)
    assert source.requests == [("AskReddit", "week", 4)]
    assert len(workflow["stories"]) == 2


def test_run_with_empty_source(raw_settings):
    pipeline = WorkflowPipeline(field_generator=FakeFieldGenerator(), post_source=FakePostSource([]))
    with pytest.raises(NoUsableContent):
        pipeline.run(raw_settings)


def test_run_validates_before_fetching(raw_settings, posts):
    source = FakePostSource(posts)
    raw_settings["timeframe"] = "hour"
    with pytest.raises(InvalidSettings):
        WorkflowPipeline(field_generator=FakeFieldGenerator(), post_source=source).run(raw_settings)
    assert source.requests == []


def test_payload_uses_wire_names(raw_settings, posts):
    workflow = WorkflowPipeline(field_generator=FakeFieldGenerator()).generate(raw_settings, posts[:1])
    payload = workflow_to_payload(workflow)
    assert payload["settings"] == {
        "subreddit": "AskReddit",
        "timeframe": "week",
        "storyCount": 2,
        "duration": 40,
        "voiceProfile": "dramatic",
        "includeBroll": True,
    }
    story = payload["stories"][0]
    assert set(story) == {
        "id", "title", "sourceUrl", "hook", "beats", "callToAction",
        "soundtrackPrompt", "thumbnailPrompt", "keywords",
    }
    assert set(story["beats"][0]) == {
        "timestamp", "duration", "headline", "voiceover", "motionPrompt", "brollPrompt", "captions",
    }
    assert set(payload["notes"]) == {"postingChecklist", "uploadCopy", "hashtags"}
