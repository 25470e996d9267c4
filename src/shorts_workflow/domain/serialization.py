"""Wire form: the camelCase JSON payload the web client consumes."""

from typing import Any, Dict

from shorts_workflow.domain.models import Beat, Settings, Story, Workflow


def settings_to_payload(settings: Settings) -> Dict[str, Any]:
    return {
        "subreddit": settings["subreddit"],
        "timeframe": settings["timeframe"],
        "storyCount": settings["story_count"],
        "duration": settings["duration"],
        "voiceProfile": settings["voice_profile"],
        "includeBroll": settings["include_broll"],
    }


def beat_to_payload(beat: Beat) -> Dict[str, Any]:
    payload = {
        "timestamp": beat["timestamp"],
        "duration": beat["duration"],
        "headline": beat["headline"],
        "voiceover": beat["voiceover"],
        "motionPrompt": beat["motion_prompt"],
    }
    if "broll_prompt" in beat:
        payload["brollPrompt"] = beat["broll_prompt"]
    payload["captions"] = list(beat["captions"])
    return payload


def story_to_payload(story: Story) -> Dict[str, Any]:
    return {
        "id": story["id"],
        "title": story["title"],
        "sourceUrl": story["source_url"],
        "hook": story["hook"],
        "beats": [beat_to_payload(b) for b in story["beats"]],
        "callToAction": story["call_to_action"],
        "soundtrackPrompt": story["soundtrack_prompt"],
        "thumbnailPrompt": story["thumbnail_prompt"],
        "keywords": list(story["keywords"]),
    }


def workflow_to_payload(workflow: Workflow) -> Dict[str, Any]:
    """Convert a Workflow into the JSON-ready dict returned at the transport boundary."""
    notes = workflow["notes"]
    return {
        "generatedAt": workflow["generated_at"],
        "settings": settings_to_payload(workflow["settings"]),
        "stories": [story_to_payload(s) for s in workflow["stories"]],
        "notes": {
            "postingChecklist": list(notes["posting_checklist"]),
            "uploadCopy": notes["upload_copy"],
            "hashtags": list(notes["hashtags"]),
        },
    }
