"""
Workflow assembly – pure data transformation from stories + settings into the
final Workflow, including the posting checklist, upload copy and hashtags.
"""

import re
import unicodedata
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from shorts_workflow import config
from shorts_workflow.domain.models import Settings, SourcePost, Story, Workflow, WorkflowNotes

HASHTAG_CAP = 12

TIMEFRAME_LABELS = {
    "day": "today",
    "week": "this week",
    "month": "this month",
    "year": "this year",
    "all": "of all time",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_hashtag(keyword: str) -> str:
    """'Road Trip!' -> '#roadtrip', 'Café' -> '#café'. Empty string when nothing is left."""
    tag = re.sub(r"[^\w]", "", unicodedata.normalize("NFC", keyword or "").lower())
    return f"#{tag}" if tag else ""


def collect_hashtags(stories: Iterable[Story], cap: int = HASHTAG_CAP) -> List[str]:
    """Deduplicated story keywords as hashtags, first-seen order, at most `cap`."""
    hashtags: List[str] = []
    for story in stories:
        for keyword in story["keywords"]:
            tag = to_hashtag(keyword)
            if tag and tag not in hashtags:
                hashtags.append(tag)
                if len(hashtags) >= cap:
                    return hashtags
    return hashtags


def build_posting_checklist(settings: Settings, stories: Sequence[Story]) -> List[str]:
    count = len(stories)
    plural = "story" if count == 1 else "stories"
    checklist = [
        f"Record the voiceover for {count} {plural} with the {settings['voice_profile']} voice profile, "
        f"keeping each short at {settings['duration']} seconds.",
    ]
    if settings["include_broll"]:
        checklist.append("Generate b-roll clips from each beat's b-roll prompt before editing.")
    else:
        checklist.append("Pick background footage for every beat (b-roll prompts were not requested).")
    checklist.extend([
        "Follow the motion prompts beat by beat and cut on each beat timestamp.",
        "Burn in the captions for every beat and check they stay readable on a phone screen.",
        f"Render each thumbnail prompt as a {config.VIDEO_WIDTH}x{config.VIDEO_HEIGHT} vertical cover frame.",
        "Lay the soundtrack prompt's track under the narration and duck it below the voice.",
        f"Credit the original r/{settings['subreddit']} thread and confirm it is still up before posting.",
        "Paste the upload copy and hashtags into the Shorts description.",
    ])
    if count > 1:
        checklist.append(f"Schedule the {count} uploads a few hours apart instead of posting them at once.")
    return checklist


def build_upload_copy(
    settings: Settings,
    stories: Sequence[Story],
    posts: Optional[Sequence[SourcePost]] = None,
) -> str:
    """Summary of every story hook, source credits, and a closing call to action."""
    timeframe = TIMEFRAME_LABELS.get(settings["timeframe"], settings["timeframe"])
    count = len(stories)
    plural = "story" if count == 1 else "stories"
    lines = [f"{count} {plural} from r/{settings['subreddit']} {timeframe}:"]
    for i, story in enumerate(stories, 1):
        lines.append(f"{i}. {story['hook']}")
    sources = [post.get("url", "") for post in posts or () if post.get("url")]
    if sources:
        lines.append("")
        lines.append("Original threads:")
        lines.extend(sources)
    closing = stories[0]["call_to_action"] if stories else f"Follow for more r/{settings['subreddit']} stories."
    return "\n".join(lines) + "\n\n" + closing


def assemble_workflow(
    settings: Settings,
    stories: Sequence[Story],
    posts: Optional[Sequence[SourcePost]] = None,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> Workflow:
    """
    Combine settings and stories into a Workflow. No I/O, no generation calls.
    `posts` are the selected source posts, credited in the upload copy.
    """
    stories = list(stories)
    notes = WorkflowNotes(
        posting_checklist=build_posting_checklist(settings, stories),
        upload_copy=build_upload_copy(settings, stories, posts),
        hashtags=collect_hashtags(stories),
    )
    return Workflow(
        generated_at=clock().isoformat(),
        settings=dict(settings),
        stories=stories,
        notes=notes,
    )
