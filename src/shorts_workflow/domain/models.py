"""Domain models – plain dicts so a Workflow serializes straight to JSON."""

from enum import Enum
from typing import List, Optional, TypedDict

# Body/title placeholders Reddit leaves on moderated or deleted posts
REMOVED_MARKERS = ("[removed]", "[deleted]")


class Settings(TypedDict):
    """Validated production settings for one request."""
    subreddit: str
    timeframe: str  # 'day' | 'week' | 'month' | 'year' | 'all'
    story_count: int
    duration: int  # seconds
    voice_profile: str  # 'narrator' | 'friendly' | 'dramatic'
    include_broll: bool


class SourcePost(TypedDict, total=False):
    """A candidate Reddit post. Owned by the post source, read-only here."""
    id: str
    title: str
    url: str
    body_text: str
    score: int
    author: str
    num_comments: int
    removed: bool


class Beat(TypedDict, total=False):
    """One timed segment of a story script. broll_prompt only when b-roll is on."""
    timestamp: int
    duration: int
    headline: str
    voiceover: str
    motion_prompt: str
    broll_prompt: str
    captions: List[str]


class Story(TypedDict):
    """A complete short-form script derived from one source post."""
    id: str
    title: str
    source_url: str
    hook: str
    beats: List[Beat]
    call_to_action: str
    soundtrack_prompt: str
    thumbnail_prompt: str
    keywords: List[str]


class WorkflowNotes(TypedDict):
    posting_checklist: List[str]
    upload_copy: str
    hashtags: List[str]


class Workflow(TypedDict):
    """Aggregate response: all stories plus publishing metadata."""
    generated_at: str
    settings: Settings
    stories: List[Story]
    notes: WorkflowNotes


class BeatSlot(TypedDict):
    """A time slot produced by the beat allocator, before any text is attached."""
    index: int
    timestamp: int
    duration: int


class FieldKind(str, Enum):
    """Closed set of fields the generation capability can be asked for."""
    HOOK = "hook"
    CALL_TO_ACTION = "call_to_action"
    SOUNDTRACK_PROMPT = "soundtrack_prompt"
    THUMBNAIL_PROMPT = "thumbnail_prompt"
    KEYWORDS = "keywords"
    BEAT_HEADLINE = "beat_headline"
    BEAT_VOICEOVER = "beat_voiceover"
    BEAT_MOTION_PROMPT = "beat_motion_prompt"
    BEAT_BROLL_PROMPT = "beat_broll_prompt"
    BEAT_CAPTIONS = "beat_captions"

    @property
    def is_beat_field(self) -> bool:
        return self.value.startswith("beat_")


STORY_FIELD_KINDS = (
    FieldKind.HOOK,
    FieldKind.CALL_TO_ACTION,
    FieldKind.SOUNDTRACK_PROMPT,
    FieldKind.THUMBNAIL_PROMPT,
    FieldKind.KEYWORDS,
)


class GenerationContext(TypedDict, total=False):
    """What the generator sees for one request: post text, settings, and beat slot."""
    title: str
    body_text: str
    subreddit: str
    voice_profile: str
    include_broll: bool
    duration: int
    beat_index: Optional[int]
    beat_count: int
    timestamp: int
    beat_duration: int
    narration: str  # slice of source text this beat covers
    deadline: float  # time.monotonic() value after which results are discarded
