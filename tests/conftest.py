from __future__ import annotations

import threading
from typing import Any, Dict, Iterable, List, Optional

import pytest

from shorts_workflow.domain.models import FieldKind, GenerationContext, Settings, SourcePost
from shorts_workflow.ports.interfaces import IFieldGenerator, IPostSource

CANNED = {
    FieldKind.HOOK: "You won't believe what my neighbor did next",
    FieldKind.CALL_TO_ACTION: "Follow for part two and tell me who was wrong!",
    FieldKind.SOUNDTRACK_PROMPT: "Moody synthwave at 90 bpm with soft drums",
    FieldKind.THUMBNAIL_PROMPT: "Vertical close-up of a shocked face lit by a phone screen",
    FieldKind.KEYWORDS: "Neighbors, revenge, parking",
    FieldKind.BEAT_MOTION_PROMPT: "Slow push-in on the subject",
    FieldKind.BEAT_BROLL_PROMPT: "Rainy city street at night, neon reflections",
    FieldKind.BEAT_CAPTIONS: "- Line one\n- Line two",
}


class FakeFieldGenerator(IFieldGenerator):
    """Deterministic answers for every field; records each call."""

    def __init__(self, overrides: Optional[Dict[FieldKind, Any]] = None):
        self.overrides = overrides or {}
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        with self._lock:
            self.calls.append((kind, context.get("title"), context.get("beat_index")))
        if kind in self.overrides:
            value = self.overrides[kind]
            if isinstance(value, Exception):
                raise value
            return value
        if kind is FieldKind.BEAT_HEADLINE:
            return f"Beat {context['beat_index'] + 1}"
        if kind is FieldKind.BEAT_VOICEOVER:
            return f"Voiceover for beat {context['beat_index'] + 1}: {context['title']}"
        return CANNED[kind]

    def kinds_called(self) -> set:
        return {kind for kind, _, _ in self.calls}


class FailingFieldGenerator(IFieldGenerator):
    """Every call fails."""

    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        raise RuntimeError("generation service unavailable")


class FailingKindsGenerator(FakeFieldGenerator):
    """Fails only the given kinds."""

    def __init__(self, kinds: Iterable[FieldKind]):
        super().__init__({kind: RuntimeError(f"{kind.value} failed") for kind in kinds})


class BlockingKindsGenerator(FakeFieldGenerator):
    """Blocks the given kinds until `release` is set."""

    def __init__(self, kinds: Iterable[FieldKind]):
        super().__init__()
        self.blocked = set(kinds)
        self.release = threading.Event()

    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        if kind in self.blocked:
            self.release.wait(5)
        return super().generate_field(kind, context)


class FakePostSource(IPostSource):
    def __init__(self, posts: List[SourcePost]):
        self.posts = posts
        self.requests: List[tuple] = []

    def fetch_top_posts(self, subreddit: str, timeframe: str, limit: int = 10) -> List[SourcePost]:
        self.requests.append((subreddit, timeframe, limit))
        return self.posts[:limit]


def make_post(post_id: str, title: str, body: str = "", **extra) -> SourcePost:
    post = SourcePost(
        id=post_id,
        title=title,
        url=f"https://www.reddit.com/r/AskReddit/comments/{post_id}/",
        body_text=body,
        score=100,
    )
    post.update(extra)
    return post


LONG_BODY = (
    "So last week my neighbor started parking his truck across my driveway every single morning. "
    "I asked nicely twice and left a note, but nothing changed. Then I found out he had been "
    "renting my spot to his cousin for twenty dollars a week. I called the city, they towed the "
    "truck, and the cousin showed up at my door demanding a refund. We are not friends anymore."
)


@pytest.fixture
def posts() -> List[SourcePost]:
    return [
        make_post("abc1", "My neighbor rented out my parking spot", LONG_BODY),
        make_post("abc2", "The wedding speech that ended a friendship", "It started with a toast. " * 20),
        make_post("abc3", "I accidentally joined a cult for a week", "Short body."),
    ]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        subreddit="AskReddit",
        timeframe="week",
        story_count=2,
        duration=45,
        voice_profile="narrator",
        include_broll=True,
    )


@pytest.fixture
def raw_settings() -> Dict[str, Any]:
    return {
        "subreddit": "AskReddit",
        "timeframe": "week",
        "storyCount": "2",
        "duration": "40",
        "voiceProfile": "dramatic",
        "includeBroll": True,
    }
