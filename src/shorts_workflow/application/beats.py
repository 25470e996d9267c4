"""
Beat allocation – split a story's target duration into contiguous beats.

Beat count rule: one beat per ~10 seconds, rounded half-up, clamped to [3, 8]:
    k = clamp((duration + 5) // 10, 3, 8)
Slot lengths: duration // k each, plus one extra second on the first
duration % k beats, so the slots always sum to duration exactly.
"""

from typing import List, Optional, Sequence

from shorts_workflow.application.text import collapse_whitespace
from shorts_workflow.domain.errors import UnexpectedPipelineFault
from shorts_workflow.domain.models import REMOVED_MARKERS, BeatSlot, GenerationContext, Settings, SourcePost

SECONDS_PER_BEAT = 10
MIN_BEATS = 3
MAX_BEATS = 8
WORDS_PER_SECOND = 2.5  # comfortable narration pace
MIN_SLICE_WORDS = 4


def beat_count(duration: int) -> int:
    return max(MIN_BEATS, min(MAX_BEATS, (duration + SECONDS_PER_BEAT // 2) // SECONDS_PER_BEAT))


def allocate_slots(duration: int, count: Optional[int] = None) -> List[BeatSlot]:
    """Partition [0, duration) into `count` contiguous whole-second slots."""
    k = count if count is not None else beat_count(duration)
    if k < 1 or duration < k:
        raise UnexpectedPipelineFault(f"cannot split {duration}s into {k} beats")

    base, extra = divmod(duration, k)
    slots: List[BeatSlot] = []
    timestamp = 0
    for i in range(k):
        length = base + (1 if i < extra else 0)
        slots.append(BeatSlot(index=i, timestamp=timestamp, duration=length))
        timestamp += length

    check_beat_invariants(slots, duration)
    return slots


def check_beat_invariants(beats: Sequence, duration: int) -> None:
    """Raise UnexpectedPipelineFault unless beats start at 0, are contiguous and sum to duration."""
    if not beats:
        raise UnexpectedPipelineFault("story has no beats")
    if beats[0]["timestamp"] != 0:
        raise UnexpectedPipelineFault(f"first beat starts at {beats[0]['timestamp']}s, expected 0")
    for prev, cur in zip(beats, beats[1:]):
        if cur["timestamp"] != prev["timestamp"] + prev["duration"]:
            raise UnexpectedPipelineFault(
                f"beat at {cur['timestamp']}s does not follow beat at {prev['timestamp']}s+{prev['duration']}s"
            )
    for beat in beats:
        if beat["duration"] <= 0:
            raise UnexpectedPipelineFault(f"beat at {beat['timestamp']}s has non-positive duration")
    total = sum(beat["duration"] for beat in beats)
    if total != duration:
        raise UnexpectedPipelineFault(f"beat durations sum to {total}s, expected {duration}s")


def post_text(post: SourcePost, key: str) -> str:
    """Whitespace-collapsed title or body; removed/deleted markers read as empty."""
    text = collapse_whitespace(post.get(key) or "")
    return "" if text.lower() in REMOVED_MARKERS else text


def narration_text(post: SourcePost) -> str:
    """Title followed by body, as one block of narration."""
    title = post_text(post, "title")
    body = post_text(post, "body_text")
    if title and body:
        separator = " " if title[-1] in ".!?" else ". "
        return f"{title}{separator}{body}"
    return title or body


def split_narration(text: str, slots: Sequence[BeatSlot], duration: int) -> List[str]:
    """
    Cut the narration to what fits in `duration` and split it across slots
    in proportion to each slot's length. Texts too short to give every slot
    MIN_SLICE_WORDS words fill the leading slots in chunks of at least that
    size and leave later slices empty.
    """
    words = text.split()
    budget = max(int(duration * WORDS_PER_SECOND), len(slots))
    words = words[:budget]

    if len(words) < MIN_SLICE_WORDS * len(slots):
        filled = max(1, len(words) // MIN_SLICE_WORDS)
        chunks = [" ".join(words[i * MIN_SLICE_WORDS:(i + 1) * MIN_SLICE_WORDS]) for i in range(filled - 1)]
        chunks.append(" ".join(words[(filled - 1) * MIN_SLICE_WORDS:]))
        return chunks + [""] * (len(slots) - filled)

    slices = []
    elapsed = 0
    start = 0
    for slot in slots:
        elapsed += slot["duration"]
        end = round(len(words) * elapsed / duration)
        slices.append(" ".join(words[start:end]))
        start = end
    return slices


def story_context(post: SourcePost, settings: Settings, beat_total: int) -> GenerationContext:
    return GenerationContext(
        title=post_text(post, "title"),
        body_text=post_text(post, "body_text"),
        subreddit=settings["subreddit"],
        voice_profile=settings["voice_profile"],
        include_broll=settings["include_broll"],
        duration=settings["duration"],
        beat_index=None,
        beat_count=beat_total,
    )


def beat_requests(post: SourcePost, settings: Settings, slots: Sequence[BeatSlot]) -> List[GenerationContext]:
    """One generation context per beat slot, carrying the narration slice for that beat."""
    base = story_context(post, settings, len(slots))
    slices = split_narration(narration_text(post), slots, settings["duration"])
    contexts = []
    for slot, narration in zip(slots, slices):
        context = GenerationContext(**base)
        context.update(
            beat_index=slot["index"],
            timestamp=slot["timestamp"],
            beat_duration=slot["duration"],
            narration=narration,
        )
        contexts.append(context)
    return contexts
