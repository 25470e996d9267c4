"""
Fallback content – deterministic, built only from the post and settings.
Used whenever a generation call fails or returns something unusable.
"""

from typing import List

from shorts_workflow import config
from shorts_workflow.application.text import (
    extract_keywords,
    first_sentence,
    truncate_words,
    wrap_captions,
)
from shorts_workflow.domain.models import GenerationContext

HOOK_MAX_CHARS = 90
SHORT_TITLE_CHARS = 48
MIN_VOICEOVER_CHARS = 12

_CTA_TEMPLATES = {
    "narrator": "Follow for the next story from r/{subreddit}.",
    "friendly": "What would you have done? Tell me in the comments and follow for more r/{subreddit} stories!",
    "dramatic": "Follow now. The next r/{subreddit} story is even wilder.",
}

_SOUNDTRACK_MOODS = {
    "narrator": "Calm, steady lo-fi underscore with soft piano and light percussion",
    "friendly": "Upbeat, warm acoustic groove with claps and a bright ukulele lead",
    "dramatic": "Tense cinematic build with low strings, pulsing synths and a hard hit on the reveal",
}

_CAMERA_MOVES = {
    "narrator": ("Slow push-in", "Gentle lateral pan", "Steady pull-back to a wide frame"),
    "friendly": ("Handheld bounce-in", "Quick whip pan", "Playful zoom-out with a smile beat"),
    "dramatic": ("Slow creeping dolly-in", "Dutch-angle drift with hard shadows", "Snap zoom on the reveal"),
}

_BEAT_LABELS = ("The setup", "The build", "The twist", "The payoff")


def short_title(context: GenerationContext, max_chars: int = SHORT_TITLE_CHARS) -> str:
    title = context.get("title") or first_sentence(context.get("body_text", ""))
    return truncate_words(title, max_chars) or f"a story from r/{context.get('subreddit', 'reddit')}"


def _position(context: GenerationContext) -> int:
    """0 = opening beat, 2 = closing beat, 1 = anything in between."""
    index = context.get("beat_index") or 0
    total = context.get("beat_count") or 1
    if index == 0:
        return 0
    if index >= total - 1:
        return 2
    return 1


def fallback_hook(context: GenerationContext) -> str:
    title = context.get("title", "")
    if title:
        return truncate_words(title, HOOK_MAX_CHARS)
    return truncate_words(first_sentence(context.get("body_text", "")), HOOK_MAX_CHARS)


def fallback_call_to_action(context: GenerationContext) -> str:
    template = _CTA_TEMPLATES.get(context.get("voice_profile", ""), _CTA_TEMPLATES["narrator"])
    return template.format(subreddit=context.get("subreddit", "reddit"))


def fallback_soundtrack_prompt(context: GenerationContext) -> str:
    mood = _SOUNDTRACK_MOODS.get(context.get("voice_profile", ""), _SOUNDTRACK_MOODS["narrator"])
    return f"{mood}, {context.get('duration', 60)} seconds, no vocals, loopable."


def fallback_thumbnail_prompt(context: GenerationContext) -> str:
    return (
        f"Vertical 9:16 ({config.VIDEO_WIDTH}x{config.VIDEO_HEIGHT}) thumbnail: bold close-up reaction "
        f"shot illustrating \"{short_title(context)}\", high contrast, saturated colors, no text."
    )


def fallback_keywords(context: GenerationContext) -> List[str]:
    keywords = extract_keywords(context.get("title", ""))
    if len(keywords) < 3:
        for word in extract_keywords(context.get("body_text", "")):
            if word not in keywords:
                keywords.append(word)
            if len(keywords) >= 6:
                break
    return keywords or [context.get("subreddit", "reddit").lower()]


def beat_label(context: GenerationContext) -> str:
    index = context.get("beat_index") or 0
    total = context.get("beat_count") or 1
    if index == 0:
        return _BEAT_LABELS[0]
    if index >= total - 1:
        return _BEAT_LABELS[-1]
    if index == total - 2:
        return _BEAT_LABELS[2]
    return _BEAT_LABELS[1]


def fallback_beat_headline(context: GenerationContext) -> str:
    return f"{beat_label(context)}: {short_title(context, 40)}"


def fallback_beat_voiceover(context: GenerationContext) -> str:
    """The beat's narration slice, else the title or opening sentence, never shorter than MIN_VOICEOVER_CHARS."""
    candidates = (
        context.get("narration", ""),
        context.get("title", ""),
        first_sentence(context.get("body_text", "")),
    )
    for candidate in candidates:
        if len(candidate or "") >= MIN_VOICEOVER_CHARS:
            return candidate
    return f"{beat_label(context)} of this r/{context.get('subreddit', 'reddit')} story: {short_title(context)}"


def fallback_beat_motion_prompt(context: GenerationContext) -> str:
    moves = _CAMERA_MOVES.get(context.get("voice_profile", ""), _CAMERA_MOVES["narrator"])
    move = moves[_position(context)]
    return f"{move} over a vertical frame, {context.get('beat_duration', 0)}s, matching \"{short_title(context, 40)}\"."


def fallback_beat_broll_prompt(context: GenerationContext, voiceover: str) -> str:
    subject = truncate_words(voiceover, 60) or short_title(context)
    return f"Stock-style vertical b-roll illustrating: {subject}"


def fallback_beat_captions(voiceover: str) -> List[str]:
    return wrap_captions(voiceover)
