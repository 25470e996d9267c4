"""IFieldGenerator adapters: LLM-backed prompts per field, and an offline generator."""

from typing import Any, Dict, Optional

from shorts_workflow.adapters.llm_client import LLMClient, LLMError
from shorts_workflow.domain.errors import FieldGenerationFailure
from shorts_workflow.domain.models import FieldKind, GenerationContext
from shorts_workflow.ports.interfaces import IFieldGenerator

VOICE_STYLES = {
    "narrator": "calm, clear storyteller who lets the details land",
    "friendly": "warm, chatty friend talking straight to camera",
    "dramatic": "high-tension narrator who builds suspense and hits the reveal hard",
}

# Per-kind instruction and token budget
FIELD_PROMPTS: Dict[FieldKind, Dict[str, Any]] = {
    FieldKind.HOOK: {
        "task": "Write ONE opening line (max 15 words) that makes viewers stop scrolling. No emojis, no hashtags.",
        "num_predict": 60,
    },
    FieldKind.CALL_TO_ACTION: {
        "task": "Write ONE closing call to action (max 20 words) asking viewers to follow or comment.",
        "num_predict": 60,
    },
    FieldKind.SOUNDTRACK_PROMPT: {
        "task": "Describe a royalty-free background track for this short in one sentence: mood, tempo, instruments. No vocals.",
        "num_predict": 80,
    },
    FieldKind.THUMBNAIL_PROMPT: {
        "task": (
            "Write an image generation prompt (40-80 words) for a vertical 9:16 thumbnail. "
            "Bold composition, expressive subject, NO TEXT, NO WORDS, NO LETTERS in the image."
        ),
        "num_predict": 160,
    },
    FieldKind.KEYWORDS: {
        "task": "List 4-6 short search keywords for this story, comma separated, lowercase, no hashtags.",
        "num_predict": 60,
    },
    FieldKind.BEAT_HEADLINE: {
        "task": "Write an on-screen headline for this beat (max 6 words).",
        "num_predict": 30,
    },
    FieldKind.BEAT_VOICEOVER: {
        "task": (
            "Write the voiceover for this beat only, retelling the narration excerpt in your voice. "
            "It must be speakable in {beat_duration} seconds (about {word_budget} words)."
        ),
        "num_predict": 200,
    },
    FieldKind.BEAT_MOTION_PROMPT: {
        "task": "Describe the camera motion and framing for this beat in one sentence (vertical 9:16 video).",
        "num_predict": 80,
    },
    FieldKind.BEAT_BROLL_PROMPT: {
        "task": (
            "Write a video generation prompt (25-50 words) for b-roll footage that illustrates this beat. "
            "Concept illustration style, no faces of real people, NO TEXT in frame."
        ),
        "num_predict": 120,
    },
    FieldKind.BEAT_CAPTIONS: {
        "task": "Split the key phrases of this beat into 2-4 short caption lines (max 32 characters each), one per line.",
        "num_predict": 80,
    },
}


def build_prompt(kind: FieldKind, context: GenerationContext) -> str:
    """Prompt text for one field, grounded in the post and the beat slot."""
    field_prompt = FIELD_PROMPTS[kind]
    voice = context.get("voice_profile", "narrator")
    beat_duration = context.get("beat_duration", 0)
    task = field_prompt["task"].format(beat_duration=beat_duration, word_budget=max(1, int(beat_duration * 2.5)))

    body = context.get("body_text", "")
    if len(body) > 2000:
        body = body[:2000] + "..."

    lines = [
        "You are writing a YouTube Shorts script based on a Reddit post.",
        f"Subreddit: r/{context.get('subreddit', '')}",
        f"Narration voice: {voice}, {VOICE_STYLES.get(voice, VOICE_STYLES['narrator'])}",
        f"Total runtime: {context.get('duration', 0)} seconds in {context.get('beat_count', 0)} beats",
        "",
        f"Post title: {context.get('title', '')}",
        f"Post body: {body}",
    ]
    if kind.is_beat_field:
        index = context.get("beat_index") or 0
        start = context.get("timestamp", 0)
        lines += [
            "",
            f"Beat {index + 1} of {context.get('beat_count', 0)} ({start}s to {start + beat_duration}s)",
            f"Narration excerpt for this beat: {context.get('narration', '')}",
        ]
    lines += ["", task, "Return ONLY the requested text, nothing else."]
    return "\n".join(lines)


class LLMFieldGenerator(IFieldGenerator):
    """Generates each field with one LLM call. Raises FieldGenerationFailure on provider failure."""

    def __init__(self, llm_client: Optional[LLMClient] = None, temperature: float = 0.8):
        self._llm = llm_client if llm_client is not None else LLMClient()
        self._temperature = temperature

    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        prompt = build_prompt(kind, context)
        try:
            response = self._llm.generate(
                prompt,
                {
                    "temperature": self._temperature,
                    "num_predict": FIELD_PROMPTS[kind]["num_predict"],
                },
                deadline=context.get("deadline"),
            )
        except LLMError as e:
            raise FieldGenerationFailure(kind.value, str(e), context.get("beat_index")) from e
        return response.get("response", "") if isinstance(response, dict) else str(response)


class OfflineFieldGenerator(IFieldGenerator):
    """Makes no calls; every field resolves to its fallback."""

    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        raise FieldGenerationFailure(kind.value, "offline mode", context.get("beat_index"))
