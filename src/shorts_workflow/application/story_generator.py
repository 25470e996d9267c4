"""
Story generation – fan out one generation call per (story, field[, beat]),
then build each Story, substituting a deterministic fallback for every field
whose call failed, timed out, or came back unusable.
"""

import hashlib
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from shorts_workflow import config
from shorts_workflow.application import fallbacks
from shorts_workflow.application.beats import (
    allocate_slots,
    beat_requests,
    check_beat_invariants,
    narration_text,
    story_context,
)
from shorts_workflow.application.text import clean_generated_text, clean_lines, parse_keywords
from shorts_workflow.domain.errors import FieldGenerationFailure
from shorts_workflow.domain.models import (
    STORY_FIELD_KINDS,
    Beat,
    BeatSlot,
    FieldKind,
    GenerationContext,
    Settings,
    SourcePost,
    Story,
)
from shorts_workflow.ports.interfaces import IFieldGenerator

# (story position, field kind, beat index or None)
Coordinate = Tuple[int, FieldKind, Optional[int]]

# Shorter generated text than this is treated as unusable.
MIN_TEXT_LENGTH = {
    FieldKind.HOOK: 8,
    FieldKind.CALL_TO_ACTION: 8,
    FieldKind.SOUNDTRACK_PROMPT: 12,
    FieldKind.THUMBNAIL_PROMPT: 12,
    FieldKind.BEAT_HEADLINE: 3,
    FieldKind.BEAT_VOICEOVER: fallbacks.MIN_VOICEOVER_CHARS,
    FieldKind.BEAT_MOTION_PROMPT: 10,
    FieldKind.BEAT_BROLL_PROMPT: 10,
}

BEAT_FIELD_KINDS = (
    FieldKind.BEAT_HEADLINE,
    FieldKind.BEAT_VOICEOVER,
    FieldKind.BEAT_MOTION_PROMPT,
    FieldKind.BEAT_CAPTIONS,
)


@dataclass
class StoryPlan:
    """Everything needed to request and build one story."""
    position: int
    post: SourcePost
    context: GenerationContext
    slots: List[BeatSlot]
    beat_contexts: List[GenerationContext]


@dataclass
class StoryBatch:
    stories: List[Story]
    failures: List[FieldGenerationFailure] = field(default_factory=list)
    dropped: int = 0


def story_id(post: SourcePost, position: int) -> str:
    """Deterministic, unique within a batch (the position is part of it)."""
    post_id = str(post.get("id") or "").strip()
    if not post_id:
        seed = f"{post.get('url', '')}|{post.get('title', '')}|{post.get('body_text', '')}"
        post_id = hashlib.sha1(seed.encode("utf-8")).hexdigest()[:10]
    return f"{post_id}-{position + 1}"


def _with_deadline(context: GenerationContext, deadline: Optional[float]) -> GenerationContext:
    if deadline is None:
        return context
    return GenerationContext(**context, deadline=deadline)


def parse_field(kind: FieldKind, raw: Any) -> Any:
    """Clean a raw response for `kind`; raise FieldGenerationFailure if it is unusable."""
    if raw is None:
        raise FieldGenerationFailure(kind.value, "empty response")
    if isinstance(raw, (list, tuple)):
        raw = "\n".join(str(item) for item in raw)
    raw = str(raw)

    if kind is FieldKind.KEYWORDS:
        keywords = parse_keywords(raw)
        if not keywords:
            raise FieldGenerationFailure(kind.value, "no keywords in response")
        return keywords

    if kind is FieldKind.BEAT_CAPTIONS:
        lines = clean_lines(raw)
        if not lines:
            raise FieldGenerationFailure(kind.value, "no caption lines in response")
        return lines

    text = clean_generated_text(raw)
    minimum = MIN_TEXT_LENGTH.get(kind, 1)
    if len(text) < minimum:
        raise FieldGenerationFailure(kind.value, f"too short ({len(text)} < {minimum} chars)")
    return text


class StoryGenerator:
    """
    Turns selected posts into Stories using an IFieldGenerator.
    One attempt per field, no retries; any field can degrade to its fallback
    without affecting the rest of the story.
    """

    def __init__(
        self,
        field_generator: IFieldGenerator,
        *,
        max_workers: int = config.GENERATION_MAX_WORKERS,
        timeout: Optional[float] = config.GENERATION_TIMEOUT_SECONDS,
    ):
        self._generator = field_generator
        self._max_workers = max(1, max_workers)
        self._timeout = timeout

    def plan(self, post: SourcePost, settings: Settings, position: int) -> Optional[StoryPlan]:
        """Allocate beats for a post. None when the post has no text to build from."""
        if not narration_text(post):
            return None
        slots = allocate_slots(settings["duration"])
        return StoryPlan(
            position=position,
            post=post,
            context=story_context(post, settings, len(slots)),
            slots=slots,
            beat_contexts=beat_requests(post, settings, slots),
        )

    def generate_stories(self, posts: Sequence[SourcePost], settings: Settings) -> StoryBatch:
        """Build one Story per usable post, preserving the order of `posts`."""
        plans = []
        dropped = 0
        for position, post in enumerate(posts):
            plan = self.plan(post, settings, position)
            if plan is None:
                dropped += 1
                print(f"  ⚠️  Skipping post {post.get('id', position + 1)}: no title or body")
                continue
            plans.append(plan)

        results = self._fan_out(self._jobs(plans, settings))

        batch = StoryBatch(stories=[], dropped=dropped)
        for plan in plans:
            story, failures = self._build_story(plan, settings, results)
            batch.stories.append(story)
            batch.failures.extend(failures)
            if failures:
                names = ", ".join(str(f).split(":")[0] for f in failures)
                print(f"  ⚠️  Story {plan.position + 1}: {len(failures)} field(s) used fallback ({names})")
        return batch

    def _jobs(
        self, plans: Sequence[StoryPlan], settings: Settings
    ) -> List[Tuple[Coordinate, Callable[[GenerationContext], str], GenerationContext]]:
        beat_kinds = BEAT_FIELD_KINDS + ((FieldKind.BEAT_BROLL_PROMPT,) if settings["include_broll"] else ())
        jobs = []
        for plan in plans:
            for kind in STORY_FIELD_KINDS:
                jobs.append(((plan.position, kind, None), self._generator.method_for(kind), plan.context))
            for context in plan.beat_contexts:
                for kind in beat_kinds:
                    jobs.append(
                        ((plan.position, kind, context["beat_index"]), self._generator.method_for(kind), context)
                    )
        return jobs

    def _fan_out(self, jobs) -> Dict[Coordinate, Any]:
        """
        Run every job on a bounded pool under one overall timeout.
        Each coordinate maps to the raw response or a FieldGenerationFailure.
        Every context carries the shared `deadline` so generators can bound
        their own calls; work still running past it is abandoned, not joined.
        """
        results: Dict[Coordinate, Any] = {}
        if not jobs:
            return results

        deadline = time.monotonic() + self._timeout if self._timeout is not None else None

        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(jobs)),
            thread_name_prefix="field-gen",
        )
        try:
            futures = {
                executor.submit(method, _with_deadline(context, deadline)): coord for coord, method, context in jobs
            }
            done, not_done = wait(futures, timeout=self._timeout)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        for future in done:
            _, kind, beat_index = coord = futures[future]
            error = future.exception()
            if error is None:
                results[coord] = future.result()
            elif isinstance(error, FieldGenerationFailure):
                results[coord] = error
            else:
                results[coord] = FieldGenerationFailure(kind.value, f"{type(error).__name__}: {error}", beat_index)
        for future in not_done:
            _, kind, beat_index = coord = futures[future]
            results[coord] = FieldGenerationFailure(kind.value, f"timed out after {self._timeout}s", beat_index)
        return results

    def _resolve(
        self,
        results: Dict[Coordinate, Any],
        coord: Coordinate,
        fallback: Callable[[], Any],
        failures: List[FieldGenerationFailure],
    ) -> Any:
        _, kind, beat_index = coord
        raw = results.get(coord)
        if isinstance(raw, FieldGenerationFailure):
            failure = raw
        else:
            try:
                return parse_field(kind, raw)
            except FieldGenerationFailure as e:
                failure = FieldGenerationFailure(kind.value, e.reason, beat_index)
        failures.append(failure)
        return fallback()

    def _build_story(
        self,
        plan: StoryPlan,
        settings: Settings,
        results: Dict[Coordinate, Any],
    ) -> Tuple[Story, List[FieldGenerationFailure]]:
        failures: List[FieldGenerationFailure] = []
        pos = plan.position
        ctx = plan.context

        def resolve(kind: FieldKind, fallback: Callable[[], Any], beat_index: Optional[int] = None) -> Any:
            return self._resolve(results, (pos, kind, beat_index), fallback, failures)

        hook = resolve(FieldKind.HOOK, lambda: fallbacks.fallback_hook(ctx))
        call_to_action = resolve(FieldKind.CALL_TO_ACTION, lambda: fallbacks.fallback_call_to_action(ctx))
        soundtrack_prompt = resolve(FieldKind.SOUNDTRACK_PROMPT, lambda: fallbacks.fallback_soundtrack_prompt(ctx))
        thumbnail_prompt = resolve(FieldKind.THUMBNAIL_PROMPT, lambda: fallbacks.fallback_thumbnail_prompt(ctx))
        keywords = resolve(FieldKind.KEYWORDS, lambda: fallbacks.fallback_keywords(ctx))

        beats: List[Beat] = []
        for slot, bctx in zip(plan.slots, plan.beat_contexts):
            i = slot["index"]
            voiceover = resolve(FieldKind.BEAT_VOICEOVER, lambda: fallbacks.fallback_beat_voiceover(bctx), i)
            beat = Beat(
                timestamp=slot["timestamp"],
                duration=slot["duration"],
                headline=resolve(FieldKind.BEAT_HEADLINE, lambda: fallbacks.fallback_beat_headline(bctx), i),
                voiceover=voiceover,
                motion_prompt=resolve(
                    FieldKind.BEAT_MOTION_PROMPT, lambda: fallbacks.fallback_beat_motion_prompt(bctx), i
                ),
            )
            if settings["include_broll"]:
                beat["broll_prompt"] = resolve(
                    FieldKind.BEAT_BROLL_PROMPT,
                    lambda: fallbacks.fallback_beat_broll_prompt(bctx, voiceover),
                    i,
                )
            beat["captions"] = resolve(
                FieldKind.BEAT_CAPTIONS, lambda: fallbacks.fallback_beat_captions(voiceover), i
            )
            beats.append(beat)

        check_beat_invariants(beats, settings["duration"])

        story = Story(
            id=story_id(plan.post, pos),
            title=ctx.get("title") or fallbacks.short_title(ctx),
            source_url=plan.post.get("url", ""),
            hook=hook,
            beats=beats,
            call_to_action=call_to_action,
            soundtrack_prompt=soundtrack_prompt,
            thumbnail_prompt=thumbnail_prompt,
            keywords=list(dict.fromkeys(keywords)),
        )
        return story, failures
