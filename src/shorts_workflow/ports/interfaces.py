"""
Port interfaces (SOLID – Dependency Inversion).
Implement these in adapters; the application layer depends only on these abstractions.
"""

from abc import ABC, abstractmethod
from typing import List

from shorts_workflow.domain.models import FieldKind, GenerationContext, SourcePost


class IPostSource(ABC):
    """Ranked candidate posts for a subreddit/timeframe."""

    @abstractmethod
    def fetch_top_posts(
        self,
        subreddit: str,
        timeframe: str,
        limit: int = 10,
    ) -> List[SourcePost]:
        """Return up to `limit` posts, best first."""
        pass


class IFieldGenerator(ABC):
    """
    Text generation for one field of a story or beat.

    Implementations raise on failure; a single call never partially succeeds.
    The per-kind methods all route through generate_field, so a test double
    only needs to implement that one method.
    """

    @abstractmethod
    def generate_field(self, kind: FieldKind, context: GenerationContext) -> str:
        """Generate raw text for `kind`."""
        pass

    def generate_hook(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.HOOK, context)

    def generate_call_to_action(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.CALL_TO_ACTION, context)

    def generate_soundtrack_prompt(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.SOUNDTRACK_PROMPT, context)

    def generate_thumbnail_prompt(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.THUMBNAIL_PROMPT, context)

    def generate_keywords(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.KEYWORDS, context)

    def generate_beat_headline(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.BEAT_HEADLINE, context)

    def generate_beat_voiceover(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.BEAT_VOICEOVER, context)

    def generate_beat_motion_prompt(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.BEAT_MOTION_PROMPT, context)

    def generate_beat_broll_prompt(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.BEAT_BROLL_PROMPT, context)

    def generate_beat_captions(self, context: GenerationContext) -> str:
        return self.generate_field(FieldKind.BEAT_CAPTIONS, context)

    def method_for(self, kind: FieldKind):
        """Bound per-kind method for `kind`."""
        return getattr(self, f"generate_{kind.value}")
