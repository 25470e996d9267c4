"""
Workflow pipeline – single responsibility: orchestrate validate → select → beats/generate → assemble.
Depends only on port interfaces (SOLID – Dependency Inversion).
"""

from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from shorts_workflow import config
from shorts_workflow.application.selection import select_posts
from shorts_workflow.application.settings import validate_settings
from shorts_workflow.application.story_generator import StoryGenerator
from shorts_workflow.application.workflow import assemble_workflow, utc_now
from shorts_workflow.domain.errors import NoUsableContent
from shorts_workflow.domain.models import SourcePost, Workflow
from shorts_workflow.ports.interfaces import IFieldGenerator, IPostSource

# Candidates requested per story, for headroom against unusable posts
CANDIDATE_HEADROOM = 2


class WorkflowPipeline:
    """
    Builds a Workflow from production settings.
    All dependencies are injected (ports); no concrete implementations here.
    Only InvalidSettings and NoUsableContent escape; generation failures degrade to fallbacks.
    """

    def __init__(
        self,
        *,
        field_generator: IFieldGenerator,
        post_source: Optional[IPostSource] = None,
        max_workers: int = config.GENERATION_MAX_WORKERS,
        generation_timeout: Optional[float] = config.GENERATION_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._source = post_source
        self._stories = StoryGenerator(field_generator, max_workers=max_workers, timeout=generation_timeout)
        self._clock = clock

    def run(self, raw_settings: Mapping[str, Any]) -> Workflow:
        """Validate settings, fetch candidates from the post source, and generate."""
        if self._source is None:
            raise ValueError("WorkflowPipeline.run needs a post_source")
        settings = validate_settings(raw_settings)

        limit = settings["story_count"] * CANDIDATE_HEADROOM
        print(f"\n[0/4] Fetching top {limit} posts from r/{settings['subreddit']} ({settings['timeframe']})...")
        candidates = self._source.fetch_top_posts(settings["subreddit"], settings["timeframe"], limit=limit)
        print(f"Found {len(candidates)} candidate posts")
        return self.generate(settings, candidates)

    def generate(self, raw_settings: Mapping[str, Any], candidate_posts: Sequence[SourcePost]) -> Workflow:
        """
        Boundary operation: settings + ranked candidates -> Workflow.
        Raises InvalidSettings or NoUsableContent; nothing else is expected to escape.
        """
        print("=" * 60)
        print("Generating shorts workflow...")
        print("=" * 60)

        print("\n[1/4] Validating settings...")
        settings = validate_settings(raw_settings)

        print("\n[2/4] Selecting posts...")
        posts = select_posts(candidate_posts, settings["story_count"])
        if len(posts) < settings["story_count"]:
            print(f"  ⚠️  Only {len(posts)} usable post(s) for {settings['story_count']} requested")
        for i, post in enumerate(posts, 1):
            print(f"  {i}. {(post.get('title') or post.get('body_text') or '')[:60]}")

        print(f"\n[3/4] Generating {len(posts)} story script(s) ({settings['duration']}s each)...")
        batch = self._stories.generate_stories(posts, settings)
        if not batch.stories:
            raise NoUsableContent("None of the selected posts could be turned into a story.")
        print(f"✅ Built {len(batch.stories)} stories ({len(batch.failures)} field(s) used fallback content)")

        print("\n[4/4] Assembling workflow...")
        workflow = assemble_workflow(settings, batch.stories, posts, clock=self._clock)
        print(f"✅ Workflow ready: {len(workflow['stories'])} stories, {len(workflow['notes']['hashtags'])} hashtags")
        return workflow
