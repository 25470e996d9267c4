"""
CLI entrypoint. Use from project root:
  python -m shorts_workflow --subreddit AskReddit --timeframe week --stories 2 --duration 45
  python -m shorts_workflow --posts-file saved_posts.json --offline --output workflow.json
"""

import argparse
import contextlib
import json
import sys
from typing import List, Optional

from shorts_workflow import config

EXIT_INVALID_SETTINGS = 2
EXIT_NO_CONTENT = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn top Reddit threads into a YouTube Shorts production package"
    )
    parser.add_argument("--subreddit", default=config.DEFAULT_SUBREDDIT, help="Subreddit to pull stories from")
    parser.add_argument(
        "--timeframe",
        default=config.DEFAULT_TIMEFRAME,
        help=f"Top-posts window: {', '.join(config.TIMEFRAMES)}",
    )
    parser.add_argument(
        "--stories",
        default=config.DEFAULT_STORY_COUNT,
        help=f"Stories to produce ({config.STORY_COUNT_MIN}-{config.STORY_COUNT_MAX})",
    )
    parser.add_argument(
        "--duration",
        default=config.DEFAULT_DURATION,
        help=f"Target seconds per short ({config.DURATION_MIN}-{config.DURATION_MAX})",
    )
    parser.add_argument(
        "--voice",
        default=config.DEFAULT_VOICE_PROFILE,
        help=f"Narration voice: {', '.join(config.VOICE_PROFILES)}",
    )
    parser.add_argument(
        "--broll",
        dest="include_broll",
        action=argparse.BooleanOptionalAction,
        default=config.DEFAULT_INCLUDE_BROLL,
        help="Include b-roll prompts for each beat",
    )
    parser.add_argument("--posts-file", help="Read candidate posts from a JSON file instead of Reddit")
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Skip LLM calls; every field uses its fallback content",
    )
    parser.add_argument("--output", "-o", help="Write the workflow JSON here (default: stdout)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    from shorts_workflow.adapters import (
        JsonFilePostSource,
        OfflineFieldGenerator,
        default_adapters,
    )
    from shorts_workflow.application.pipeline import WorkflowPipeline
    from shorts_workflow.domain.errors import InvalidSettings, NoUsableContent
    from shorts_workflow.domain.serialization import workflow_to_payload

    args = build_parser().parse_args(argv)

    overrides = {}
    if args.posts_file:
        overrides["post_source"] = JsonFilePostSource(args.posts_file)
    if args.offline:
        overrides["field_generator"] = OfflineFieldGenerator()

    raw_settings = {
        "subreddit": args.subreddit,
        "timeframe": args.timeframe,
        "storyCount": args.stories,
        "duration": args.duration,
        "voiceProfile": args.voice,
        "includeBroll": args.include_broll,
    }

    # progress goes to stderr when the JSON itself goes to stdout
    progress = sys.stdout if args.output else sys.stderr
    try:
        with contextlib.redirect_stdout(progress):
            pipeline = WorkflowPipeline(**default_adapters(**overrides))
            workflow = pipeline.run(raw_settings)
    except InvalidSettings as e:
        print("\n❌ Invalid settings:", file=sys.stderr)
        for name, reason in sorted(e.field_errors.items()):
            print(f"   {name}: {reason}", file=sys.stderr)
        return EXIT_INVALID_SETTINGS
    except NoUsableContent as e:
        print(f"\n❌ {e}", file=sys.stderr)
        return EXIT_NO_CONTENT

    text = json.dumps(workflow_to_payload(workflow), indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"\n✅ Success! Workflow saved to: {args.output}")
    else:
        sys.stdout.write(text + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
