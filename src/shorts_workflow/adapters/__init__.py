"""
Adapters – concrete implementations of ports.
RedditPostSource/JsonFilePostSource feed candidates; LLMFieldGenerator writes
the fields, OfflineFieldGenerator leaves everything to the fallbacks.
"""

from shorts_workflow.adapters.generation import LLMFieldGenerator, OfflineFieldGenerator
from shorts_workflow.adapters.reddit import JsonFilePostSource, RedditPostSource


def default_adapters(**overrides):
    """
    Build default adapter instances (use config).
    Overrides: post_source=..., field_generator=... for testing or offline runs.
    """
    defaults = {}
    if "post_source" not in overrides:
        defaults["post_source"] = RedditPostSource()
    if "field_generator" not in overrides:
        defaults["field_generator"] = LLMFieldGenerator()
    defaults.update(overrides)
    return defaults


__all__ = [
    "JsonFilePostSource",
    "LLMFieldGenerator",
    "OfflineFieldGenerator",
    "RedditPostSource",
    "default_adapters",
]
