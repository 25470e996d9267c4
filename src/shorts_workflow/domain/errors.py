"""Pipeline error taxonomy."""

from typing import Dict, Optional


class PipelineError(Exception):
    """Base for the terminal outcomes that cross the pipeline boundary."""


class InvalidSettings(PipelineError):
    """Settings rejected; field_errors maps every bad field to a reason."""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(f"{name}: {reason}" for name, reason in sorted(self.field_errors.items()))
        super().__init__(f"Invalid settings ({fields})")


class NoUsableContent(PipelineError):
    """No candidate post could be turned into a story."""

    def __init__(self, message: str = "No usable posts found for the requested subreddit/timeframe."):
        super().__init__(message)


class FieldGenerationFailure(Exception):
    """One generation call failed or returned unusable text. Recovered by fallback."""

    def __init__(self, kind: str, reason: str, beat_index: Optional[int] = None):
        self.kind = kind
        self.reason = reason
        self.beat_index = beat_index
        where = f"{kind}" if beat_index is None else f"{kind}[beat {beat_index + 1}]"
        super().__init__(f"{where}: {reason}")


class UnexpectedPipelineFault(Exception):
    """An internal invariant was violated. Programming error, never user-facing."""
