"""Domain models, field kinds and errors."""

from shorts_workflow.domain.errors import (
    FieldGenerationFailure,
    InvalidSettings,
    NoUsableContent,
    PipelineError,
    UnexpectedPipelineFault,
)
from shorts_workflow.domain.models import (
    Beat,
    BeatSlot,
    FieldKind,
    GenerationContext,
    Settings,
    SourcePost,
    Story,
    Workflow,
    WorkflowNotes,
)

__all__ = [
    "Beat",
    "BeatSlot",
    "FieldKind",
    "GenerationContext",
    "Settings",
    "SourcePost",
    "Story",
    "Workflow",
    "WorkflowNotes",
    "PipelineError",
    "InvalidSettings",
    "NoUsableContent",
    "FieldGenerationFailure",
    "UnexpectedPipelineFault",
]
