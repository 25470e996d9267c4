"""Application layer – the story assembly pipeline and its stages."""

from shorts_workflow.application.pipeline import WorkflowPipeline

__all__ = ["WorkflowPipeline"]
