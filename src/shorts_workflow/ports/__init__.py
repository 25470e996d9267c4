"""Ports (interfaces) – depend on these, implement in adapters."""

from shorts_workflow.ports.interfaces import IFieldGenerator, IPostSource

__all__ = [
    "IFieldGenerator",
    "IPostSource",
]
