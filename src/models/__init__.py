"""Database models for Autoflow Builder."""

from .base import Base, TimestampMixin, UUIDMixin
from .node_catalog import NodeDefinition, NodeParameter
from .workflow import Workflow
from .workflow_templates import WorkflowTemplate

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "NodeDefinition",
    "NodeParameter",
    "Workflow",
    "WorkflowTemplate",
]
