"""Workflow validation, modernization and scoring."""

from .node_modernization import MIGRATIONS, apply_migrations, autofix, has_migration
from .workflow_validator import WorkflowValidator
from .workflow_scorer import WorkflowScorer

__all__ = [
    "MIGRATIONS",
    "apply_migrations",
    "autofix",
    "has_migration",
    "WorkflowValidator",
    "WorkflowScorer",
]
