"""Workflow classification, assembly and export."""

from .type_detector import WorkflowTypeDetector
from .builder import WorkflowBuilder
from .export import export_workflow, check_document, check_unique_names, export_filename

__all__ = [
    "WorkflowTypeDetector",
    "WorkflowBuilder",
    "export_workflow",
    "check_document",
    "check_unique_names",
    "export_filename",
]
