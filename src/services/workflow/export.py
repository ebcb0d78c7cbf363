"""Serialization boundary for the platform workflow document."""

import re
from collections import Counter
from typing import Any, Dict

from jsonschema import Draft7Validator

from core.exceptions import ValidationError
from schemas.workflow import GeneratedWorkflow


_EDGE = {
    "type": "object",
    "required": ["node", "type", "index"],
    "properties": {
        "node": {"type": "string"},
        "type": {"type": "string", "const": "main"},
        "index": {"type": "integer", "minimum": 0},
    },
}

WORKFLOW_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["name", "nodes", "connections", "active", "settings"],
    "properties": {
        "name": {"type": "string"},
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "type", "typeVersion", "position", "parameters"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string", "minLength": 1},
                    "type": {"type": "string", "minLength": 1},
                    "typeVersion": {"type": "number"},
                    "position": {
                        "type": "array",
                        "items": {"type": "number"},
                        "minItems": 2,
                        "maxItems": 2,
                    },
                    "parameters": {"type": "object"},
                    "webhookId": {"type": "string"},
                },
            },
        },
        "connections": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "required": ["main"],
                "properties": {
                    "main": {"type": "array", "items": {"type": "array", "items": _EDGE}},
                },
            },
        },
        "active": {"type": "boolean"},
        "settings": {"type": "object"},
    },
}

_validator = Draft7Validator(WORKFLOW_DOCUMENT_SCHEMA)


def check_document(document: Dict[str, Any]) -> None:
    """Raise ValidationError if the document does not have the platform shape."""
    errors = sorted(_validator.iter_errors(document), key=lambda e: list(e.absolute_path))
    if errors:
        raise ValidationError(
            "Workflow document does not match the platform format",
            details={
                "errors": [
                    {"path": "/".join(str(part) for part in error.absolute_path), "message": error.message}
                    for error in errors
                ]
            },
        )


def check_unique_names(document: Dict[str, Any]) -> None:
    """Raise ValidationError if two nodes share a name.

    Connections are keyed by node name, so duplicates would merge their edges.
    """
    names = Counter(
        node.get("name") for node in document.get("nodes") or []
        if isinstance(node, dict) and isinstance(node.get("name"), str)
    )
    duplicates = sorted(name for name, count in names.items() if count > 1)
    if duplicates:
        raise ValidationError(
            "Node names must be unique within a workflow",
            details={"duplicate_names": duplicates},
        )


def export_workflow(workflow: GeneratedWorkflow, active: bool = False) -> Dict[str, Any]:
    """Project a generated workflow to the wire format and check its shape."""
    document = workflow.to_document(active=active)
    check_document(document)
    return document


def export_filename(name: str) -> str:
    safe = re.sub(r"[^a-zA-Z0-9]", "_", name or "workflow")
    return f"{safe}_workflow.json"
