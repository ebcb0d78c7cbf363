"""Creates generated nodes with positions, versions and default parameters."""

import re
from typing import Any, Dict, Optional, Set

from schemas.workflow import GeneratedNode
from .code_generators import CodeGenerators


START_X = 240
START_Y = 300
X_STEP = 220

TYPE_VERSIONS: Dict[str, int] = {
    "n8n-nodes-base.webhook": 2,
    "n8n-nodes-base.code": 2,
    "n8n-nodes-base.set": 3,
    "n8n-nodes-base.httpRequest": 4,
    "n8n-nodes-base.if": 2,
    "n8n-nodes-base.switch": 3,
    "n8n-nodes-base.cron": 1,
    "n8n-nodes-base.manualTrigger": 1,
}

DISPLAY_NAMES: Dict[str, str] = {
    "n8n-nodes-base.webhook": "Webhook",
    "n8n-nodes-base.code": "Code",
    "n8n-nodes-base.set": "Edit Fields (Set)",
    "n8n-nodes-base.httpRequest": "HTTP Request",
    "n8n-nodes-base.if": "If",
    "n8n-nodes-base.switch": "Switch",
    "n8n-nodes-base.cron": "Schedule Trigger",
    "n8n-nodes-base.manualTrigger": "Manual Trigger",
    "n8n-nodes-base.merge": "Merge",
    "n8n-nodes-base.itemLists": "Item Lists",
}


def type_version(type_id: str) -> int:
    return TYPE_VERSIONS.get(type_id, 1)


def display_name(type_id: str) -> str:
    return DISPLAY_NAMES.get(type_id) or type_id.rsplit(".", 1)[-1]


def default_parameters(type_id: str, description: str) -> Dict[str, Any]:
    """Parameter body for a node type placed without a strategy."""
    if type_id == "n8n-nodes-base.webhook":
        return {
            "path": CodeGenerators.webhook_path(description),
            "httpMethod": CodeGenerators.http_method(description),
            "responseMode": "onReceived",
        }
    if type_id == "n8n-nodes-base.code":
        return {
            "jsCode": CodeGenerators.processing_code(description),
            "mode": "runOnceForAllItems",
        }
    if type_id == "n8n-nodes-base.httpRequest":
        return {
            "url": "https://api.example.com/data",
            "method": "GET",
            "authentication": "none",
        }
    if type_id == "n8n-nodes-base.set":
        return {
            "fields": {
                "values": [
                    {"name": "processed", "type": "booleanValue", "booleanValue": True},
                ]
            }
        }
    if type_id == "n8n-nodes-base.if":
        return {
            "conditions": {
                "options": {
                    "caseSensitive": True,
                    "leftValue": "={{ $json.status }}",
                    "operation": "equal",
                    "rightValue": "success",
                }
            }
        }
    if type_id == "n8n-nodes-base.cron":
        return {"triggerTimes": {"item": [{"mode": "everyMinute"}]}}
    if type_id == "n8n-nodes-base.merge":
        return {"mode": "append"}
    if type_id == "n8n-nodes-base.switch":
        return {"mode": "rules", "rules": {"values": []}}
    if type_id == "n8n-nodes-base.itemLists":
        return {"operation": "aggregateItems"}
    return {}


class NodeFactory:
    """Per-build node factory.

    Ids are ``<NameWithoutSpaces>_<n>`` with ``n`` counting up within one
    build. A repeated display name gets a numeric suffix ("HTTP Request1")
    so names stay unique inside the workflow.
    """

    def __init__(self):
        self._counter = 0
        self._names: Set[str] = set()

    def _unique_name(self, name: str) -> str:
        if name not in self._names:
            return name
        suffix = 1
        while f"{name}{suffix}" in self._names:
            suffix += 1
        return f"{name}{suffix}"

    def create(
        self,
        name: str,
        type_id: str,
        x: int,
        y: int,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> GeneratedNode:
        name = self._unique_name(name)
        self._names.add(name)
        self._counter += 1
        compact = re.sub(r"\s+", "", name)
        return GeneratedNode(
            id=f"{compact}_{self._counter}",
            name=name,
            type=type_id,
            type_version=type_version(type_id),
            position=(x, y),
            parameters=parameters or {},
        )
