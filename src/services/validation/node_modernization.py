"""Rewrites of deprecated nodes to their modern equivalents.

Only node types with an entry in ``MIGRATIONS`` are rewritten. A
deprecated type without one is reported by the validator but left as is.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

FUNCTION = "n8n-nodes-base.function"
CODE = "n8n-nodes-base.code"
SET = "n8n-nodes-base.set"

DEFAULT_JS_CODE = "// Add your code here"
LEGACY_SET_NAME = "Set"
MODERN_SET_NAME = "Edit Fields (Set)"


@dataclass(frozen=True)
class NodeMigration:
    """Rewrite of one legacy node type into its successor."""
    source_type: str
    target_type: str
    target_version: int
    source_label: str
    target_label: str
    rewrite: Callable[[Dict[str, Any]], Dict[str, Any]]

    def apply(self, node: Dict[str, Any]) -> None:
        node["type"] = self.target_type
        node["typeVersion"] = self.target_version
        node["parameters"] = self.rewrite(dict(node.get("parameters") or {}))


def _function_parameters(parameters: Dict[str, Any]) -> Dict[str, Any]:
    parameters["jsCode"] = parameters.pop("functionCode", None) or DEFAULT_JS_CODE
    parameters["mode"] = "runOnceForAllItems"
    return parameters


MIGRATIONS: Dict[str, NodeMigration] = {
    FUNCTION: NodeMigration(
        source_type=FUNCTION,
        target_type=CODE,
        target_version=2,
        source_label="Function",
        target_label="Code",
        rewrite=_function_parameters,
    ),
}


def has_migration(type_id: str) -> bool:
    return type_id in MIGRATIONS


def apply_migrations(workflow: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Deep copy of ``workflow`` with every registered migration applied."""
    fixed = copy.deepcopy(workflow)
    changes = []

    for node in fixed.get("nodes") or []:
        if not isinstance(node, dict):
            continue
        migration = MIGRATIONS.get(node.get("type"))
        if migration is None:
            continue
        migration.apply(node)
        changes.append(
            f'Converted {migration.source_label} node "{node.get("name")}" to {migration.target_label} node'
        )

    return fixed, changes


def _rename_node(workflow: Dict[str, Any], old: str, new: str) -> None:
    connections = workflow.get("connections")
    if not isinstance(connections, dict):
        return
    if old in connections:
        connections[new] = connections.pop(old)
    for outputs in connections.values():
        if not isinstance(outputs, dict):
            continue
        for port in outputs.get("main") or []:
            for edge in port or []:
                if isinstance(edge, dict) and edge.get("node") == old:
                    edge["node"] = new


def autofix(workflow: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Apply registered migrations and legacy renames.

    Running it on its own output changes nothing.
    """
    if not isinstance(workflow.get("nodes"), list):
        return copy.deepcopy(workflow), []

    fixed, changes = apply_migrations(workflow)

    nodes = [node for node in fixed["nodes"] if isinstance(node, dict)]
    names = {node.get("name") for node in nodes}
    for node in nodes:
        if node.get("type") == SET and node.get("name") == LEGACY_SET_NAME and MODERN_SET_NAME not in names:
            node["name"] = MODERN_SET_NAME
            names.add(MODERN_SET_NAME)
            _rename_node(fixed, LEGACY_SET_NAME, MODERN_SET_NAME)
            changes.append(f'Updated Set node name to "{MODERN_SET_NAME}"')

    if changes:
        logger.info(f"Auto-fix applied {len(changes)} change(s)")
    return fixed, changes
