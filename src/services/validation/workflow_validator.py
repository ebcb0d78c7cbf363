"""Validation of platform workflow documents against the node catalog."""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from schemas.node_catalog import NodeTypeDefinition, ParameterDef, ParameterType
from schemas.workflow import IssueType, ValidationIssue, WorkflowValidationResult
from services.node_catalog import NodeCatalog
from .node_modernization import apply_migrations, has_migration

logger = logging.getLogger(__name__)

SET = "n8n-nodes-base.set"
HTTP_REQUEST = "n8n-nodes-base.httpRequest"
IF = "n8n-nodes-base.if"

_MISSING = object()

# (message, suggestion) or None when the value is acceptable
CheckResult = Optional[Tuple[str, str]]


class WorkflowValidator:
    """Checks nodes, parameters and connections of a workflow document.

    Findings are returned as data. ``is_valid`` is false only when at
    least one error-type issue exists; warnings and suggestions never
    block.
    """

    def __init__(self, catalog: NodeCatalog):
        self.catalog = catalog
        self._value_checks: Dict[str, Callable[[Any, ParameterDef], CheckResult]] = {
            ParameterType.STRING.value: self._check_string,
            ParameterType.NUMBER.value: self._check_number,
            ParameterType.BOOLEAN.value: self._check_boolean,
            ParameterType.OPTIONS.value: self._check_options,
            ParameterType.COLLECTION.value: self._check_collection,
        }

    async def validate(self, workflow: Dict[str, Any]) -> WorkflowValidationResult:
        nodes = workflow.get("nodes") if isinstance(workflow, dict) else None
        if not isinstance(nodes, list):
            return WorkflowValidationResult(
                is_valid=False,
                issues=[ValidationIssue(type=IssueType.ERROR, message="Workflow must contain nodes array")],
            )

        issues: List[ValidationIssue] = []
        for node in nodes:
            issues.extend(await self.validate_node(node))
        issues.extend(self.validate_connections(workflow))
        issues.extend(self.suggest_improvements(workflow))

        modernized = None
        if any(issue.auto_fix for issue in issues):
            modernized, _ = apply_migrations(workflow)

        is_valid = not any(issue.type == IssueType.ERROR.value for issue in issues)
        logger.debug(f"Validated workflow with {len(nodes)} nodes: {len(issues)} issue(s), valid={is_valid}")
        return WorkflowValidationResult(is_valid=is_valid, issues=issues, modernized_workflow=modernized)

    async def validate_node(self, node: Any) -> List[ValidationIssue]:
        if not isinstance(node, dict):
            return [ValidationIssue(type=IssueType.ERROR, message="Workflow nodes must be objects")]

        node_id = node.get("id")
        node_name = node.get("name")
        node_type = node.get("type")

        definition = await self.catalog.get(node_type) if isinstance(node_type, str) else None
        if definition is None:
            return [ValidationIssue(
                type=IssueType.ERROR,
                node_id=node_id,
                node_name=node_name,
                message=f"Unknown node type: {node_type}",
            )]

        issues = []
        if definition.deprecated:
            issues.append(self._deprecation_issue(node, definition))
        issues.extend(self.validate_parameters(node, definition))
        return issues

    @staticmethod
    def _deprecation_issue(node: Dict[str, Any], definition: NodeTypeDefinition) -> ValidationIssue:
        message = f'Node "{node.get("name")}" uses deprecated type "{definition.type_id}".'
        if definition.replaced_by:
            message += f' Consider upgrading to "{definition.replaced_by}".'
            suggestion = f"Replace with {definition.replaced_by}"
        else:
            suggestion = "Replace this node with a supported alternative"
        return ValidationIssue(
            type=IssueType.WARNING,
            node_id=node.get("id"),
            node_name=node.get("name"),
            message=message,
            suggestion=suggestion,
            auto_fix=has_migration(definition.type_id),
        )

    def validate_parameters(self, node: Dict[str, Any], definition: NodeTypeDefinition) -> List[ValidationIssue]:
        issues = []
        parameters = node.get("parameters")
        if not isinstance(parameters, dict):
            parameters = {}

        for param in definition.parameters:
            value = parameters.get(param.name, _MISSING)

            if value is _MISSING or value is None or value == "":
                if param.required:
                    issues.append(ValidationIssue(
                        type=IssueType.ERROR,
                        node_id=node.get("id"),
                        node_name=node.get("name"),
                        parameter=param.name,
                        message=f'Missing required parameter "{param.name}" in node "{node.get("name")}"',
                        suggestion=f"Add value for {param.name}: {param.description or 'No description available'}",
                    ))
                continue

            check = self._value_checks.get(param.type)
            problem = check(value, param) if check else None
            if problem:
                message, suggestion = problem
                issues.append(ValidationIssue(
                    type=IssueType.ERROR,
                    node_id=node.get("id"),
                    node_name=node.get("name"),
                    parameter=param.name,
                    message=f'Invalid value for parameter "{param.name}": {message}',
                    suggestion=suggestion,
                ))
        return issues

    @staticmethod
    def _check_string(value: Any, param: ParameterDef) -> CheckResult:
        if not isinstance(value, str):
            return "Expected string value", "Provide a text value"
        rules = param.validation_rules or {}
        min_length = rules.get("minLength")
        if min_length and len(value) < min_length:
            return f"Minimum length is {min_length}", f"Provide at least {min_length} characters"
        pattern = rules.get("pattern")
        if pattern and not re.match(pattern, value):
            return f"Value does not match pattern {pattern}", "Provide a value in the expected format"
        return None

    @staticmethod
    def _check_number(value: Any, param: ParameterDef) -> CheckResult:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "Expected numeric value", "Provide a number"
        return None

    @staticmethod
    def _check_boolean(value: Any, param: ParameterDef) -> CheckResult:
        if not isinstance(value, bool):
            return "Expected boolean value", "Use true or false"
        return None

    @staticmethod
    def _check_options(value: Any, param: ParameterDef) -> CheckResult:
        options = param.options or []
        if value not in options:
            return f'Invalid option "{value}"', f"Choose from: {', '.join(str(option) for option in options)}"
        return None

    @staticmethod
    def _check_collection(value: Any, param: ParameterDef) -> CheckResult:
        if not isinstance(value, (dict, list)):
            return "Expected an object or list value", "Provide a JSON object or array"
        return None

    @staticmethod
    def validate_connections(workflow: Dict[str, Any]) -> List[ValidationIssue]:
        issues = []
        names = {node.get("name") for node in workflow.get("nodes") or [] if isinstance(node, dict)}
        connections = workflow.get("connections") or {}
        if not isinstance(connections, dict):
            return [ValidationIssue(type=IssueType.ERROR, message="Workflow connections must be an object")]

        for source, outputs in connections.items():
            if source not in names:
                issues.append(ValidationIssue(
                    type=IssueType.ERROR,
                    message=f'Connection source node "{source}" does not exist',
                    suggestion="Remove invalid connection or add missing node",
                ))

            ports = outputs.get("main") if isinstance(outputs, dict) else None
            for port in ports or []:
                for edge in port or []:
                    target = edge.get("node") if isinstance(edge, dict) else None
                    if target not in names:
                        issues.append(ValidationIssue(
                            type=IssueType.ERROR,
                            message=f'Connection target node "{target}" does not exist',
                            suggestion="Remove invalid connection or add missing node",
                        ))
        return issues

    @staticmethod
    def suggest_improvements(workflow: Dict[str, Any]) -> List[ValidationIssue]:
        suggestions = []
        types = [node.get("type") for node in workflow.get("nodes") or [] if isinstance(node, dict)]

        if types.count(SET) > 3:
            suggestions.append(ValidationIssue(
                type=IssueType.SUGGESTION,
                message="Consider using a Code node instead of multiple Set nodes for better performance.",
                suggestion="Combine multiple field operations into a single Code node.",
            ))

        if HTTP_REQUEST in types and IF not in types:
            suggestions.append(ValidationIssue(
                type=IssueType.SUGGESTION,
                message="Consider adding error handling for HTTP requests.",
                suggestion="Add If or Switch nodes to handle potential API failures gracefully.",
            ))
        return suggestions
