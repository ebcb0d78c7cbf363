"""Performance, security and maintainability scoring of workflow documents."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from schemas.workflow import IssueType, ScoreReport, WorkflowValidationResult

logger = logging.getLogger(__name__)

HTTP_REQUEST = "n8n-nodes-base.httpRequest"
SET = "n8n-nodes-base.set"
CODE = "n8n-nodes-base.code"
IF = "n8n-nodes-base.if"
WEBHOOK = "n8n-nodes-base.webhook"

SECRET_TERMS = ("password", "token", "key")
EXPRESSION_MARKER = re.compile(r"\{\{|\$")
DEFAULT_NAME_PREFIX = re.compile(r"^(Node|Untitled)")


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def _of_type(nodes: List[Dict[str, Any]], type_id: str) -> List[Dict[str, Any]]:
    return [node for node in nodes if node.get("type") == type_id]


def _parameters(node: Dict[str, Any]) -> Dict[str, Any]:
    parameters = node.get("parameters")
    return parameters if isinstance(parameters, dict) else {}


def _allowed_origins(node: Dict[str, Any]) -> Any:
    options = _parameters(node).get("options")
    return options.get("allowedOrigins") if isinstance(options, dict) else None


def _is_unauthenticated(node: Dict[str, Any]) -> bool:
    return _parameters(node).get("authentication", "none") in (None, "", "none")


def _has_default_name(node: Dict[str, Any]) -> bool:
    name = node.get("name") or ""
    type_id = node.get("type") or ""
    return name == type_id.split(".")[-1] or bool(DEFAULT_NAME_PREFIX.match(name))


class WorkflowScorer:
    """Scores a workflow document on three axes, each clamped to 0-100."""

    def score(
        self,
        workflow: Dict[str, Any],
        validation: Optional[WorkflowValidationResult] = None,
    ) -> ScoreReport:
        nodes = [node for node in workflow.get("nodes") or [] if isinstance(node, dict)]
        report = ScoreReport(
            performance=self.performance_score(nodes),
            security=self.security_score(nodes),
            maintainability=self.maintainability_score(nodes),
            recommendations=self.recommendations(nodes, validation),
        )
        logger.debug(
            f"Scored workflow: performance={report.performance} "
            f"security={report.security} maintainability={report.maintainability}"
        )
        return report

    @staticmethod
    def performance_score(nodes: List[Dict[str, Any]]) -> int:
        score = 100
        http_count = len(_of_type(nodes, HTTP_REQUEST))
        set_count = len(_of_type(nodes, SET))

        if http_count > 5:
            score -= (http_count - 5) * 10
        if set_count > 3:
            score -= (set_count - 3) * 5
        if _of_type(nodes, CODE) and set_count <= 2:
            score += 10
        return _clamp(score)

    @staticmethod
    def security_score(nodes: List[Dict[str, Any]]) -> int:
        score = 100
        for node in nodes:
            serialized = json.dumps(_parameters(node))
            if any(term in serialized for term in SECRET_TERMS) and not EXPRESSION_MARKER.search(serialized):
                # Looks like a literal credential
                score -= 20

        score -= 5 * sum(1 for node in _of_type(nodes, HTTP_REQUEST) if _is_unauthenticated(node))

        open_webhooks = [node for node in _of_type(nodes, WEBHOOK) if not _allowed_origins(node)]
        score -= 10 * len(open_webhooks)
        return _clamp(score)

    @staticmethod
    def maintainability_score(nodes: List[Dict[str, Any]]) -> int:
        score = 100
        score -= 5 * sum(1 for node in nodes if _has_default_name(node))

        if len(nodes) > 20:
            score -= (len(nodes) - 20) * 2

        has_http = bool(_of_type(nodes, HTTP_REQUEST))
        has_if = bool(_of_type(nodes, IF))
        mentions_error = any("error" in json.dumps(_parameters(node)) for node in nodes)
        if has_http and not has_if and not mentions_error:
            score -= 15

        if any("//" in str(_parameters(node).get("jsCode") or "") for node in _of_type(nodes, CODE)):
            score += 10
        return _clamp(score)

    @staticmethod
    def recommendations(
        nodes: List[Dict[str, Any]],
        validation: Optional[WorkflowValidationResult] = None,
    ) -> List[str]:
        recommendations = []
        http_nodes = _of_type(nodes, HTTP_REQUEST)

        if len(_of_type(nodes, SET)) > 3:
            recommendations.append(
                "Consider consolidating multiple Set nodes into a single Code node for better performance"
            )
        if any(_is_unauthenticated(node) for node in http_nodes):
            recommendations.append("Add proper authentication to HTTP Request nodes for security")
        if http_nodes and not _of_type(nodes, IF):
            recommendations.append("Add error handling with If nodes to make your workflow more robust")
        if any(_has_default_name(node) for node in nodes):
            recommendations.append("Rename nodes with descriptive names to improve workflow readability")
        if validation and any(
            issue.type == IssueType.WARNING.value and issue.auto_fix for issue in validation.issues
        ):
            recommendations.append("Update deprecated nodes to their modern equivalents for better compatibility")
        return recommendations
