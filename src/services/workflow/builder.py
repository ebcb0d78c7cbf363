"""Assembles generated workflows for each workflow shape."""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional

from schemas.node_catalog import NodeRecommendation, WorkflowPattern
from schemas.workflow import GeneratedNode, GeneratedWorkflow, WorkflowType
from .code_generators import CodeGenerators
from .connection_manager import ConnectionManager, Connections
from .node_factory import NodeFactory, START_X, START_Y, X_STEP, default_parameters, display_name

logger = logging.getLogger(__name__)

WEBHOOK = "n8n-nodes-base.webhook"
CODE = "n8n-nodes-base.code"
SET = "n8n-nodes-base.set"
HTTP_REQUEST = "n8n-nodes-base.httpRequest"
IF = "n8n-nodes-base.if"
CRON = "n8n-nodes-base.cron"
MANUAL_TRIGGER = "n8n-nodes-base.manualTrigger"

# Shape reported for pattern builds, by the pattern's first node
TRIGGER_WORKFLOW_TYPES = {
    WEBHOOK: WorkflowType.WEBHOOK,
    CRON: WorkflowType.SCHEDULED,
}


def _mentions(description: str, *terms: str) -> bool:
    text = description.lower()
    return any(term in text for term in terms)


def _timestamp_field(name: str) -> Dict[str, str]:
    return {"name": name, "type": "stringValue", "stringValue": "={{ new Date().toISOString() }}"}


def _fetch_parameters() -> Dict[str, str]:
    return {"url": "https://api.example.com/data", "method": "GET", "authentication": "none"}


class WorkflowBuilder:
    """Builds a workflow for a classified shape or a named pattern.

    Main-chain nodes start at (240, 300) and step 220 to the right. The
    conditional shape places its two branch nodes in the same column at
    y - 100 and y + 100.
    """

    def __init__(self):
        self._strategies: Dict[WorkflowType, Callable[[NodeFactory, str], List[GeneratedNode]]] = {
            WorkflowType.WEBHOOK: self._webhook_nodes,
            WorkflowType.SCHEDULED: self._scheduled_nodes,
            WorkflowType.CONDITIONAL: self._conditional_nodes,
            WorkflowType.DATA_PROCESSING: self._data_processing_nodes,
            WorkflowType.BASIC: self._basic_nodes,
        }

    def build(
        self,
        workflow_type: WorkflowType,
        description: str,
        recommended_nodes: Optional[Iterable[NodeRecommendation]] = None,
    ) -> GeneratedWorkflow:
        """Build the workflow for ``workflow_type``.

        ``recommended_nodes`` are recorded on the log only; each shape has
        a fixed node layout.
        """
        factory = NodeFactory()
        nodes = self._strategies[WorkflowType(workflow_type)](factory, description)

        if workflow_type == WorkflowType.CONDITIONAL:
            connections = ConnectionManager.conditional(nodes)
        else:
            connections = ConnectionManager.linear(nodes)

        if recommended_nodes:
            logger.debug(
                f"Built {workflow_type} workflow; recommended types: "
                f"{[rec.type_id for rec in recommended_nodes]}"
            )
        return self._workflow(description, WorkflowType(workflow_type), nodes, connections)

    def build_from_pattern(self, pattern: WorkflowPattern, description: str) -> GeneratedWorkflow:
        """One node per pattern type, linear chain, default parameters."""
        factory = NodeFactory()
        nodes = []
        x = START_X
        for type_id in pattern.nodes:
            nodes.append(factory.create(display_name(type_id), type_id, x, START_Y,
                                        default_parameters(type_id, description)))
            x += X_STEP

        trigger = pattern.nodes[0] if pattern.nodes else None
        workflow_type = TRIGGER_WORKFLOW_TYPES.get(trigger, WorkflowType.BASIC)
        workflow = self._workflow(description, workflow_type, nodes, ConnectionManager.linear(nodes))
        workflow.matched_patterns = [pattern.name]
        return workflow

    @staticmethod
    def _workflow(
        description: str,
        workflow_type: WorkflowType,
        nodes: List[GeneratedNode],
        connections: Connections,
    ) -> GeneratedWorkflow:
        return GeneratedWorkflow(
            id=str(uuid.uuid4()),
            name=CodeGenerators.workflow_name(description),
            description=description,
            workflow_type=workflow_type,
            nodes=nodes,
            connections=connections,
        )

    # Strategies

    @staticmethod
    def _webhook_nodes(factory: NodeFactory, description: str) -> List[GeneratedNode]:
        x = START_X
        nodes = [factory.create("Webhook", WEBHOOK, x, START_Y, {
            "path": CodeGenerators.webhook_path(description),
            "httpMethod": CodeGenerators.http_method(description),
            "responseMode": "onReceived",
        })]
        x += X_STEP

        if _mentions(description, "validate", "check"):
            nodes.append(factory.create("Validate Input", IF, x, START_Y, {
                "conditions": {
                    "options": {
                        "caseSensitive": True,
                        "leftValue": "={{ Object.keys($json).length }}",
                        "operation": "larger",
                        "rightValue": 0,
                    }
                }
            }))
            x += X_STEP

        if _mentions(description, "process", "transform"):
            nodes.append(factory.create("Process Data", CODE, x, START_Y, {
                "jsCode": CodeGenerators.processing_code(description),
                "mode": "runOnceForAllItems",
            }))
            x += X_STEP

        nodes.append(factory.create("Format Response", SET, x, START_Y, {
            "fields": {
                "values": [
                    {"name": "success", "type": "booleanValue", "booleanValue": True},
                    {"name": "message", "type": "stringValue", "stringValue": "Request processed successfully"},
                    _timestamp_field("timestamp"),
                ]
            }
        }))
        return nodes

    @staticmethod
    def _scheduled_nodes(factory: NodeFactory, description: str) -> List[GeneratedNode]:
        x = START_X
        nodes = [factory.create("Schedule Trigger", CRON, x, START_Y, {
            "triggerTimes": {"item": [{"mode": "everyMinute"}]},
        })]
        x += X_STEP

        if _mentions(description, "api", "fetch"):
            nodes.append(factory.create("Fetch Data", HTTP_REQUEST, x, START_Y, _fetch_parameters()))
            x += X_STEP

        nodes.append(factory.create("Process Scheduled Task", CODE, x, START_Y, {
            "jsCode": CodeGenerators.scheduled_processing_code(description),
            "mode": "runOnceForAllItems",
        }))
        return nodes

    @staticmethod
    def _conditional_nodes(factory: NodeFactory, description: str) -> List[GeneratedNode]:
        x = START_X
        nodes = [factory.create("Webhook", WEBHOOK, x, START_Y, {
            "path": CodeGenerators.webhook_path(description),
            "httpMethod": "POST",
        })]
        x += X_STEP

        nodes.append(factory.create("Check Condition", IF, x, START_Y, {
            "conditions": {
                "options": {
                    "caseSensitive": True,
                    "leftValue": "={{ $json.status }}",
                    "operation": "equal",
                    "rightValue": "active",
                }
            }
        }))
        x += X_STEP

        nodes.append(factory.create("Handle True Case", SET, x, START_Y - 100, {
            "fields": {
                "values": [
                    {"name": "result", "type": "stringValue", "stringValue": "Condition met - processing approved"},
                    {"name": "action", "type": "stringValue", "stringValue": "approved"},
                ]
            }
        }))
        nodes.append(factory.create("Handle False Case", SET, x, START_Y + 100, {
            "fields": {
                "values": [
                    {"name": "result", "type": "stringValue", "stringValue": "Condition not met - processing rejected"},
                    {"name": "action", "type": "stringValue", "stringValue": "rejected"},
                ]
            }
        }))
        return nodes

    @staticmethod
    def _data_processing_nodes(factory: NodeFactory, description: str) -> List[GeneratedNode]:
        x = START_X
        nodes = [factory.create("Manual Trigger", MANUAL_TRIGGER, x, START_Y, {})]
        x += X_STEP

        if _mentions(description, "api", "fetch"):
            nodes.append(factory.create("Fetch Data", HTTP_REQUEST, x, START_Y, _fetch_parameters()))
            x += X_STEP

        nodes.append(factory.create("Process Data", CODE, x, START_Y, {
            "jsCode": CodeGenerators.advanced_processing_code(description),
            "mode": "runOnceForAllItems",
        }))
        x += X_STEP

        nodes.append(factory.create("Format Output", SET, x, START_Y, {
            "fields": {
                "values": [
                    {"name": "processed_data", "type": "stringValue", "stringValue": "={{ JSON.stringify($json) }}"},
                    _timestamp_field("processing_time"),
                ]
            }
        }))
        return nodes

    @staticmethod
    def _basic_nodes(factory: NodeFactory, description: str) -> List[GeneratedNode]:
        return [
            factory.create("Manual Trigger", MANUAL_TRIGGER, START_X, START_Y, {}),
            factory.create("Process Data", CODE, START_X + X_STEP, START_Y, {
                "jsCode": CodeGenerators.basic_processing_code(description),
                "mode": "runOnceForAllItems",
            }),
        ]
