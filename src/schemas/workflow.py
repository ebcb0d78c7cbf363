"""Workflow generation, validation and persistence schemas."""

from typing import Optional, List, Dict, Any, Tuple
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from enum import Enum

from core.exceptions import ValidationError


class WorkflowType(str, Enum):
    """Workflow shapes the classifier can produce."""
    WEBHOOK = "webhook"
    SCHEDULED = "scheduled"
    CONDITIONAL = "conditional"
    DATA_PROCESSING = "data_processing"
    BASIC = "basic"


class WorkflowStatus(str, Enum):
    """Lifecycle states of a saved workflow."""
    DRAFT = "draft"
    DEPLOYED = "deployed"
    ACTIVE = "active"


class IssueType(str, Enum):
    """Severity of a validation issue."""
    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


# Generated graph
class ConnectionTarget(BaseModel):
    """Edge endpoint, referencing the target node by id."""
    node_id: str
    index: int = 0


class GeneratedNode(BaseModel):
    """A node instance placed into a generated workflow."""
    id: str
    name: str
    type: str
    type_version: int = 1
    position: Tuple[int, int]
    parameters: Dict[str, Any] = Field(default_factory=dict)
    webhook_id: Optional[str] = None

    @property
    def short_type(self) -> str:
        return self.type.rsplit(".", 1)[-1]

    def to_document(self) -> Dict[str, Any]:
        document = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "typeVersion": self.type_version,
            "position": [self.position[0], self.position[1]],
            "parameters": self.parameters,
        }
        if self.webhook_id:
            document["webhookId"] = self.webhook_id
        return document


class GeneratedWorkflow(BaseModel):
    """Workflow produced by the builder.

    Connections are keyed by node id: ``{source_id: [[target, ...], ...]}``
    where the outer list holds one entry per output port. The name-keyed
    wire format is produced only by ``to_document``.
    """
    id: str
    name: str
    description: str = ""
    workflow_type: WorkflowType = WorkflowType.BASIC
    nodes: List[GeneratedNode] = Field(default_factory=list)
    connections: Dict[str, List[List[ConnectionTarget]]] = Field(default_factory=dict)
    matched_patterns: List[str] = Field(default_factory=list)

    def node_by_id(self, node_id: str) -> Optional[GeneratedNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_document(self, active: bool = False) -> Dict[str, Any]:
        """Project to the name-keyed platform document.

        Raises ValidationError when node names collide or a connection
        references an id that is not in the workflow.
        """
        seen = set()
        duplicates = set()
        for node in self.nodes:
            if node.name in seen:
                duplicates.add(node.name)
            seen.add(node.name)
        if duplicates:
            raise ValidationError(
                "Node names must be unique within a workflow",
                details={"duplicate_names": sorted(duplicates)},
            )

        id_to_name = {node.id: node.name for node in self.nodes}
        connections: Dict[str, Any] = {}
        for source_id, outputs in self.connections.items():
            if source_id not in id_to_name:
                raise ValidationError(
                    f"Connection source node id '{source_id}' does not exist",
                    details={"node_id": source_id},
                )
            ports = []
            for port in outputs:
                edges = []
                for target in port:
                    if target.node_id not in id_to_name:
                        raise ValidationError(
                            f"Connection target node id '{target.node_id}' does not exist",
                            details={"node_id": target.node_id},
                        )
                    edges.append({"node": id_to_name[target.node_id], "type": "main", "index": target.index})
                ports.append(edges)
            connections[id_to_name[source_id]] = {"main": ports}

        return {
            "name": self.name,
            "nodes": [node.to_document() for node in self.nodes],
            "connections": connections,
            "active": active,
            "settings": {},
        }

    def preview_nodes(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": node.id,
                "name": node.name,
                "type": node.short_type,
                "position": [node.position[0], node.position[1]],
            }
            for node in self.nodes
        ]

    def preview_connections(self) -> List[Dict[str, str]]:
        id_to_name = {node.id: node.name for node in self.nodes}
        edges = []
        for source_id, outputs in self.connections.items():
            for port in outputs:
                for target in port:
                    edges.append({
                        "from": id_to_name.get(source_id, source_id),
                        "to": id_to_name.get(target.node_id, target.node_id),
                    })
        return edges


# Validation
class ValidationIssue(BaseModel):
    """A single finding from workflow validation."""
    model_config = ConfigDict(use_enum_values=True)

    type: IssueType
    node_id: Optional[str] = None
    node_name: Optional[str] = None
    parameter: Optional[str] = None
    message: str
    suggestion: Optional[str] = None
    auto_fix: bool = False


class WorkflowValidationResult(BaseModel):
    """Outcome of validating a workflow document."""
    is_valid: bool
    issues: List[ValidationIssue] = Field(default_factory=list)
    modernized_workflow: Optional[Dict[str, Any]] = None

    def count(self, issue_type: IssueType) -> int:
        return sum(1 for issue in self.issues if issue.type == issue_type.value)

    @property
    def error_count(self) -> int:
        return self.count(IssueType.ERROR)

    @property
    def warning_count(self) -> int:
        return self.count(IssueType.WARNING)


class AutofixResult(BaseModel):
    """Auto-fixed copy of a workflow with a description of each change."""
    fixed: Dict[str, Any]
    changes: List[str] = Field(default_factory=list)


class ScoreReport(BaseModel):
    """Heuristic quality scores for a workflow."""
    performance: int = Field(..., ge=0, le=100)
    security: int = Field(..., ge=0, le=100)
    maintainability: int = Field(..., ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)


class WorkflowInsights(BaseModel):
    """Summary metrics shown alongside a generated workflow."""
    complexity: str
    complexity_score: int
    estimated_execution_time: str
    recommendations: List[str] = Field(default_factory=list)
    node_count: int
    connection_count: int
    matched_patterns: List[str] = Field(default_factory=list)


# API request/response
class WorkflowDocumentRequest(BaseModel):
    """Request body carrying a platform workflow document."""
    workflow: Dict[str, Any]


class GenerateWorkflowRequest(BaseModel):
    """Request body for workflow generation."""
    description: str = Field(..., min_length=1, max_length=5000)
    use_pattern: Optional[str] = Field(None, description="Build from the named pattern instead of classifying")


class GeneratedWorkflowPayload(BaseModel):
    """Generated workflow as returned to clients."""
    id: str
    name: str
    description: str
    workflow_type: WorkflowType
    nodes: List[Dict[str, Any]]
    connections: List[Dict[str, str]]
    json_document: Dict[str, Any] = Field(..., alias="json")

    model_config = ConfigDict(populate_by_name=True)


class GenerateWorkflowResponse(BaseModel):
    """Response for workflow generation."""
    workflow: GeneratedWorkflowPayload
    validation: WorkflowValidationResult
    scores: ScoreReport
    insights: WorkflowInsights
    quality_score: int
    message: str
    degraded: bool = False


class ScoreResponse(BaseModel):
    """Scores plus a validation summary."""
    scores: ScoreReport
    is_valid: bool
    error_count: int
    warning_count: int


class ExportResponse(BaseModel):
    """Exported workflow document ready for download."""
    filename: str
    workflow: Dict[str, Any]
    changes: List[str] = Field(default_factory=list)


# Persistence
class WorkflowCreate(BaseModel):
    """Schema for saving a workflow."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    workflow_type: Optional[WorkflowType] = None
    workflow_json: Dict[str, Any]
    conversation_id: Optional[str] = Field(None, max_length=36)
    is_public: bool = False


class WorkflowStatusUpdate(BaseModel):
    """Schema for changing a workflow's status."""
    status: WorkflowStatus


class WorkflowResponse(BaseModel):
    """Schema for a saved workflow."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    conversation_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    workflow_type: Optional[str] = None
    workflow_json: Dict[str, Any]
    status: WorkflowStatus
    is_public: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkflowListResponse(BaseModel):
    """Response for workflow listing."""
    workflows: List[WorkflowResponse]
    total: int
