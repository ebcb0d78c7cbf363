"""Node catalog schemas."""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict, model_validator
from enum import Enum


class ParameterType(str, Enum):
    """Value types a node parameter can hold."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    COLLECTION = "collection"


class ParameterDef(BaseModel):
    """Schema for one parameter of a node type."""
    model_config = ConfigDict(use_enum_values=True)

    name: str = Field(..., min_length=1)
    type: ParameterType
    required: bool = False
    default_value: Optional[Any] = None
    description: str = ""
    options: Optional[List[Any]] = None
    validation_rules: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def check_options(self) -> "ParameterDef":
        if self.type == ParameterType.OPTIONS.value and not self.options:
            raise ValueError(f"Parameter '{self.name}' of type options needs a non-empty options list")
        return self


class NodeTypeDefinition(BaseModel):
    """Catalog entry describing an available node type."""
    type_id: str = Field(..., min_length=1)
    display_name: str
    category: str = "general"
    description: str = ""
    icon: Optional[str] = None
    version: int = 1
    deprecated: bool = False
    replaced_by: Optional[str] = None
    parameters: List[ParameterDef] = Field(default_factory=list)

    @property
    def short_name(self) -> str:
        """Trailing segment of the namespaced type id."""
        return self.type_id.rsplit(".", 1)[-1]

    def get_parameter(self, name: str) -> Optional[ParameterDef]:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None


class NodeTypeSummary(BaseModel):
    """Catalog entry without its parameter schema, for list views."""
    type_id: str
    display_name: str
    category: str
    description: str = ""
    version: int = 1
    deprecated: bool = False
    replaced_by: Optional[str] = None


class NodeCatalogResponse(BaseModel):
    """Response for catalog listing."""
    nodes: List[NodeTypeSummary]
    total: int
    degraded: bool = False


class NodeRecommendation(BaseModel):
    """A node type suggested for a user's intent."""
    type_id: str
    display_name: str
    category: str
    description: str = ""
    score: int
    reasoning: str


class RecommendationRequest(BaseModel):
    """Request body for node recommendations."""
    intent: str = Field(..., min_length=1, max_length=5000)
    current_nodes: List[str] = Field(default_factory=list, description="Type ids already in the workflow")


class RecommendationResponse(BaseModel):
    """Response for node recommendations."""
    intent: str
    keywords: List[str]
    recommendations: List[NodeRecommendation]


class StructureRequest(BaseModel):
    """Request body for workflow structure suggestions."""
    intent: str = Field(..., min_length=1, max_length=5000)


class WorkflowPattern(BaseModel):
    """A named, fixed sequence of node types for a common automation shape."""
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    nodes: List[str]
    use_case: str
    complexity: str


class StructureSuggestion(BaseModel):
    """Suggested node sequence for an intent."""
    suggested_nodes: List[str]
    reasoning: str
    pattern: Optional[WorkflowPattern] = None


class CacheInvalidateResponse(BaseModel):
    """Response after dropping the cached catalog."""
    invalidated: bool = True
    node_count: int
    degraded: bool = False
