"""Workflow template schemas."""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from enum import Enum


class TemplateDifficulty(str, Enum):
    """Template difficulty levels."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ExportFormat(str, Enum):
    """Serialization formats for template export."""
    JSON = "json"
    YAML = "yaml"


class WorkflowTemplateCreate(BaseModel):
    """Schema for saving a workflow as a template."""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    workflow_json: Dict[str, Any]
    category: str = Field("general", max_length=50)
    tags: List[str] = Field(default_factory=list)
    use_case: Optional[str] = None
    difficulty: TemplateDifficulty = TemplateDifficulty.BEGINNER
    is_public: bool = False


class WorkflowTemplateResponse(BaseModel):
    """Schema for a stored template."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    category: str
    tags: List[str] = Field(default_factory=list)
    use_case: Optional[str] = None
    workflow_json: Dict[str, Any]
    difficulty: TemplateDifficulty
    is_public: bool
    usage_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateListResponse(BaseModel):
    """Response for template listing."""
    templates: List[WorkflowTemplateResponse]
    total: int
