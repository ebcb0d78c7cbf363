"""Workflow template model."""

from sqlalchemy import Column, String, Text, JSON, Boolean, Index, Integer, Enum
from sqlalchemy.dialects.postgresql import ARRAY

from .base import Base, TimestampMixin, UUIDMixin


class WorkflowTemplate(UUIDMixin, TimestampMixin, Base):
    """Reusable workflow saved from a generated or imported workflow."""
    __tablename__ = "workflow_templates"

    user_id = Column(String(36), nullable=False)

    # Basic information
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(50), nullable=False, default="general")
    tags = Column(ARRAY(Text), default=list)
    use_case = Column(Text)

    workflow_json = Column(JSON, nullable=False)

    difficulty = Column(
        Enum("beginner", "intermediate", "advanced", name="template_difficulty"),
        nullable=False,
        default="beginner",
    )
    is_public = Column(Boolean, nullable=False, default=False)
    usage_count = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_workflow_templates_category", "category"),
        Index("idx_workflow_templates_user", "user_id"),
        Index("idx_workflow_templates_public", "is_public"),
    )
