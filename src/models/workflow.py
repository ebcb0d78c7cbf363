"""Persisted workflow model."""

from sqlalchemy import Column, String, Text, JSON, Boolean, Index, Enum

from .base import Base, TimestampMixin, UUIDMixin


class Workflow(UUIDMixin, TimestampMixin, Base):
    """A generated workflow saved by a user.

    ``workflow_json`` holds the exported document exactly as the
    automation platform expects it.
    """
    __tablename__ = "workflows"

    user_id = Column(String(36), nullable=False)
    conversation_id = Column(String(36))

    name = Column(String(255), nullable=False)
    description = Column(Text)
    workflow_type = Column(String(50))
    workflow_json = Column(JSON, nullable=False)

    status = Column(
        Enum("draft", "deployed", "active", name="workflow_status"),
        nullable=False,
        default="draft",
    )
    is_public = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_workflows_user", "user_id"),
        Index("idx_workflows_conversation", "conversation_id"),
        Index("idx_workflows_public", "is_public"),
    )
