"""Node catalog models.

One row per node type in ``node_definitions`` and one row per parameter
in ``node_parameters``. Rows are written only by the catalog seeder.
"""

from sqlalchemy import Column, String, Text, JSON, Boolean, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from .base import Base, TimestampMixin, UUIDMixin


class NodeDefinition(UUIDMixin, TimestampMixin, Base):
    """Catalog entry for a workflow node type."""
    __tablename__ = "node_definitions"

    node_type = Column(String(255), nullable=False, unique=True)
    display_name = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False, default="general")
    description = Column(Text)
    icon = Column(String(50))
    version = Column(Integer, nullable=False, default=1)

    # Deprecation
    deprecated = Column(Boolean, nullable=False, default=False)
    replaced_by = Column(String(255))

    parameters = relationship(
        "NodeParameter",
        back_populates="node_definition",
        cascade="all, delete-orphan",
        order_by="NodeParameter.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_node_definitions_category", "category"),
        Index("idx_node_definitions_deprecated", "deprecated"),
    )

    def __repr__(self):
        return f"<NodeDefinition(node_type='{self.node_type}', version={self.version})>"


class NodeParameter(UUIDMixin, Base):
    """Parameter schema entry belonging to one node definition."""
    __tablename__ = "node_parameters"

    node_definition_id = Column(
        String(36),
        ForeignKey("node_definitions.id", ondelete="CASCADE"),
        nullable=False,
    )
    position = Column(Integer, nullable=False, default=0)
    parameter_name = Column(String(255), nullable=False)
    parameter_type = Column(String(20), nullable=False)
    required = Column(Boolean, nullable=False, default=False)
    default_value = Column(JSON)
    description = Column(Text)
    options = Column(JSON)
    validation_rules = Column(JSON)

    node_definition = relationship("NodeDefinition", back_populates="parameters")

    __table_args__ = (
        Index("idx_node_parameters_definition", "node_definition_id"),
        Index("unique_node_parameter_name", "node_definition_id", "parameter_name", unique=True),
    )
