"""Writes the node reference table into the catalog database."""

import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.node_catalog import NodeDefinition, NodeParameter
from schemas.node_catalog import NodeTypeDefinition

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    """Counts from one seeding run."""
    inserted: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.inserted) + len(self.updated)


class NodeCatalogSeeder:
    """Insert-or-update node definitions and their parameter rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def seed(self, definitions: List[NodeTypeDefinition], dry_run: bool = False) -> SeedReport:
        report = SeedReport()

        result = await self.db.execute(select(NodeDefinition))
        existing = {row.node_type: row for row in result.scalars().all()}

        for definition in definitions:
            row = existing.get(definition.type_id)
            if row is None:
                report.inserted.append(definition.type_id)
                if not dry_run:
                    row = NodeDefinition(node_type=definition.type_id)
                    self._apply(row, definition)
                    self.db.add(row)
            else:
                report.updated.append(definition.type_id)
                if not dry_run:
                    self._apply(row, definition)

        if dry_run:
            logger.info(f"Dry run: would insert {len(report.inserted)} and update {len(report.updated)} node types")
            return report

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error("Node catalog seeding failed, changes rolled back")
            raise

        logger.info(f"Seeded node catalog: {len(report.inserted)} inserted, {len(report.updated)} updated")
        return report

    @staticmethod
    def _apply(row: NodeDefinition, definition: NodeTypeDefinition) -> None:
        row.display_name = definition.display_name
        row.category = definition.category
        row.description = definition.description
        row.icon = definition.icon
        row.version = definition.version
        row.deprecated = definition.deprecated
        row.replaced_by = definition.replaced_by
        # Existing rows are updated by name; rows for dropped parameters become orphans
        current = {parameter.parameter_name: parameter for parameter in row.parameters}
        parameters = []
        for position, param in enumerate(definition.parameters):
            parameter = current.pop(param.name, None) or NodeParameter(parameter_name=param.name)
            parameter.position = position
            parameter.parameter_type = param.type
            parameter.required = param.required
            parameter.default_value = param.default_value
            parameter.description = param.description
            parameter.options = param.options
            parameter.validation_rules = param.validation_rules
            parameters.append(parameter)
        row.parameters = parameters
