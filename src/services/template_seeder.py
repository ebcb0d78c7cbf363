"""Inserts the packaged starter templates into the template store."""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import ReferenceDataError, ValidationError
from models.workflow_templates import WorkflowTemplate
from schemas.workflow_templates import WorkflowTemplateCreate
from services.node_seeder import SeedReport
from services.workflow.export import check_document

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_PATH = Path(__file__).parent / "data" / "starter_templates.yaml"


def load_starter_templates(path: Optional[Path] = None) -> List[WorkflowTemplateCreate]:
    """Read the starter templates and check each document's shape."""
    path = Path(path or settings.STARTER_TEMPLATES_PATH or DEFAULT_TEMPLATES_PATH)
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)

    templates = []
    for row in (raw or {}).get("templates") or []:
        try:
            template = WorkflowTemplateCreate.model_validate(row)
            check_document(template.workflow_json)
        except PydanticValidationError as e:
            raise ReferenceDataError(
                f"Invalid starter template {row.get('name', '?')}",
                details={"errors": e.errors(include_url=False)},
            )
        except ValidationError as e:
            raise ReferenceDataError(f"Invalid starter template {row.get('name', '?')}", details=e.details)
        templates.append(template)

    logger.debug(f"Loaded {len(templates)} starter templates from {path}")
    return templates


class WorkflowTemplateSeeder:
    """Insert starter templates that are not stored yet.

    A template counts as stored when a public template, or one owned by the
    seeding user, has the same name. Stored templates are never modified.
    """

    def __init__(self, db: AsyncSession, owner_id: Optional[str] = None):
        self.db = db
        self.owner_id = owner_id or settings.TEMPLATE_SEED_OWNER_ID

    async def seed(self, templates: List[WorkflowTemplateCreate], dry_run: bool = False) -> SeedReport:
        report = SeedReport()

        result = await self.db.execute(
            select(WorkflowTemplate.name).where(
                or_(WorkflowTemplate.is_public.is_(True), WorkflowTemplate.user_id == self.owner_id)
            )
        )
        existing = set(result.scalars().all())

        for template in templates:
            if template.name in existing:
                logger.info(f"Template '{template.name}' already exists")
                report.skipped.append(template.name)
                continue
            report.inserted.append(template.name)
            existing.add(template.name)
            if not dry_run:
                self.db.add(WorkflowTemplate(
                    **template.model_dump(mode="json"),
                    user_id=self.owner_id,
                    usage_count=0,
                ))

        if dry_run or not report.inserted:
            logger.info(f"{'Dry run: would insert' if dry_run else 'Inserted'} {len(report.inserted)} starter templates")
            return report

        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error("Template seeding failed, changes rolled back")
            raise

        logger.info(f"Inserted {len(report.inserted)} starter templates")
        return report
