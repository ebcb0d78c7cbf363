"""Workflow template service for saving, listing and exporting templates."""

import json
import logging
from typing import List, Optional, Tuple

import yaml
from sqlalchemy import select, or_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.workflow_templates import WorkflowTemplate
from schemas.workflow_templates import ExportFormat, WorkflowTemplateCreate, WorkflowTemplateResponse
from core.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.YAML: "application/x-yaml",
}


class WorkflowTemplateService:
    """Service for managing workflow templates."""

    async def save_template(
        self,
        db: AsyncSession,
        user_id: Optional[str],
        create_data: WorkflowTemplateCreate
    ) -> WorkflowTemplateResponse:
        """Save a workflow as a reusable template."""
        if not user_id:
            raise UnauthorizedError("User not authenticated")

        template = WorkflowTemplate(
            **create_data.model_dump(mode="json"),
            user_id=user_id,
            usage_count=0,
        )

        db.add(template)
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to save template '{create_data.name}': {e}")
            raise
        await db.refresh(template)

        logger.info(f"User {user_id} saved template {template.id}")
        return WorkflowTemplateResponse.model_validate(template)

    async def list_templates(
        self,
        db: AsyncSession,
        user_id: Optional[str],
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[WorkflowTemplateResponse], int]:
        """List public templates plus the user's own, optionally by category."""
        if user_id:
            conditions = [or_(WorkflowTemplate.user_id == user_id, WorkflowTemplate.is_public == True)]  # noqa: E712
        else:
            conditions = [WorkflowTemplate.is_public == True]  # noqa: E712
        if category:
            conditions.append(WorkflowTemplate.category == category)

        count_result = await db.execute(select(func.count(WorkflowTemplate.id)).where(*conditions))
        total = count_result.scalar() or 0

        query = (
            select(WorkflowTemplate)
            .where(*conditions)
            .order_by(WorkflowTemplate.usage_count.desc(), WorkflowTemplate.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        templates = result.scalars().all()

        return [WorkflowTemplateResponse.model_validate(t) for t in templates], total

    async def get_template(
        self,
        db: AsyncSession,
        template_id: str,
        user_id: Optional[str]
    ) -> WorkflowTemplate:
        """Get a template the user may see."""
        result = await db.execute(select(WorkflowTemplate).where(WorkflowTemplate.id == template_id))
        template = result.scalar_one_or_none()

        if not template:
            raise NotFoundError(f"Template {template_id} not found")
        if not template.is_public and template.user_id != user_id:
            raise ForbiddenError("Access denied to this template")
        return template

    async def export_template(
        self,
        db: AsyncSession,
        template_id: str,
        user_id: Optional[str],
        format: str = ExportFormat.JSON.value
    ) -> Tuple[str, str]:
        """Serialize a template's workflow and count the export as a use.

        Returns the content and its media type.
        """
        try:
            export_format = ExportFormat(format)
        except ValueError:
            raise BadRequestError(f"Unsupported export format: {format}")

        template = await self.get_template(db, template_id, user_id)
        content = self.serialize(template.workflow_json, export_format)

        template.usage_count = (template.usage_count or 0) + 1
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to record export of template {template_id}: {e}")
            raise

        return content, CONTENT_TYPES[export_format]

    @staticmethod
    def serialize(workflow_json: dict, export_format: ExportFormat) -> str:
        if export_format == ExportFormat.YAML:
            return yaml.safe_dump(workflow_json, default_flow_style=False, sort_keys=False)
        return json.dumps(workflow_json, indent=2)


def create_workflow_template_service() -> WorkflowTemplateService:
    """Create the workflow template service."""
    return WorkflowTemplateService()
