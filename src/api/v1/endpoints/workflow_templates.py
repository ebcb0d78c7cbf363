"""API endpoints for workflow templates."""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import CurrentUser, get_current_user, get_current_user_optional
from schemas.workflow_templates import (
    ExportFormat,
    TemplateListResponse,
    WorkflowTemplateCreate,
    WorkflowTemplateResponse,
)
from services.workflow_template_service import create_workflow_template_service
from services.workflow import export_filename

router = APIRouter(prefix="/workflow-templates", tags=["workflow-templates"])
template_service = create_workflow_template_service()


@router.post("", response_model=WorkflowTemplateResponse, status_code=status.HTTP_201_CREATED)
async def save_template(
    template_in: WorkflowTemplateCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Save a workflow as a template."""
    return await template_service.save_template(db, current_user.id, template_in)


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    category: Optional[str] = None,
    skip: int = 0,
    limit: int = Query(100, le=1000),
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """
    List accessible workflow templates.

    - **category**: Filter by template category
    - **skip**: Number of templates to skip
    - **limit**: Maximum number of templates to return
    """
    user_id = current_user.id if current_user else None
    templates, total = await template_service.list_templates(db, user_id, category, skip, limit)
    return TemplateListResponse(templates=templates, total=total)


@router.get("/{template_id}", response_model=WorkflowTemplateResponse)
async def get_template(
    template_id: str,
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Get a workflow template."""
    user_id = current_user.id if current_user else None
    template = await template_service.get_template(db, template_id, user_id)
    return WorkflowTemplateResponse.model_validate(template)


@router.get("/{template_id}/export")
async def export_template(
    template_id: str,
    format: ExportFormat = ExportFormat.JSON,
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
    db: AsyncSession = Depends(get_db),
):
    """Download a template's workflow as JSON or YAML."""
    user_id = current_user.id if current_user else None
    content, media_type = await template_service.export_template(db, template_id, user_id, format.value)

    filename = export_filename(template_id)
    if format == ExportFormat.YAML:
        filename = filename[:-len(".json")] + ".yaml"

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
