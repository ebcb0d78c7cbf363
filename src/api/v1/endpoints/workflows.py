"""Workflow generation, validation and storage endpoints."""

import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db
from core.security import CurrentUser, get_current_user
from schemas.common import SuccessResponse
from schemas.workflow import (
    AutofixResult,
    ExportResponse,
    GenerateWorkflowRequest,
    GenerateWorkflowResponse,
    ScoreResponse,
    WorkflowCreate,
    WorkflowDocumentRequest,
    WorkflowListResponse,
    WorkflowResponse,
    WorkflowStatusUpdate,
    WorkflowValidationResult,
)
from services.generation import create_generation_service
from services.node_catalog import NodeCatalog, get_node_catalog
from services.validation import WorkflowScorer, WorkflowValidator, autofix
from services.workflow import check_document, check_unique_names, export_filename
from services.workflow_service import create_workflow_service

logger = logging.getLogger(__name__)

router = APIRouter()
workflow_service = create_workflow_service()


@router.post("/generate", response_model=GenerateWorkflowResponse, response_model_by_alias=True)
async def generate_workflow(
    request: GenerateWorkflowRequest,
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """
    Generate a workflow from a natural-language description.

    - **description**: What the workflow should do
    - **use_pattern**: Build from this named pattern instead of classifying the description
    """
    service = create_generation_service(catalog)
    return await service.generate(request.description, request.use_pattern)


@router.post("/validate", response_model=WorkflowValidationResult)
async def validate_workflow(
    request: WorkflowDocumentRequest,
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """Validate a workflow document against the node catalog."""
    return await WorkflowValidator(catalog).validate(request.workflow)


@router.post("/autofix", response_model=AutofixResult)
async def autofix_workflow(request: WorkflowDocumentRequest):
    """Upgrade deprecated nodes and legacy names in a workflow document."""
    fixed, changes = autofix(request.workflow)
    return AutofixResult(fixed=fixed, changes=changes)


@router.post("/score", response_model=ScoreResponse)
async def score_workflow(
    request: WorkflowDocumentRequest,
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """Score a workflow document for performance, security and maintainability."""
    validation = await WorkflowValidator(catalog).validate(request.workflow)
    scores = WorkflowScorer().score(request.workflow, validation)
    return ScoreResponse(
        scores=scores,
        is_valid=validation.is_valid,
        error_count=validation.error_count,
        warning_count=validation.warning_count,
    )


@router.post("/export", response_model=ExportResponse)
async def export_workflow_document(
    request: WorkflowDocumentRequest,
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """Prepare a workflow document for download, auto-fixing it when invalid.

    The returned document must have unique node names and the platform shape,
    otherwise the request fails with 422.
    """
    document = request.workflow
    changes = []

    validation = await WorkflowValidator(catalog).validate(document)
    if not validation.is_valid:
        document, changes = autofix(document)

    check_unique_names(document)
    check_document(document)

    return ExportResponse(
        filename=export_filename(str(document.get("name") or "workflow")),
        workflow=document,
        changes=changes,
    )


@router.post("", response_model=WorkflowResponse, status_code=status.HTTP_201_CREATED)
async def save_workflow(
    workflow_in: WorkflowCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Save a workflow for the current user."""
    return await workflow_service.save_workflow(db, current_user.id, workflow_in)


@router.get("", response_model=WorkflowListResponse)
async def list_workflows(
    skip: int = 0,
    limit: int = Query(100, le=1000),
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the current user's workflows plus public ones."""
    workflows, total = await workflow_service.list_workflows(db, current_user.id, skip, limit)
    return WorkflowListResponse(workflows=workflows, total=total)


@router.get("/{workflow_id}", response_model=WorkflowResponse)
async def get_workflow(
    workflow_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a single workflow."""
    return await workflow_service.get_workflow(db, workflow_id, current_user.id)


@router.patch("/{workflow_id}/status", response_model=WorkflowResponse)
async def update_workflow_status(
    workflow_id: str,
    update: WorkflowStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move a workflow between draft, deployed and active."""
    return await workflow_service.update_status(db, workflow_id, current_user.id, update.status)


@router.delete("/{workflow_id}", response_model=SuccessResponse)
async def delete_workflow(
    workflow_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a workflow owned by the current user."""
    await workflow_service.delete_workflow(db, workflow_id, current_user.id)
    return SuccessResponse(message=f"Workflow {workflow_id} deleted")
