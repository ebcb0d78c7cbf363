"""Persistence of generated workflows."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select, or_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from models.workflow import Workflow
from schemas.workflow import WorkflowCreate, WorkflowResponse, WorkflowStatus
from core.exceptions import NotFoundError, ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)


class WorkflowService:
    """Service for saving and managing user workflows."""

    async def save_workflow(
        self,
        db: AsyncSession,
        user_id: Optional[str],
        create_data: WorkflowCreate
    ) -> WorkflowResponse:
        """Save a workflow for the given user."""
        if not user_id:
            raise UnauthorizedError("User not authenticated")

        workflow = Workflow(
            user_id=user_id,
            conversation_id=create_data.conversation_id,
            name=create_data.name,
            description=create_data.description,
            workflow_type=create_data.workflow_type.value if create_data.workflow_type else None,
            workflow_json=create_data.workflow_json,
            status=WorkflowStatus.DRAFT.value,
            is_public=create_data.is_public,
        )

        db.add(workflow)
        await self._commit(db, f"save workflow '{create_data.name}'")
        await db.refresh(workflow)

        logger.info(f"User {user_id} saved workflow {workflow.id}")
        return WorkflowResponse.model_validate(workflow)

    async def list_workflows(
        self,
        db: AsyncSession,
        user_id: str,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[WorkflowResponse], int]:
        """List workflows owned by the user or shared publicly, newest first."""
        visible = or_(Workflow.user_id == user_id, Workflow.is_public == True)  # noqa: E712

        count_result = await db.execute(select(func.count(Workflow.id)).where(visible))
        total = count_result.scalar() or 0

        query = (
            select(Workflow)
            .where(visible)
            .order_by(Workflow.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(query)
        workflows = result.scalars().all()

        return [WorkflowResponse.model_validate(w) for w in workflows], total

    async def get_workflow(
        self,
        db: AsyncSession,
        workflow_id: str,
        user_id: str
    ) -> WorkflowResponse:
        """Get a workflow visible to the user."""
        workflow = await self._get(db, workflow_id)
        if workflow.user_id != user_id and not workflow.is_public:
            raise ForbiddenError("Access denied to this workflow")
        return WorkflowResponse.model_validate(workflow)

    async def update_status(
        self,
        db: AsyncSession,
        workflow_id: str,
        user_id: str,
        status: WorkflowStatus
    ) -> WorkflowResponse:
        """Change the lifecycle status of an owned workflow."""
        workflow = await self._get_owned(db, workflow_id, user_id)
        workflow.status = WorkflowStatus(status).value

        await self._commit(db, f"update status of workflow {workflow_id}")
        await db.refresh(workflow)

        logger.info(f"Workflow {workflow_id} status set to {workflow.status}")
        return WorkflowResponse.model_validate(workflow)

    async def delete_workflow(
        self,
        db: AsyncSession,
        workflow_id: str,
        user_id: str
    ) -> None:
        """Delete an owned workflow."""
        workflow = await self._get_owned(db, workflow_id, user_id)
        await db.delete(workflow)
        await self._commit(db, f"delete workflow {workflow_id}")
        logger.info(f"User {user_id} deleted workflow {workflow_id}")

    async def _get(self, db: AsyncSession, workflow_id: str) -> Workflow:
        result = await db.execute(select(Workflow).where(Workflow.id == workflow_id))
        workflow = result.scalar_one_or_none()
        if not workflow:
            raise NotFoundError(f"Workflow {workflow_id} not found")
        return workflow

    async def _get_owned(self, db: AsyncSession, workflow_id: str, user_id: str) -> Workflow:
        workflow = await self._get(db, workflow_id)
        if workflow.user_id != user_id:
            raise ForbiddenError("You don't have permission to modify this workflow")
        return workflow

    @staticmethod
    async def _commit(db: AsyncSession, action: str) -> None:
        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise


def create_workflow_service() -> WorkflowService:
    """Create the workflow service."""
    return WorkflowService()
