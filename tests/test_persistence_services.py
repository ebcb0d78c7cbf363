"""Tests for workflow and template persistence services."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml
from sqlalchemy.exc import SQLAlchemyError

from conftest import document, node
from core.exceptions import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from models.workflow import Workflow
from models.workflow_templates import WorkflowTemplate
from schemas.workflow import WorkflowCreate, WorkflowStatus, WorkflowType
from schemas.workflow_templates import WorkflowTemplateCreate
from services.workflow_service import WorkflowService
from services.workflow_template_service import WorkflowTemplateService

OWNER = "user-1"
OTHER = "user-2"

SAMPLE_DOCUMENT = document([node("Code", "n8n-nodes-base.code", {"jsCode": "return [];"})], name="Sample")


def rows_result(rows):
    """Mock execute() result for list and single-row queries."""
    result = MagicMock()
    result.scalars.return_value.all.return_value = rows
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    result.scalar.return_value = len(rows)
    return result


def assign_id(new_id):
    async def refresh(obj):
        if obj.id is None:
            obj.id = new_id
    return refresh


@pytest.fixture
def db():
    """Mock async database session."""
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.refresh = AsyncMock(side_effect=assign_id("generated-id"))
    return session


def saved_workflow(user_id=OWNER, is_public=False):
    return Workflow(
        id="wf-1",
        user_id=user_id,
        name="Sample",
        workflow_type="basic",
        workflow_json=SAMPLE_DOCUMENT,
        status="draft",
        is_public=is_public,
    )


def saved_template(user_id=OWNER, is_public=False, usage_count=0):
    return WorkflowTemplate(
        id="tpl-1",
        user_id=user_id,
        name="Sample",
        category="general",
        tags=["demo"],
        workflow_json=SAMPLE_DOCUMENT,
        difficulty="beginner",
        is_public=is_public,
        usage_count=usage_count,
    )


class TestWorkflowService:
    """Tests for WorkflowService."""

    @pytest.fixture
    def service(self):
        """Create a WorkflowService instance."""
        return WorkflowService()

    @pytest.mark.asyncio
    async def test_save_workflow(self, service, db):
        """Test saving a workflow as a draft."""
        create_data = WorkflowCreate(
            name="Sample",
            workflow_type=WorkflowType.BASIC,
            workflow_json=SAMPLE_DOCUMENT,
        )

        response = await service.save_workflow(db, OWNER, create_data)

        assert response.id == "generated-id"
        assert response.status == WorkflowStatus.DRAFT
        assert response.workflow_type == "basic"
        assert response.workflow_json == SAMPLE_DOCUMENT
        db.add.assert_called_once()
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_save_requires_user(self, service, db):
        """Test saving without a user fails before touching the session."""
        create_data = WorkflowCreate(name="Sample", workflow_json=SAMPLE_DOCUMENT)

        with pytest.raises(UnauthorizedError):
            await service.save_workflow(db, None, create_data)

        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_save_rolls_back_on_error(self, service, db):
        """Test a failed commit is rolled back and re-raised."""
        db.commit.side_effect = SQLAlchemyError("disk full")
        create_data = WorkflowCreate(name="Sample", workflow_json=SAMPLE_DOCUMENT)

        with pytest.raises(SQLAlchemyError):
            await service.save_workflow(db, OWNER, create_data)

        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_list_workflows(self, service, db):
        """Test listing returns rows and the total count."""
        rows = [saved_workflow(), saved_workflow(OTHER, is_public=True)]
        db.execute.side_effect = [rows_result(rows), rows_result(rows)]

        workflows, total = await service.list_workflows(db, OWNER)

        assert total == 2
        assert [w.user_id for w in workflows] == [OWNER, OTHER]

    @pytest.mark.asyncio
    async def test_get_public_workflow(self, service, db):
        """Test other users can read public workflows."""
        db.execute.return_value = rows_result([saved_workflow(is_public=True)])

        response = await service.get_workflow(db, "wf-1", OTHER)

        assert response.id == "wf-1"

    @pytest.mark.asyncio
    async def test_get_private_workflow_forbidden(self, service, db):
        """Test private workflows are hidden from other users."""
        db.execute.return_value = rows_result([saved_workflow()])

        with pytest.raises(ForbiddenError):
            await service.get_workflow(db, "wf-1", OTHER)

    @pytest.mark.asyncio
    async def test_get_missing_workflow(self, service, db):
        """Test a missing workflow raises NotFoundError."""
        db.execute.return_value = rows_result([])

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_workflow(db, "missing", OWNER)

        assert exc_info.value.message == "Workflow missing not found"

    @pytest.mark.asyncio
    async def test_update_status(self, service, db):
        """Test the owner can deploy a workflow."""
        workflow = saved_workflow()
        db.execute.return_value = rows_result([workflow])

        response = await service.update_status(db, "wf-1", OWNER, WorkflowStatus.DEPLOYED)

        assert workflow.status == "deployed"
        assert response.status == WorkflowStatus.DEPLOYED

    @pytest.mark.asyncio
    async def test_update_status_public_not_owner(self, service, db):
        """Test public visibility does not grant modification."""
        db.execute.return_value = rows_result([saved_workflow(is_public=True)])

        with pytest.raises(ForbiddenError):
            await service.update_status(db, "wf-1", OTHER, WorkflowStatus.ACTIVE)

        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_workflow(self, service, db):
        """Test the owner can delete a workflow."""
        workflow = saved_workflow()
        db.execute.return_value = rows_result([workflow])

        await service.delete_workflow(db, "wf-1", OWNER)

        db.delete.assert_awaited_once_with(workflow)
        db.commit.assert_awaited_once()


class TestWorkflowTemplateService:
    """Tests for WorkflowTemplateService."""

    @pytest.fixture
    def service(self):
        """Create a WorkflowTemplateService instance."""
        return WorkflowTemplateService()

    @pytest.mark.asyncio
    async def test_save_template(self, service, db):
        """Test saving a template starts its usage count at zero."""
        create_data = WorkflowTemplateCreate(
            name="Sample",
            workflow_json=SAMPLE_DOCUMENT,
            tags=["demo"],
            is_public=True,
        )

        response = await service.save_template(db, OWNER, create_data)

        assert response.id == "generated-id"
        assert response.usage_count == 0
        assert response.difficulty == "beginner"
        assert response.is_public is True

    @pytest.mark.asyncio
    async def test_save_requires_user(self, service, db):
        """Test saving a template needs an authenticated user."""
        create_data = WorkflowTemplateCreate(name="Sample", workflow_json=SAMPLE_DOCUMENT)

        with pytest.raises(UnauthorizedError):
            await service.save_template(db, "", create_data)

        db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_templates(self, service, db):
        """Test anonymous listing returns public templates and a total."""
        rows = [saved_template(is_public=True)]
        db.execute.side_effect = [rows_result(rows), rows_result(rows)]

        templates, total = await service.list_templates(db, None, category="general")

        assert total == 1
        assert templates[0].tags == ["demo"]

    @pytest.mark.asyncio
    async def test_private_template_forbidden(self, service, db):
        """Test private templates are hidden from other users."""
        db.execute.return_value = rows_result([saved_template()])

        with pytest.raises(ForbiddenError):
            await service.get_template(db, "tpl-1", OTHER)

    @pytest.mark.asyncio
    async def test_export_json(self, service, db):
        """Test JSON export counts as a use."""
        template = saved_template(usage_count=2)
        db.execute.return_value = rows_result([template])

        content, media_type = await service.export_template(db, "tpl-1", OWNER, "json")

        assert json.loads(content) == SAMPLE_DOCUMENT
        assert media_type == "application/json"
        assert template.usage_count == 3
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_export_yaml(self, service, db):
        """Test YAML export keeps the document key order."""
        db.execute.return_value = rows_result([saved_template(is_public=True)])

        content, media_type = await service.export_template(db, "tpl-1", None, "yaml")

        assert yaml.safe_load(content) == SAMPLE_DOCUMENT
        assert content.startswith("name: Sample")
        assert media_type == "application/x-yaml"

    @pytest.mark.asyncio
    async def test_export_bad_format(self, service, db):
        """Test unknown formats are rejected before any query."""
        with pytest.raises(BadRequestError) as exc_info:
            await service.export_template(db, "tpl-1", OWNER, "xml")

        assert exc_info.value.message == "Unsupported export format: xml"
        db.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_export_missing(self, service, db):
        """Test exporting a missing template raises NotFoundError."""
        db.execute.return_value = rows_result([])

        with pytest.raises(NotFoundError):
            await service.export_template(db, "missing", OWNER, "json")
