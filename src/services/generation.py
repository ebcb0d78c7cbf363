"""End-to-end generation: description in, validated and scored workflow out."""

import logging
from typing import List, Optional

from core.exceptions import NotFoundError
from schemas.node_catalog import NodeRecommendation, WorkflowPattern
from schemas.workflow import (
    GeneratedWorkflow,
    GeneratedWorkflowPayload,
    GenerateWorkflowResponse,
    WorkflowType,
)
from services.intelligence import NodeRecommender, PatternRecognizer
from services.node_catalog import NodeCatalog
from services.response_generator import build_insights, create_response, quality_score
from services.validation import WorkflowScorer, WorkflowValidator, autofix
from services.workflow import WorkflowBuilder, WorkflowTypeDetector, export_workflow

logger = logging.getLogger(__name__)

FALLBACK_NOTICE = (
    "Something went wrong while building a tailored workflow, "
    "so a basic workflow was generated instead. You can refine it in the editor."
)


class WorkflowGenerationService:
    """Runs classification, building, validation, auto-fix and scoring."""

    def __init__(
        self,
        catalog: NodeCatalog,
        builder: Optional[WorkflowBuilder] = None,
        recommender: Optional[NodeRecommender] = None,
        validator: Optional[WorkflowValidator] = None,
        scorer: Optional[WorkflowScorer] = None,
    ):
        self.catalog = catalog
        self.builder = builder or WorkflowBuilder()
        self.recommender = recommender or NodeRecommender(catalog)
        self.validator = validator or WorkflowValidator(catalog)
        self.scorer = scorer or WorkflowScorer()

    async def generate(self, description: str, use_pattern: Optional[str] = None) -> GenerateWorkflowResponse:
        """Generate a workflow from a natural-language description.

        An unknown ``use_pattern`` raises NotFoundError. Any other failure
        is logged and answered with a basic workflow.
        """
        pattern = None
        if use_pattern:
            pattern = PatternRecognizer.get_pattern(use_pattern)
            if pattern is None:
                raise NotFoundError(f"Workflow pattern '{use_pattern}' not found")

        try:
            return await self._generate(description, pattern)
        except Exception as e:
            logger.error(f"Workflow generation failed, falling back to basic workflow: {e}", exc_info=True)
            workflow = self.builder.build(WorkflowType.BASIC, description)
            return await self._assemble(workflow, [], notice=FALLBACK_NOTICE)

    async def _generate(self, description: str, pattern: Optional[WorkflowPattern]) -> GenerateWorkflowResponse:
        recommendations = await self.recommender.recommend(description)

        if pattern is not None:
            workflow = self.builder.build_from_pattern(pattern, description)
        else:
            workflow_type = WorkflowTypeDetector.classify(description)
            workflow = self.builder.build(workflow_type, description, recommendations)
            workflow.matched_patterns = [
                match.name for match in PatternRecognizer.find_matching_patterns(description)
            ]

        logger.info(
            f"Generated {workflow.workflow_type} workflow '{workflow.name}' with {len(workflow.nodes)} nodes"
        )
        return await self._assemble(workflow, recommendations)

    async def _assemble(
        self,
        workflow: GeneratedWorkflow,
        recommendations: List[NodeRecommendation],
        notice: Optional[str] = None,
    ) -> GenerateWorkflowResponse:
        document = export_workflow(workflow)
        validation = await self.validator.validate(document)

        if not validation.is_valid:
            fixed, changes = autofix(document)
            if changes:
                logger.info(f"Applied {len(changes)} auto-fix change(s) to generated workflow")
                document = fixed
                validation = await self.validator.validate(document)

        scores = self.scorer.score(document, validation)
        insights = build_insights(workflow, validation, recommendations)
        quality = quality_score(validation, insights.complexity_score)
        message = create_response(workflow, validation, insights, scores, quality)
        if notice:
            message = f"{notice}\n\n{message}"

        return GenerateWorkflowResponse(
            workflow=GeneratedWorkflowPayload(
                id=workflow.id,
                name=workflow.name,
                description=workflow.description,
                workflow_type=workflow.workflow_type,
                nodes=workflow.preview_nodes(),
                connections=workflow.preview_connections(),
                json_document=document,
            ),
            validation=validation,
            scores=scores,
            insights=insights,
            quality_score=quality,
            message=message,
            degraded=self.catalog.degraded,
        )


def create_generation_service(catalog: NodeCatalog) -> WorkflowGenerationService:
    """Factory used by the API layer."""
    return WorkflowGenerationService(catalog)
