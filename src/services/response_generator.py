"""Insights, quality score and chat text for a generated workflow."""

from typing import Iterable, List, Optional

from schemas.node_catalog import NodeRecommendation
from schemas.workflow import GeneratedWorkflow, ScoreReport, WorkflowInsights, WorkflowValidationResult

HTTP_REQUEST = "n8n-nodes-base.httpRequest"

SECONDS_PER_NODE = 0.1
SECONDS_PER_HTTP_REQUEST = 1.0

# (upper bound in seconds, label); the last bucket is open-ended
EXECUTION_TIME_BUCKETS = (
    (1.0, "< 1 second"),
    (5.0, "1-5 seconds"),
    (30.0, "5-30 seconds"),
)
SLOWEST_BUCKET = "> 30 seconds"

QUALITY_TIERS = (
    (90, "Exceptional Quality", "This workflow meets enterprise standards with optimal node configuration."),
    (75, "High Quality", "Well-structured workflow with minor optimization opportunities."),
    (60, "Good Quality", "Functional workflow with some recommended improvements."),
    (0, "Needs Refinement", "Basic workflow that would benefit from optimization."),
)

CLOSING_LINE = (
    "The workflow is now ready for review in the preview panel. "
    "You can export it to the automation platform or deploy it for testing."
)


def complexity_score(workflow: GeneratedWorkflow) -> int:
    raw = len(workflow.nodes) + 0.5 * len(workflow.connections)
    return max(1, min(10, int(round(raw))))


def complexity_label(score: int) -> str:
    if score < 3:
        return "simple"
    if score > 7:
        return "complex"
    return "medium"


def estimated_execution_time(workflow: GeneratedWorkflow) -> str:
    http_count = sum(1 for node in workflow.nodes if node.type == HTTP_REQUEST)
    seconds = SECONDS_PER_NODE * len(workflow.nodes) + SECONDS_PER_HTTP_REQUEST * http_count
    for bound, label in EXECUTION_TIME_BUCKETS:
        if seconds < bound:
            return label
    return SLOWEST_BUCKET


def build_insights(
    workflow: GeneratedWorkflow,
    validation: WorkflowValidationResult,
    recommendations: Optional[Iterable[NodeRecommendation]] = None,
) -> WorkflowInsights:
    score = complexity_score(workflow)
    return WorkflowInsights(
        complexity=complexity_label(score),
        complexity_score=score,
        estimated_execution_time=estimated_execution_time(workflow),
        recommendations=[
            f"{rec.display_name}: {rec.reasoning} (Score: {rec.score})"
            for rec in recommendations or []
        ],
        node_count=len(workflow.nodes),
        connection_count=sum(len(port) for outputs in workflow.connections.values() for port in outputs),
        matched_patterns=list(workflow.matched_patterns),
    )


def quality_score(validation: WorkflowValidationResult, complexity: int) -> int:
    """Overall quality from validation findings, with a penalty outside the 2-8 complexity range."""
    score = 100
    score -= 20 * validation.error_count
    score -= 5 * validation.warning_count
    if complexity < 2:
        score -= 10
    if complexity > 8:
        score -= 15
    return max(0, min(100, score))


def _quality_line(score: int) -> str:
    for threshold, title, summary in QUALITY_TIERS:
        if score >= threshold:
            return f"**{title}** - {summary}"
    return ""


def _complexity_lines(insights: WorkflowInsights) -> List[str]:
    lines = [f"**Complexity Score:** {insights.complexity_score}/10"]
    if insights.complexity_score < 3:
        lines.append("*This is a streamlined workflow perfect for getting started.*")
    elif insights.complexity_score > 7:
        lines.append("*This is a sophisticated workflow that handles complex automation scenarios.*")
    else:
        lines.append("*This workflow strikes a good balance between capability and maintainability.*")
    return lines


def _validation_line(validation: WorkflowValidationResult) -> str:
    errors = validation.error_count
    warnings = validation.warning_count
    if errors == 0 and warnings == 0:
        return "**Perfect Validation** - No issues detected, ready for deployment."
    if errors == 0:
        return f"**{warnings} Optimization Suggestion(s)** - Workflow is functional with recommended improvements."
    return f"**{errors} Issue(s) Detected** - Requires attention before deployment."


def create_response(
    workflow: GeneratedWorkflow,
    validation: WorkflowValidationResult,
    insights: WorkflowInsights,
    scores: Optional[ScoreReport] = None,
    quality: Optional[int] = None,
) -> str:
    """Markdown summary shown in the chat after a workflow is generated."""
    if quality is None:
        quality = quality_score(validation, insights.complexity_score)

    sections = [
        f'I\'ve built the "{workflow.name}" workflow with {len(workflow.nodes)} node(s).',
        _quality_line(quality),
        "\n".join(_complexity_lines(insights)),
        _validation_line(validation),
    ]

    if insights.recommendations:
        sections.append("\n".join(
            ["**Smart Recommendations:**"] + [f"- {rec}" for rec in insights.recommendations[:3]]
        ))

    if scores is not None:
        sections.append(
            f"**Scores:** performance {scores.performance}, security {scores.security}, "
            f"maintainability {scores.maintainability}"
        )

    sections.append(CLOSING_LINE)
    return "\n\n".join(sections)
