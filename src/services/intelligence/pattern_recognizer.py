"""Recognition of common workflow patterns."""

from typing import List, Optional, Tuple

from schemas.node_catalog import WorkflowPattern


WORKFLOW_PATTERNS: Tuple[WorkflowPattern, ...] = (
    WorkflowPattern(
        name="Webhook to API Processing",
        description="Receive data via webhook, process it, and send to external API",
        nodes=["n8n-nodes-base.webhook", "n8n-nodes-base.code", "n8n-nodes-base.httpRequest"],
        use_case="API integration, data processing",
        complexity="simple",
    ),
    WorkflowPattern(
        name="Data Validation Pipeline",
        description="Validate incoming data with conditional logic and error handling",
        nodes=["n8n-nodes-base.webhook", "n8n-nodes-base.if", "n8n-nodes-base.set", "n8n-nodes-base.httpRequest"],
        use_case="Data validation, conditional processing",
        complexity="medium",
    ),
    WorkflowPattern(
        name="Multi-API Aggregation",
        description="Fetch data from multiple APIs, merge results, and process",
        nodes=["n8n-nodes-base.cron", "n8n-nodes-base.httpRequest", "n8n-nodes-base.merge", "n8n-nodes-base.code"],
        use_case="Data aggregation, scheduled processing",
        complexity="complex",
    ),
)


class PatternRecognizer:
    """Matches free text against the built-in workflow patterns."""

    @staticmethod
    def find_matching_patterns(text: str) -> List[WorkflowPattern]:
        """Patterns whose use case contains any word of the text longer than 3 chars."""
        words = [word for word in text.lower().split(" ") if len(word) > 3]
        matches = []
        for pattern in WORKFLOW_PATTERNS:
            use_case = pattern.use_case.lower()
            if any(word in use_case for word in words):
                matches.append(pattern)
        return matches

    @classmethod
    def pattern_score(cls, text: str, type_id: str) -> Tuple[int, List[str]]:
        """Score +15 for every matched pattern that includes the node type."""
        score = 0
        reasons = []
        for pattern in cls.find_matching_patterns(text):
            if type_id in pattern.nodes:
                score += 15
                reasons.append(f"Part of {pattern.name} pattern.")
        return score, reasons

    @staticmethod
    def all_patterns() -> List[WorkflowPattern]:
        return list(WORKFLOW_PATTERNS)

    @staticmethod
    def get_pattern(name: str) -> Optional[WorkflowPattern]:
        for pattern in WORKFLOW_PATTERNS:
            if pattern.name.lower() == name.lower():
                return pattern
        return None
