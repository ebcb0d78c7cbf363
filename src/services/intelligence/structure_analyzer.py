"""Suggests a node sequence for an intent."""

from schemas.node_catalog import StructureSuggestion
from .keyword_analyzer import KeywordAnalyzer
from .pattern_recognizer import PatternRecognizer


class WorkflowStructureAnalyzer:
    """Picks the first matching pattern, or assembles nodes from keywords."""

    @staticmethod
    def suggest_structure(intent: str) -> StructureSuggestion:
        patterns = PatternRecognizer.find_matching_patterns(intent)
        if patterns:
            best = patterns[0]
            return StructureSuggestion(
                suggested_nodes=list(best.nodes),
                reasoning=f'Based on "{intent}", this matches the {best.name} pattern: {best.description}',
                pattern=best,
            )

        keywords = KeywordAnalyzer.extract_keywords(intent)
        nodes = []
        reasons = ["Basic workflow structure:"]

        if "webhook" in keywords:
            nodes.append("n8n-nodes-base.webhook")
            reasons.append("Start with webhook trigger.")
        if "condition" in keywords:
            nodes.append("n8n-nodes-base.if")
            reasons.append("Add conditional logic.")
        if "process" in keywords or "code" in keywords:
            nodes.append("n8n-nodes-base.code")
            reasons.append("Process data with custom code.")
        if "api" in keywords:
            nodes.append("n8n-nodes-base.httpRequest")
            reasons.append("Make API requests.")

        if not nodes and keywords:
            nodes.append("n8n-nodes-base.manualTrigger")
            reasons.append("Start with a Manual Trigger or define a starting point.")

        return StructureSuggestion(suggested_nodes=nodes, reasoning=" ".join(reasons))
