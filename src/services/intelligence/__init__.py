"""Rule-based intent analysis and node recommendation."""

from .keyword_analyzer import KeywordAnalyzer
from .pattern_recognizer import PatternRecognizer, WORKFLOW_PATTERNS
from .node_recommender import NodeRecommender
from .structure_analyzer import WorkflowStructureAnalyzer

__all__ = [
    "KeywordAnalyzer",
    "PatternRecognizer",
    "WORKFLOW_PATTERNS",
    "NodeRecommender",
    "WorkflowStructureAnalyzer",
]
