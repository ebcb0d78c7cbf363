"""Node recommendations scored from user intent."""

import logging
from typing import Iterable, List, Optional

from core.config import settings
from schemas.node_catalog import NodeRecommendation, NodeTypeDefinition
from services.node_catalog import NodeCatalog
from .keyword_analyzer import KeywordAnalyzer
from .pattern_recognizer import PatternRecognizer

logger = logging.getLogger(__name__)


class NodeRecommender:
    """Ranks catalog node types against an intent.

    Scoring is additive:
    - +10 per intent keyword category the node answers to
    - +5 when the node type is not already in the workflow
    - +15 per matched pattern that includes the node type

    Deprecated node types and zero scores are dropped. Results are sorted
    by descending score, ties keep catalog order.
    """

    def __init__(self, catalog: NodeCatalog, limit: Optional[int] = None):
        self.catalog = catalog
        self.limit = settings.MAX_RECOMMENDATIONS if limit is None else limit

    async def recommend(self, intent: str, current_nodes: Iterable[str] = ()) -> List[NodeRecommendation]:
        definitions = await self.catalog.get_all()
        return self.rank(intent, current_nodes, definitions, self.limit)

    @staticmethod
    def rank(
        intent: str,
        current_nodes: Iterable[str],
        definitions: List[NodeTypeDefinition],
        limit: int = 6,
    ) -> List[NodeRecommendation]:
        present = set(current_nodes)
        recommendations = []

        for definition in definitions:
            if definition.deprecated:
                continue

            score, reasons = KeywordAnalyzer.keyword_score(intent, definition.type_id)

            if definition.type_id not in present:
                score += 5
                reasons.append("Adds new capability.")

            pattern_score, pattern_reasons = PatternRecognizer.pattern_score(intent, definition.type_id)
            score += pattern_score
            reasons.extend(pattern_reasons)

            if score > 0:
                recommendations.append(NodeRecommendation(
                    type_id=definition.type_id,
                    display_name=definition.display_name,
                    category=definition.category,
                    description=definition.description,
                    score=score,
                    reasoning=" ".join(reasons),
                ))

        recommendations.sort(key=lambda rec: rec.score, reverse=True)
        logger.debug(f"Ranked {len(recommendations)} node types for intent, returning top {limit}")
        return recommendations[:limit]
