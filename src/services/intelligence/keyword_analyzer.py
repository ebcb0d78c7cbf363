"""Keyword extraction for node intelligence."""

from typing import Dict, List, Tuple


class KeywordAnalyzer:
    """Maps free text to keyword categories by substring matching.

    A category is emitted when any of its terms occurs anywhere in the
    lower-cased text, so short terms such as "if" or "db" also match
    inside longer words.
    """

    KEYWORD_MAP: Dict[str, List[str]] = {
        "webhook": ["webhook", "receive", "incoming", "trigger"],
        "api": ["api", "rest", "http", "request", "fetch", "get", "post"],
        "process": ["process", "transform", "manipulate", "modify"],
        "condition": ["if", "condition", "check", "validate", "filter"],
        "code": ["code", "script", "javascript", "custom", "logic"],
        "schedule": ["schedule", "cron", "timer", "periodic", "recurring"],
        "data": ["data", "json", "object", "field", "property"],
        "email": ["email", "mail", "send", "notify"],
        "database": ["database", "db", "sql", "store", "save"],
        "split": ["split", "branch", "route", "switch"],
        "merge": ["merge", "combine", "join", "aggregate"],
    }

    # Categories each node type answers to
    NODE_KEYWORD_MAP: Dict[str, List[str]] = {
        "n8n-nodes-base.webhook": ["webhook", "trigger", "receive"],
        "n8n-nodes-base.httpRequest": ["api", "http", "request"],
        "n8n-nodes-base.code": ["code", "process", "script"],
        "n8n-nodes-base.if": ["condition", "if", "check"],
        "n8n-nodes-base.switch": ["split", "route", "condition"],
        "n8n-nodes-base.set": ["data", "transform", "modify"],
        "n8n-nodes-base.merge": ["merge", "combine", "join"],
        "n8n-nodes-base.cron": ["schedule", "timer", "cron"],
        "n8n-nodes-base.itemLists": ["data", "process", "split"],
    }

    @classmethod
    def extract_keywords(cls, text: str) -> List[str]:
        """Return matching categories in table order."""
        text_lower = text.lower()
        return [
            category
            for category, terms in cls.KEYWORD_MAP.items()
            if any(term in text_lower for term in terms)
        ]

    @classmethod
    def node_keywords(cls, type_id: str) -> List[str]:
        return cls.NODE_KEYWORD_MAP.get(type_id, [])

    @classmethod
    def keyword_score(cls, text: str, type_id: str) -> Tuple[int, List[str]]:
        """Score +10 for every extracted category the node answers to."""
        node_keywords = cls.node_keywords(type_id)
        score = 0
        reasons = []
        for keyword in cls.extract_keywords(text):
            if keyword in node_keywords:
                score += 10
                reasons.append(f'Matches "{keyword}" requirement.')
        return score, reasons
