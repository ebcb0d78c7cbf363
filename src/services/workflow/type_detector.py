"""Classifies a description into a workflow shape."""

import re
from typing import List, Tuple

from schemas.workflow import WorkflowType


class WorkflowTypeDetector:
    """Regex classifier; rules are tried in order and the first match wins."""

    RULES: List[Tuple[WorkflowType, "re.Pattern[str]"]] = [
        (WorkflowType.WEBHOOK, re.compile(r"webhook|api|receive|endpoint|trigger", re.IGNORECASE)),
        (WorkflowType.SCHEDULED, re.compile(r"schedule|cron|timer|daily|hourly|periodic", re.IGNORECASE)),
        (WorkflowType.CONDITIONAL, re.compile(r"condition|if|when|check|validate|filter", re.IGNORECASE)),
        (WorkflowType.DATA_PROCESSING, re.compile(r"process|transform|convert|format|parse|extract", re.IGNORECASE)),
    ]

    @classmethod
    def classify(cls, text: str) -> WorkflowType:
        for workflow_type, pattern in cls.RULES:
            if pattern.search(text):
                return workflow_type
        return WorkflowType.BASIC
