"""Built-in node reference table.

The table lives in ``data/node_reference.yaml`` and is the single source
for seeding the catalog database and for the fallback node set served
when the database cannot be read.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import ValidationError as PydanticValidationError

from core.config import settings
from core.exceptions import ReferenceDataError
from schemas.node_catalog import NodeTypeDefinition

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent / "data" / "node_reference.yaml"

FALLBACK_NODE_TYPES = (
    "n8n-nodes-base.webhook",
    "n8n-nodes-base.code",
    "n8n-nodes-base.httpRequest",
)


def parse_reference(raw: Dict) -> List[NodeTypeDefinition]:
    """Validate a parsed reference document and return its definitions."""
    rows = (raw or {}).get("nodes") or []
    definitions = []
    for row in rows:
        try:
            definitions.append(NodeTypeDefinition.model_validate(row))
        except PydanticValidationError as e:
            raise ReferenceDataError(
                f"Invalid node reference entry {row.get('type_id', '?')}",
                details={"errors": e.errors(include_url=False)},
            )

    by_type = {}
    for definition in definitions:
        if definition.type_id in by_type:
            raise ReferenceDataError(f"Duplicate node type {definition.type_id}")
        by_type[definition.type_id] = definition

    for definition in definitions:
        if not definition.replaced_by:
            continue
        successor = by_type.get(definition.replaced_by)
        if successor is None or successor.deprecated:
            raise ReferenceDataError(
                f"{definition.type_id} is replaced by {definition.replaced_by}, "
                f"which is not an available node type"
            )

    return definitions


def load_reference(path: Optional[Path] = None) -> List[NodeTypeDefinition]:
    """Read and validate the reference table from disk."""
    path = Path(path or settings.REFERENCE_DATA_PATH or DEFAULT_REFERENCE_PATH)
    with open(path, "r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh)
    definitions = parse_reference(raw)
    logger.debug(f"Loaded {len(definitions)} node definitions from {path}")
    return definitions


@lru_cache(maxsize=1)
def reference_definitions() -> tuple:
    """Reference definitions from the packaged table, parsed once."""
    return tuple(load_reference(DEFAULT_REFERENCE_PATH))


def fallback_definitions() -> List[NodeTypeDefinition]:
    """Minimal node set used when the catalog store is unavailable."""
    by_type = {definition.type_id: definition for definition in reference_definitions()}
    return [by_type[type_id] for type_id in FALLBACK_NODE_TYPES]
