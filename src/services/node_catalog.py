"""Node catalog with a short-lived in-process cache."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from core.config import settings
from core.exceptions import CatalogLoadError
from models.node_catalog import NodeDefinition
from schemas.node_catalog import NodeTypeDefinition, ParameterDef
from services.node_reference import fallback_definitions

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[], Awaitable[List[NodeTypeDefinition]]]
Clock = Callable[[], float]


def definition_from_row(row: NodeDefinition) -> NodeTypeDefinition:
    """Convert a catalog row and its parameter rows to a definition."""
    return NodeTypeDefinition(
        type_id=row.node_type,
        display_name=row.display_name,
        category=row.category or "general",
        description=row.description or "",
        icon=row.icon,
        version=row.version or 1,
        deprecated=bool(row.deprecated),
        replaced_by=row.replaced_by,
        parameters=[
            ParameterDef(
                name=param.parameter_name,
                type=param.parameter_type,
                required=bool(param.required),
                default_value=param.default_value,
                description=param.description or "",
                options=param.options,
                validation_rules=param.validation_rules,
            )
            for param in row.parameters
        ],
    )


async def load_catalog_from_db() -> List[NodeTypeDefinition]:
    """Read every node definition with its parameters, ordered by display name."""
    from core.database import get_session_maker

    try:
        async with get_session_maker()() as session:
            result = await session.execute(
                select(NodeDefinition).order_by(NodeDefinition.display_name)
            )
            rows = result.scalars().all()
            return [definition_from_row(row) for row in rows]
    except (SQLAlchemyError, OSError) as e:
        raise CatalogLoadError(f"Failed to load node definitions: {e}") from e


class NodeCatalog:
    """Registry of available node types, cached for a fixed window.

    The cache is filled lazily on first use and again on the first use
    after ``ttl_seconds`` have passed on ``clock``. Concurrent callers
    that find the cache stale share a single backend load.

    When the loader fails the catalog serves the built-in fallback node
    set (webhook, code, httpRequest) for one window and reports
    ``degraded``.
    """

    def __init__(
        self,
        loader: CatalogLoader = load_catalog_from_db,
        ttl_seconds: Optional[float] = None,
        clock: Clock = time.monotonic,
        fallback: Optional[Callable[[], List[NodeTypeDefinition]]] = None,
    ):
        self._loader = loader
        self._ttl = settings.NODE_CATALOG_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._fallback = fallback or fallback_definitions
        self._entries: Dict[str, NodeTypeDefinition] = {}
        self._loaded_at: Optional[float] = None
        self._lock = asyncio.Lock()
        self.degraded = False

    def is_fresh(self) -> bool:
        if self._loaded_at is None:
            return False
        return self._clock() - self._loaded_at < self._ttl

    async def get_all(self) -> List[NodeTypeDefinition]:
        await self._ensure_fresh()
        return list(self._entries.values())

    async def get(self, type_id: str) -> Optional[NodeTypeDefinition]:
        await self._ensure_fresh()
        return self._entries.get(type_id)

    async def display_name(self, type_id: str) -> str:
        definition = await self.get(type_id)
        if definition:
            return definition.display_name
        return type_id.rsplit(".", 1)[-1]

    def invalidate(self) -> None:
        """Drop the cached entries so the next read reloads."""
        self._loaded_at = None
        logger.info("Node catalog cache invalidated")

    async def refresh(self) -> None:
        """Reload from the backing store now, regardless of age."""
        async with self._lock:
            await self._load()

    async def _ensure_fresh(self) -> None:
        if self.is_fresh():
            return
        async with self._lock:
            # Another caller may have refreshed while we waited
            if self.is_fresh():
                return
            await self._load()

    async def _load(self) -> None:
        try:
            definitions = await self._loader()
            if not definitions:
                raise CatalogLoadError("Node catalog store is empty; run the catalog seeder")
            self.degraded = False
        except Exception as e:
            logger.warning(f"Node catalog load failed, serving fallback node set: {e}")
            definitions = self._fallback()
            self.degraded = True

        self._entries = {definition.type_id: definition for definition in definitions}
        self._loaded_at = self._clock()
        logger.debug(f"Node catalog cached {len(self._entries)} node types")


_catalog: Optional[NodeCatalog] = None


def get_node_catalog() -> NodeCatalog:
    """Process-wide catalog instance, usable as a FastAPI dependency."""
    global _catalog
    if _catalog is None:
        _catalog = NodeCatalog()
    return _catalog
