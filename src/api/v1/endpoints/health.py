"""Health check endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import check_database, get_db
from core.config import get_settings
from schemas.common import HealthResponse
from services.node_catalog import NodeCatalog, get_node_catalog

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """Check system health."""
    settings = get_settings()
    services = {"api": "ok"}

    services["database"] = "ok" if await check_database(db) else "error"

    # Reading the catalog also retries a failed load once the window expires
    await catalog.get_all()
    services["node_catalog"] = "degraded" if catalog.degraded else "ok"

    return HealthResponse(
        status="ok" if all(v == "ok" for v in services.values()) else "degraded",
        version=settings.VERSION,
        services=services,
    )
