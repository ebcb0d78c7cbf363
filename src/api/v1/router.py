"""
API v1 router.

Collects the endpoint routers under the versioned API prefix.
"""

from fastapi import APIRouter

from .endpoints import (
    health,
    nodes,
    workflows,
    workflow_templates,
)

api_router = APIRouter()

# Core endpoints
api_router.include_router(health.router, tags=["health"])
api_router.include_router(nodes.router, prefix="/nodes", tags=["nodes"])
api_router.include_router(workflows.router, prefix="/workflows", tags=["workflows"])
api_router.include_router(workflow_templates.router)  # Router already has prefix
