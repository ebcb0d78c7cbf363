"""Node catalog and recommendation endpoints."""

from typing import List
from fastapi import APIRouter, Depends

from core.exceptions import NotFoundError
from schemas.node_catalog import (
    CacheInvalidateResponse,
    NodeCatalogResponse,
    NodeTypeDefinition,
    NodeTypeSummary,
    RecommendationRequest,
    RecommendationResponse,
    StructureRequest,
    StructureSuggestion,
    WorkflowPattern,
)
from services.intelligence import (
    KeywordAnalyzer,
    NodeRecommender,
    PatternRecognizer,
    WorkflowStructureAnalyzer,
)
from services.node_catalog import NodeCatalog, get_node_catalog

router = APIRouter()


@router.get("", response_model=NodeCatalogResponse)
async def list_nodes(catalog: NodeCatalog = Depends(get_node_catalog)):
    """List every node type in the catalog."""
    definitions = await catalog.get_all()
    nodes = [NodeTypeSummary(**d.model_dump(exclude={"icon", "parameters"})) for d in definitions]
    return NodeCatalogResponse(nodes=nodes, total=len(nodes), degraded=catalog.degraded)


@router.get("/patterns", response_model=List[WorkflowPattern])
async def list_patterns():
    """List the built-in workflow patterns."""
    return PatternRecognizer.all_patterns()


@router.post("/recommend", response_model=RecommendationResponse)
async def recommend_nodes(
    request: RecommendationRequest,
    catalog: NodeCatalog = Depends(get_node_catalog),
):
    """
    Rank node types for an intent.

    - **intent**: What the user wants the workflow to do
    - **current_nodes**: Type ids already present in the workflow
    """
    recommendations = await NodeRecommender(catalog).recommend(request.intent, request.current_nodes)
    return RecommendationResponse(
        intent=request.intent,
        keywords=KeywordAnalyzer.extract_keywords(request.intent),
        recommendations=recommendations,
    )


@router.post("/suggest-structure", response_model=StructureSuggestion)
async def suggest_structure(request: StructureRequest):
    """Suggest a node sequence for an intent."""
    return WorkflowStructureAnalyzer.suggest_structure(request.intent)


@router.post("/cache/invalidate", response_model=CacheInvalidateResponse)
async def invalidate_cache(catalog: NodeCatalog = Depends(get_node_catalog)):
    """Drop the cached catalog and reload it."""
    catalog.invalidate()
    definitions = await catalog.get_all()
    return CacheInvalidateResponse(node_count=len(definitions), degraded=catalog.degraded)


@router.get("/{type_id}", response_model=NodeTypeDefinition)
async def get_node(type_id: str, catalog: NodeCatalog = Depends(get_node_catalog)):
    """Get a node type with its parameter definitions."""
    definition = await catalog.get(type_id)
    if definition is None:
        raise NotFoundError(f"Node type {type_id} not found")
    return definition
