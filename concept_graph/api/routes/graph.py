"""Knowledge graph endpoints: build, relationships, learning order, traversal."""

from fastapi import APIRouter, Depends, HTTPException, status

from concept_graph.core.exceptions import KnowledgeGraphError, KnowledgeGraphErrorCode
from concept_graph.core.logging import get_logger
from concept_graph.schemas import (
    BuildGraphRequest,
    BuildGraphResponse,
    CircularDependencyResponse,
    ConceptListResponse,
    RelationshipsResponse,
)
from concept_graph.services import KnowledgeGraphService, get_knowledge_graph_service

logger = get_logger(__name__)
router = APIRouter()

_STATUS_BY_CODE = {
    KnowledgeGraphErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    KnowledgeGraphErrorCode.CIRCULAR_DEPENDENCY: status.HTTP_409_CONFLICT,
    KnowledgeGraphErrorCode.GRAPH_BUILD_FAILED: status.HTTP_502_BAD_GATEWAY,
    KnowledgeGraphErrorCode.DATABASE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
    KnowledgeGraphErrorCode.API_KEY_MISSING: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_error(exc: KnowledgeGraphError) -> int:
    return _STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _to_http_exception(exc: KnowledgeGraphError) -> HTTPException:
    logger.error(f"{exc.code.value}: {exc}")
    return HTTPException(
        status_code=status_for_error(exc),
        detail={"code": exc.code.value, "message": exc.message},
    )


@router.post("/projects/{project_id}/graph", response_model=BuildGraphResponse)
async def build_graph(
    project_id: str,
    request: BuildGraphRequest,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> BuildGraphResponse:
    """Identify and store relationships between a project's concepts."""
    try:
        concepts = request.concepts
        if concepts is None:
            concepts = await service.store.load_concepts_by_project(project_id)
        relationships = await service.build_knowledge_graph(project_id, concepts)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)

    return BuildGraphResponse(
        status="success",
        project_id=project_id,
        relationships_stored=len(relationships),
        relationships=relationships,
    )


@router.get("/projects/{project_id}/relationships", response_model=RelationshipsResponse)
async def get_relationships(
    project_id: str,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> RelationshipsResponse:
    try:
        relationships = await service.get_project_relationships(project_id)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)
    return RelationshipsResponse(project_id=project_id, relationships=relationships)


@router.get("/projects/{project_id}/learning-order", response_model=ConceptListResponse)
async def get_learning_order(
    project_id: str,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> ConceptListResponse:
    """Concepts sorted so every prerequisite comes before its dependents."""
    try:
        concepts = await service.get_topological_order(project_id)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)
    return ConceptListResponse(concepts=concepts)


@router.get(
    "/projects/{project_id}/circular-dependency",
    response_model=CircularDependencyResponse,
)
async def get_circular_dependency(
    project_id: str,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> CircularDependencyResponse:
    try:
        found = await service.has_circular_dependency(project_id)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)
    return CircularDependencyResponse(project_id=project_id, has_circular_dependency=found)


@router.get("/concepts/{concept_id}/prerequisites", response_model=ConceptListResponse)
async def get_prerequisites(
    concept_id: str,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> ConceptListResponse:
    try:
        concepts = await service.get_prerequisites(concept_id)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)
    return ConceptListResponse(concepts=concepts)


@router.get("/concepts/{concept_id}/dependents", response_model=ConceptListResponse)
async def get_dependents(
    concept_id: str,
    service: KnowledgeGraphService = Depends(get_knowledge_graph_service),
) -> ConceptListResponse:
    try:
        concepts = await service.get_dependents(concept_id)
    except KnowledgeGraphError as e:
        raise _to_http_exception(e)
    return ConceptListResponse(concepts=concepts)
