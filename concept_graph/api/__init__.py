from fastapi import APIRouter

from concept_graph.api.routes import graph_router

router = APIRouter()
router.include_router(graph_router)

__all__ = ["router"]
