"""API routers."""

from concept_graph.api.routes.graph import router as graph_router

__all__ = ["graph_router"]
