from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from concept_graph.api import router
from concept_graph.api.routes.graph import status_for_error
from concept_graph.core import get_logger, settings
from concept_graph.core.exceptions import KnowledgeGraphError
from concept_graph.services import SQLAlchemyGraphStore, get_container

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Concept Graph Engine [{settings.app_env}]")
    store = get_container().store
    if settings.auto_create_schema and isinstance(store, SQLAlchemyGraphStore):
        await store.create_schema()
    yield
    if isinstance(store, SQLAlchemyGraphStore):
        await store.dispose()
    logger.info("Stopping Concept Graph Engine")


app = FastAPI(
    title="Concept Graph Engine",
    version="0.1.0",
    lifespan=lifespan,
)


# Raised while resolving dependencies, before a route's own handling
@app.exception_handler(KnowledgeGraphError)
async def knowledge_graph_exception_handler(request: Request, exc: KnowledgeGraphError):
    logger.error(f"{exc.code.value}: {exc}")
    return JSONResponse(
        status_code=status_for_error(exc),
        content={"detail": {"code": exc.code.value, "message": exc.message}},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {type(exc).__name__}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(router, prefix="/api", tags=["Knowledge Graph"])


@app.get("/health")
async def health_check():
    return {"status": "ok", "env": settings.app_env}
