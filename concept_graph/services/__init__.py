from concept_graph.services.container import (
    DependencyContainer,
    get_container,
    get_knowledge_graph_service,
    reset_container,
)
from concept_graph.services.graph_store import GraphStore, SQLAlchemyGraphStore
from concept_graph.services.knowledge_graph_service import KnowledgeGraphService
from concept_graph.services.llm_factory import get_llm
from concept_graph.services.relationship_extractor import (
    LLMRelationshipExtractor,
    RelationshipExtractor,
)

__all__ = [
    "DependencyContainer",
    "GraphStore",
    "KnowledgeGraphService",
    "LLMRelationshipExtractor",
    "RelationshipExtractor",
    "SQLAlchemyGraphStore",
    "get_container",
    "get_knowledge_graph_service",
    "get_llm",
    "reset_container",
]
