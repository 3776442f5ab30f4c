"""
Dependency Injection Container.

Wires the knowledge graph service with its two collaborators: the LLM-backed
relationship extractor and the SQLAlchemy graph store. Nothing is created
until first use, and tests can override either collaborator.

Example:
    from concept_graph.services.container import get_container

    service = get_container().knowledge_graph_service
    order = await service.get_topological_order(project_id)
"""

from functools import lru_cache
from typing import Optional

from concept_graph.core.config import Settings, get_settings
from concept_graph.core.logging import GraphLogger
from concept_graph.services.graph_store import GraphStore, SQLAlchemyGraphStore
from concept_graph.services.knowledge_graph_service import KnowledgeGraphService
from concept_graph.services.llm_factory import build_llm
from concept_graph.services.relationship_extractor import (
    LLMRelationshipExtractor,
    RelationshipExtractor,
)


class DependencyContainer:
    """
    Centralized container for engine dependencies.

    Attributes:
        _extractor: Cached relationship extractor.
        _store: Cached graph store.
        _service: Cached KnowledgeGraphService.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._extractor: Optional[RelationshipExtractor] = None
        self._store: Optional[GraphStore] = None
        self._service: Optional[KnowledgeGraphService] = None
        self._logger: Optional[GraphLogger] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def extractor(self) -> RelationshipExtractor:
        """
        Get the relationship extractor.

        Raises:
            MissingAPIKeyError: If no LLM API key is configured.
        """
        if self._extractor is None:
            self._extractor = LLMRelationshipExtractor(
                llm=build_llm(self._settings, self._settings.extraction_temperature),
                min_concepts=self._settings.min_concepts_for_extraction,
            )
        return self._extractor

    @property
    def store(self) -> GraphStore:
        if self._store is None:
            self._store = SQLAlchemyGraphStore.from_url(
                self._settings.database_url,
                echo=self._settings.database_echo,
            )
        return self._store

    @property
    def logger(self) -> GraphLogger:
        if self._logger is None:
            self._logger = GraphLogger("builder")
        return self._logger

    @property
    def knowledge_graph_service(self) -> KnowledgeGraphService:
        """
        Get the KnowledgeGraphService, built from the container's store and
        build policy settings. The extractor is only created when a build
        runs, so read queries work without an LLM API key.
        """
        if self._service is None:
            self._service = KnowledgeGraphService(
                extractor=None,
                extractor_factory=lambda: self.extractor,
                store=self.store,
                clamp_strength=self._settings.clamp_strength,
                drop_self_references=self._settings.drop_self_references,
                graph_logger=self.logger,
            )
        return self._service

    def override_extractor(self, extractor: RelationshipExtractor) -> None:
        """Replace the extractor (e.g. with a mock) and rebuild the service."""
        self._extractor = extractor
        self._service = None

    def override_store(self, store: GraphStore) -> None:
        """Replace the store (e.g. with a mock) and rebuild the service."""
        self._store = store
        self._service = None

    def reset(self) -> None:
        """Drop every cached service."""
        self._extractor = None
        self._store = None
        self._service = None
        self._logger = None


@lru_cache(maxsize=1)
def get_container() -> DependencyContainer:
    """Singleton DependencyContainer for the process."""
    return DependencyContainer()


def reset_container() -> None:
    """Clear the container singleton, mainly for test isolation."""
    get_container.cache_clear()


def get_knowledge_graph_service() -> KnowledgeGraphService:
    """FastAPI dependency returning the container's service."""
    return get_container().knowledge_graph_service
