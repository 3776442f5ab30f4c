"""
Pytest configuration and shared fixtures.

All fixtures use mocks or a throwaway SQLite database, so no test talks to
a real LLM or database server.

Usage:
    async def test_example(service, mock_store, make_relationship):
        mock_store.load_edges.return_value = [make_relationship("a", "b")]
        assert await service.has_circular_dependency("project-1") is False
"""

from itertools import count
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from concept_graph.schemas import (
    Concept,
    ConceptRelationship,
    IdentifiedRelationship,
    RelationshipType,
)
from concept_graph.services import GraphStore, KnowledgeGraphService, SQLAlchemyGraphStore

PROJECT_ID = "project-1"


# =============================================================================
# DOMAIN FIXTURES
# =============================================================================


@pytest.fixture
def make_concept():
    """
    Factory fixture for Concept objects.

    Usage:
        def test_example(make_concept):
            concept = make_concept("Variables")
            assert concept.id == "variables"
    """
    def _create(name: str, concept_id: str = None, project_id: str = PROJECT_ID, **kwargs):
        return Concept(
            id=concept_id or name.lower().replace(" ", "-"),
            project_id=project_id,
            name=name,
            definition=kwargs.pop("definition", f"Definition of {name}"),
            **kwargs,
        )
    return _create


@pytest.fixture
def sample_concepts(make_concept):
    """Variables, Functions, Loops, Recursion (ids are lowercase names)."""
    return [
        make_concept("Variables"),
        make_concept("Functions"),
        make_concept("Loops"),
        make_concept("Recursion"),
    ]


@pytest.fixture
def make_candidate():
    """
    Factory fixture for IdentifiedRelationship candidates.

    Usage:
        candidate = make_candidate("Variables", "Functions", strength=0.9)
    """
    def _create(
        from_name: str,
        to_name: str,
        relationship_type: str = "prerequisite",
        strength: float = 0.8,
        reasoning: str = None,
    ):
        return IdentifiedRelationship(
            from_concept_name=from_name,
            to_concept_name=to_name,
            relationship_type=relationship_type,
            strength=strength,
            reasoning=reasoning,
        )
    return _create


@pytest.fixture
def make_relationship():
    """
    Factory fixture for persisted ConceptRelationship edges.

    Usage:
        edge = make_relationship("variables", "functions")
    """
    ids = count(1)

    def _create(
        from_id: str,
        to_id: str,
        relationship_type: RelationshipType = RelationshipType.PREREQUISITE,
        strength: float = 0.9,
        project_id: str = PROJECT_ID,
    ):
        return ConceptRelationship(
            id=f"rel-{next(ids)}",
            project_id=project_id,
            from_concept_id=from_id,
            to_concept_id=to_id,
            relationship_type=relationship_type,
            strength=strength,
        )
    return _create


# =============================================================================
# LLM MOCK FIXTURES
# =============================================================================


@pytest.fixture
def mock_llm_response():
    """
    Factory fixture for mock LLM responses with a ``content`` attribute.
    """
    def _create_response(content: str = "[]"):
        response = MagicMock()
        response.content = content
        return response
    return _create_response


@pytest.fixture
def mock_llm(mock_llm_response):
    """AsyncMock LLM whose ainvoke returns an empty JSON array by default."""
    llm = AsyncMock()
    llm.ainvoke.return_value = mock_llm_response("[]")
    return llm


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def mock_extractor():
    """AsyncMock extractor returning no candidates by default."""
    extractor = AsyncMock()
    extractor.identify_relationships.return_value = []
    return extractor


@pytest.fixture
def mock_store():
    """
    AsyncMock GraphStore with empty results by default.

    upsert_edges echoes its input as stored edges with generated ids.
    """
    store = AsyncMock(spec=GraphStore)
    store.load_edges.return_value = []
    store.load_incoming_edges.return_value = []
    store.load_outgoing_edges.return_value = []
    store.load_concepts_by_id.return_value = []
    store.load_concepts_by_project.return_value = []

    async def _upsert(project_id, edges):
        return [
            ConceptRelationship(id=f"stored-{i}", **edge.model_dump())
            for i, edge in enumerate(edges, start=1)
        ]
    store.upsert_edges.side_effect = _upsert
    return store


@pytest.fixture
def service(mock_extractor, mock_store):
    """KnowledgeGraphService wired to mocked collaborators."""
    return KnowledgeGraphService(extractor=mock_extractor, store=mock_store)


@pytest_asyncio.fixture
async def sqlite_store(tmp_path):
    """SQLAlchemyGraphStore on a fresh SQLite file with the schema created."""
    store = SQLAlchemyGraphStore.from_url(f"sqlite+aiosqlite:///{tmp_path / 'graph.db'}")
    await store.create_schema()
    yield store
    await store.dispose()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
