"""
Knowledge Graph Service.

Builds the prerequisite and relationship graph of a project's concepts and
answers structural queries over it:

- build_knowledge_graph: extract → validate → resolve → persist
- get_project_relationships: every stored edge of a project
- has_circular_dependency: cycle check over prerequisite edges
- get_topological_order: learning order over prerequisite edges
- get_prerequisites / get_dependents: one-hop prerequisite traversal

The service owns no global state: its two collaborators (relationship
extractor and graph store) are passed in at construction.

Example:
    service = KnowledgeGraphService(extractor=extractor, store=store)
    relationships = await service.build_knowledge_graph(project_id, concepts)
    ordered = await service.get_topological_order(project_id)
"""

from typing import Callable, Dict, List, Optional, Sequence

from concept_graph.core.exceptions import (
    ExtractionFailure,
    KnowledgeGraphError,
    ValidationError,
)
from concept_graph.core.logging import GraphLogger, get_logger
from concept_graph.graph.cycles import has_cycle
from concept_graph.graph.resolver import NameResolver
from concept_graph.graph.topological import topological_order
from concept_graph.graph.validator import (
    clamp_strength,
    validate_identified_relationship,
)
from concept_graph.schemas.graph import (
    Concept,
    ConceptRelationship,
    IdentifiedRelationship,
    RelationshipType,
    prerequisite_pairs,
)
from concept_graph.services.graph_store import GraphStore
from concept_graph.services.relationship_extractor import RelationshipExtractor

logger = get_logger(__name__)


class KnowledgeGraphService:
    """
    Orchestrates graph construction and answers graph queries.

    Validation policy: a candidate that fails validation is dropped on its
    own and logged; the rest of the batch proceeds. Nothing in the batch
    path raises ValidationError to the caller.
    """

    def __init__(
        self,
        extractor: Optional[RelationshipExtractor],
        store: GraphStore,
        clamp_strength: bool = False,
        drop_self_references: bool = True,
        graph_logger: Optional[GraphLogger] = None,
        extractor_factory: Optional[Callable[[], RelationshipExtractor]] = None,
    ) -> None:
        """
        Args:
            extractor: Relationship extraction collaborator, or None when
                extractor_factory supplies it.
            store: Relational store adapter.
            clamp_strength: Force out-of-range strengths into [0, 1] instead
                of dropping the candidate.
            drop_self_references: Skip candidates relating a concept to itself.
            graph_logger: Optional build tracer.
            extractor_factory: Called on the first build when no extractor
                was given. Read queries never call it.
        """
        if extractor is None and extractor_factory is None:
            raise ValueError("Either extractor or extractor_factory is required")
        self._extractor = extractor
        self._extractor_factory = extractor_factory
        self._store = store
        self._clamp_strength = clamp_strength
        self._drop_self_references = drop_self_references
        self._graph_logger = graph_logger or GraphLogger("builder")

    @property
    def store(self) -> GraphStore:
        return self._store

    @property
    def extractor(self) -> RelationshipExtractor:
        """
        The extraction collaborator, created on first access when built lazily.

        Raises:
            MissingAPIKeyError: If the factory cannot build an LLM client.
        """
        if self._extractor is None:
            self._extractor = self._extractor_factory()
        return self._extractor

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    async def build_knowledge_graph(
        self, project_id: str, concepts: Sequence[Concept]
    ) -> List[ConceptRelationship]:
        """
        Identify, validate, resolve and persist relationships for a project.

        Args:
            project_id: Project the edges belong to.
            concepts: The project's concepts (names, definitions, key points).

        Returns:
            Edges exactly as the store reports them.

        Raises:
            MissingAPIKeyError: No extractor could be built; nothing was written.
            ExtractionFailure: The extractor failed; nothing was written.
            DatabaseError: The single persistence call failed.
        """
        extractor = self.extractor
        self._graph_logger.build_start(project_id, len(concepts))

        try:
            candidates = await extractor.identify_relationships(concepts)
        except ExtractionFailure as e:
            self._graph_logger.error("extract", e)
            raise
        except Exception as e:
            self._graph_logger.error("extract", e)
            raise ExtractionFailure(str(e), project_id=project_id, original_error=e) from e
        self._graph_logger.stage("extract", f"{len(candidates)} candidate(s)")

        valid = self.filter_valid(candidates)
        self._graph_logger.stage("validate", f"{len(valid)}/{len(candidates)} valid")

        resolver = NameResolver.from_concepts(concepts, self._drop_self_references)
        resolved = resolver.resolve(valid, project_id)
        self._graph_logger.stage("resolve", f"{len(resolved)}/{len(valid)} resolved")

        try:
            stored = await self._store.upsert_edges(project_id, resolved)
        except KnowledgeGraphError as e:
            self._graph_logger.error("persist", e)
            raise

        self._graph_logger.build_end(project_id, {
            "extracted": len(candidates),
            "valid": len(valid),
            "resolved": len(resolved),
            "persisted": len(stored),
        })
        return stored

    def filter_valid(
        self, candidates: Sequence[IdentifiedRelationship]
    ) -> List[IdentifiedRelationship]:
        """Drop candidates that fail validation, keeping order."""
        valid: List[IdentifiedRelationship] = []
        for candidate in candidates:
            if self._clamp_strength:
                candidate = clamp_strength(candidate)
            try:
                validate_identified_relationship(candidate)
            except ValidationError as e:
                self._graph_logger.dropped("validate", e.message)
                continue
            valid.append(candidate)
        return valid

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def get_project_relationships(self, project_id: str) -> List[ConceptRelationship]:
        """Every stored edge of the project, all types."""
        return await self._store.load_edges(project_id)

    async def has_circular_dependency(self, project_id: str) -> bool:
        """True if the project's prerequisite edges contain a directed cycle."""
        edges = await self._store.load_edges(project_id, RelationshipType.PREREQUISITE)
        if not edges:
            return False

        pairs = prerequisite_pairs(edges)
        nodes = [node for pair in pairs for node in pair]
        return has_cycle(nodes, pairs)

    async def get_topological_order(self, project_id: str) -> List[Concept]:
        """
        The project's concepts in learning order.

        Ties are broken by the store's concept order.

        Raises:
            CircularDependencyError: If prerequisite edges form a cycle.
        """
        concepts = await self._store.load_concepts_by_project(project_id)
        if not concepts:
            return []

        edges = await self._store.load_edges(project_id, RelationshipType.PREREQUISITE)

        by_id: Dict[str, Concept] = {}
        for concept in concepts:
            by_id.setdefault(concept.id, concept)

        ordered_ids = topological_order(
            list(by_id), prerequisite_pairs(edges), project_id=project_id
        )
        logger.info(f"Learning order for project {project_id}: {len(ordered_ids)} concept(s)")
        return [by_id[concept_id] for concept_id in ordered_ids]

    async def get_prerequisites(self, concept_id: str) -> List[Concept]:
        """Concepts with a prerequisite edge into concept_id."""
        edges = await self._store.load_incoming_edges(concept_id, RelationshipType.PREREQUISITE)
        return await self._concepts_for([edge.from_concept_id for edge in edges])

    async def get_dependents(self, concept_id: str) -> List[Concept]:
        """Concepts with a prerequisite edge out of concept_id."""
        edges = await self._store.load_outgoing_edges(concept_id, RelationshipType.PREREQUISITE)
        return await self._concepts_for([edge.to_concept_id for edge in edges])

    async def _concepts_for(self, concept_ids: List[str]) -> List[Concept]:
        """Load concepts for ids, returned in edge order without duplicates."""
        if not concept_ids:
            return []

        unique_ids = list(dict.fromkeys(concept_ids))
        concepts = await self._store.load_concepts_by_id(unique_ids)
        by_id = {concept.id: concept for concept in concepts}
        return [by_id[concept_id] for concept_id in unique_ids if concept_id in by_id]
