from concept_graph.schemas.graph import (
    Concept,
    ConceptRelationship,
    IdentifiedRelationship,
    RelationshipInsert,
    RelationshipType,
    prerequisite_pairs,
)
from concept_graph.schemas.requests import BuildGraphRequest
from concept_graph.schemas.responses import (
    BuildGraphResponse,
    CircularDependencyResponse,
    ConceptListResponse,
    RelationshipsResponse,
)

__all__ = [
    "Concept",
    "ConceptRelationship",
    "IdentifiedRelationship",
    "RelationshipInsert",
    "RelationshipType",
    "prerequisite_pairs",
    "BuildGraphRequest",
    "BuildGraphResponse",
    "CircularDependencyResponse",
    "ConceptListResponse",
    "RelationshipsResponse",
]
