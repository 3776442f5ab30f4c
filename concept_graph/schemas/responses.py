from typing import List

from pydantic import BaseModel

from concept_graph.schemas.graph import Concept, ConceptRelationship


class BuildGraphResponse(BaseModel):
    status: str
    project_id: str
    relationships_stored: int
    relationships: List[ConceptRelationship]


class RelationshipsResponse(BaseModel):
    project_id: str
    relationships: List[ConceptRelationship]


class ConceptListResponse(BaseModel):
    concepts: List[Concept]


class CircularDependencyResponse(BaseModel):
    project_id: str
    has_circular_dependency: bool
