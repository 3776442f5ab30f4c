"""
Concept Graph - Data Definitions

Pydantic models for concepts and the typed, directed relationships between
them. Candidates coming back from the extractor keep their raw strings until
the validator has checked them; persisted edges always carry a
RelationshipType.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RelationshipType(str, Enum):
    """
    Closed set of relationship kinds between concepts.

    Directional semantics: from_concept → to_concept
    """
    PREREQUISITE = "prerequisite"      # Learn "from" before "to"
    CAUSAL = "causal"                  # "from" causes or leads to "to"
    TAXONOMIC = "taxonomic"            # "from" is a kind of "to"
    TEMPORAL = "temporal"              # "from" precedes "to" in a sequence
    CONTRASTS_WITH = "contrasts_with"  # Often confused or contrasted


class Concept(BaseModel):
    """
    A unit of learnable content.

    Created upstream by content analysis; read-only for the graph engine.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="Stable concept identifier.")

    project_id: str = Field(..., min_length=1, description="Owning project.")

    name: str = Field(
        ...,
        description="Display name. Not guaranteed unique within a project."
    )

    definition: str = Field(default="", description="Short definition.")

    key_points: List[str] = Field(
        default_factory=list,
        description="Key points used as extraction context."
    )

    source_id: Optional[str] = Field(default=None)

    cognitive_type: Optional[str] = Field(default=None)

    difficulty: Optional[int] = Field(default=None)

    tier: Optional[int] = Field(
        default=None,
        description="Externally assigned importance level, passed through."
    )

    metadata: Dict[str, Any] = Field(default_factory=dict)

    created_at: Optional[datetime] = Field(default=None)

    updated_at: Optional[datetime] = Field(default=None)


class IdentifiedRelationship(BaseModel):
    """
    Relationship candidate returned by the extractor.

    Lives only for the duration of a build; it is either translated into a
    RelationshipInsert or discarded.
    """

    from_concept_name: str = Field(..., description="Source concept name.")

    to_concept_name: str = Field(..., description="Target concept name.")

    relationship_type: str = Field(
        ...,
        description="Raw relationship type as returned by the model."
    )

    strength: float = Field(..., description="Confidence, expected in [0, 1].")

    reasoning: Optional[str] = Field(default=None)


class RelationshipInsert(BaseModel):
    """A validated, name-resolved edge ready to be persisted."""

    project_id: str = Field(..., min_length=1)

    from_concept_id: str = Field(..., min_length=1)

    to_concept_id: str = Field(..., min_length=1)

    relationship_type: RelationshipType

    strength: float = Field(default=1.0, ge=0.0, le=1.0)

    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def unique_key(self) -> tuple:
        """Store uniqueness key: (project, from, to, type)."""
        return (
            self.project_id,
            self.from_concept_id,
            self.to_concept_id,
            self.relationship_type.value,
        )


class ConceptRelationship(RelationshipInsert):
    """An edge as persisted by the store, with generated fields."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)

    created_at: Optional[datetime] = Field(default=None)

    @property
    def is_prerequisite(self) -> bool:
        return self.relationship_type == RelationshipType.PREREQUISITE


def prerequisite_pairs(relationships: List[RelationshipInsert]) -> List[tuple]:
    """Return (from_id, to_id) pairs of the prerequisite edges only."""
    return [
        (rel.from_concept_id, rel.to_concept_id)
        for rel in relationships
        if rel.relationship_type == RelationshipType.PREREQUISITE
    ]
