"""
Relationship candidate validation.

Pure checks against the allowed domain: non-blank endpoint names, a known
relationship type, and a strength inside [0.0, 1.0].
"""

import math
from typing import Any

from concept_graph.core.exceptions import ValidationError
from concept_graph.schemas.graph import IdentifiedRelationship, RelationshipType

RELATIONSHIP_TYPES = tuple(rt.value for rt in RelationshipType)


def is_valid_relationship_type(value: Any) -> bool:
    """Return True when value names one of the five relationship types."""
    if isinstance(value, RelationshipType):
        return True
    return isinstance(value, str) and value in RELATIONSHIP_TYPES


def validate_identified_relationship(relationship: IdentifiedRelationship) -> None:
    """
    Validate a relationship candidate.

    Args:
        relationship: Candidate returned by the extractor.

    Raises:
        ValidationError: If a name is blank, the type is unknown, or the
            strength falls outside [0.0, 1.0].
    """
    candidate = relationship.model_dump()

    if not relationship.from_concept_name or not relationship.from_concept_name.strip():
        raise ValidationError(
            "from_concept_name cannot be empty",
            field="from_concept_name",
            candidate=candidate,
        )

    if not relationship.to_concept_name or not relationship.to_concept_name.strip():
        raise ValidationError(
            "to_concept_name cannot be empty",
            field="to_concept_name",
            candidate=candidate,
        )

    if not is_valid_relationship_type(relationship.relationship_type):
        raise ValidationError(
            f"Invalid relationship type: {relationship.relationship_type}. "
            f"Allowed types: {list(RELATIONSHIP_TYPES)}",
            field="relationship_type",
            candidate=candidate,
        )

    strength = relationship.strength
    if math.isnan(strength) or strength < 0.0 or strength > 1.0:
        raise ValidationError(
            f"Strength must be between 0.0 and 1.0, got {strength}",
            field="strength",
            candidate=candidate,
        )


def clamp_strength(relationship: IdentifiedRelationship) -> IdentifiedRelationship:
    """Return a copy with strength forced into [0.0, 1.0]. NaN is left as is."""
    strength = relationship.strength
    if math.isnan(strength):
        return relationship
    clamped = max(0.0, min(1.0, strength))
    if clamped == strength:
        return relationship
    return relationship.model_copy(update={"strength": clamped})
