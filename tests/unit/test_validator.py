"""
Unit tests for relationship candidate validation.

Tests cover:
- Relationship type membership
- Strength boundaries (inclusive 0.0 and 1.0)
- Blank concept names
- Strength clamping helper
"""

import math

import pytest

from concept_graph.core.exceptions import KnowledgeGraphErrorCode, ValidationError
from concept_graph.graph.validator import (
    RELATIONSHIP_TYPES,
    clamp_strength,
    is_valid_relationship_type,
    validate_identified_relationship,
)
from concept_graph.schemas import RelationshipType


class TestRelationshipTypeValidation:
    """Tests for relationship_type checks."""

    @pytest.mark.parametrize(
        "relationship_type",
        ["prerequisite", "causal", "taxonomic", "temporal", "contrasts_with"],
    )
    def test_accepts_every_enumerated_type(self, make_candidate, relationship_type):
        candidate = make_candidate("A", "B", relationship_type=relationship_type)

        validate_identified_relationship(candidate)

    @pytest.mark.parametrize("relationship_type", ["related_to", "PREREQUISITE", "", "depends on"])
    def test_rejects_unknown_types(self, make_candidate, relationship_type):
        candidate = make_candidate("A", "B", relationship_type=relationship_type)

        with pytest.raises(ValidationError) as exc_info:
            validate_identified_relationship(candidate)

        assert exc_info.value.field == "relationship_type"
        assert exc_info.value.code == KnowledgeGraphErrorCode.VALIDATION_ERROR

    def test_relationship_types_match_enum(self):
        assert set(RELATIONSHIP_TYPES) == {rt.value for rt in RelationshipType}
        assert len(RELATIONSHIP_TYPES) == 5

    def test_is_valid_relationship_type_accepts_enum_members(self):
        assert is_valid_relationship_type(RelationshipType.CAUSAL) is True
        assert is_valid_relationship_type("temporal") is True
        assert is_valid_relationship_type("unknown") is False
        assert is_valid_relationship_type(None) is False


class TestStrengthValidation:
    """Tests for strength range checks."""

    @pytest.mark.parametrize("strength", [0.0, 0.5, 1.0])
    def test_accepts_values_in_range(self, make_candidate, strength):
        validate_identified_relationship(make_candidate("A", "B", strength=strength))

    @pytest.mark.parametrize("strength", [-0.1, 1.1, math.nan])
    def test_rejects_values_out_of_range(self, make_candidate, strength):
        with pytest.raises(ValidationError) as exc_info:
            validate_identified_relationship(make_candidate("A", "B", strength=strength))

        assert exc_info.value.field == "strength"
        assert "between 0.0 and 1.0" in exc_info.value.message


class TestConceptNameValidation:
    """Tests for blank endpoint names."""

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_rejects_blank_from_name(self, make_candidate, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_identified_relationship(make_candidate(name, "B"))

        assert exc_info.value.field == "from_concept_name"
        assert "from_concept_name cannot be empty" in str(exc_info.value)

    @pytest.mark.parametrize("name", ["", "   "])
    def test_rejects_blank_to_name(self, make_candidate, name):
        with pytest.raises(ValidationError) as exc_info:
            validate_identified_relationship(make_candidate("A", name))

        assert exc_info.value.field == "to_concept_name"

    def test_error_carries_offending_candidate(self, make_candidate):
        candidate = make_candidate("A", "B", relationship_type="bogus")

        with pytest.raises(ValidationError) as exc_info:
            validate_identified_relationship(candidate)

        assert exc_info.value.candidate["relationship_type"] == "bogus"
        assert exc_info.value.details["candidate"]["from_concept_name"] == "A"


class TestClampStrength:
    """Tests for the optional clamping helper."""

    def test_clamps_above_one(self, make_candidate):
        assert clamp_strength(make_candidate("A", "B", strength=1.7)).strength == 1.0

    def test_clamps_below_zero(self, make_candidate):
        assert clamp_strength(make_candidate("A", "B", strength=-3.0)).strength == 0.0

    def test_returns_same_object_when_in_range(self, make_candidate):
        candidate = make_candidate("A", "B", strength=0.4)

        assert clamp_strength(candidate) is candidate

    def test_leaves_nan_for_the_validator(self, make_candidate):
        candidate = clamp_strength(make_candidate("A", "B", strength=math.nan))

        with pytest.raises(ValidationError):
            validate_identified_relationship(candidate)
