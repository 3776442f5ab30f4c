"""
Graph algorithms for the concept graph engine.

Validation, name resolution, cycle detection and topological ordering.
All synchronous and side-effect free; they work on in-memory collections.
"""

from concept_graph.graph.cycles import build_adjacency, find_cycle, has_cycle
from concept_graph.graph.resolver import NameResolver, build_name_index
from concept_graph.graph.topological import topological_order
from concept_graph.graph.validator import (
    RELATIONSHIP_TYPES,
    clamp_strength,
    is_valid_relationship_type,
    validate_identified_relationship,
)

__all__ = [
    "RELATIONSHIP_TYPES",
    "NameResolver",
    "build_adjacency",
    "build_name_index",
    "clamp_strength",
    "find_cycle",
    "has_cycle",
    "is_valid_relationship_type",
    "topological_order",
    "validate_identified_relationship",
]
