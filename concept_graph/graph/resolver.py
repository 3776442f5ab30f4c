"""
Concept name resolution.

Maps the free-text endpoint names of validated candidates to concept ids
through an explicit name index. Unmatched names are not errors: the candidate
is dropped and the build carries on.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional

from concept_graph.schemas.graph import (
    Concept,
    IdentifiedRelationship,
    RelationshipInsert,
    RelationshipType,
)

logger = logging.getLogger(__name__)


class NameResolver:
    """
    Resolves concept names to concept ids by exact, case-sensitive match.

    When two concepts share a name, the first one supplied wins.

    Usage:
        resolver = NameResolver.from_concepts(concepts)
        edges = resolver.resolve(candidates, project_id)
    """

    def __init__(
        self,
        name_index: Mapping[str, str],
        drop_self_references: bool = True,
    ) -> None:
        """
        Args:
            name_index: Concept name → concept id.
            drop_self_references: Skip candidates whose endpoints resolve to
                the same concept.
        """
        self._name_index = dict(name_index)
        self._drop_self_references = drop_self_references

    @classmethod
    def from_concepts(
        cls,
        concepts: Iterable[Concept],
        drop_self_references: bool = True,
    ) -> "NameResolver":
        return cls(build_name_index(concepts), drop_self_references)

    def __len__(self) -> int:
        return len(self._name_index)

    def lookup(self, name: str) -> Optional[str]:
        """Return the concept id for name, or None."""
        return self._name_index.get(name)

    def resolve(
        self,
        relationships: Iterable[IdentifiedRelationship],
        project_id: str,
    ) -> List[RelationshipInsert]:
        """
        Translate validated candidates into edges keyed by concept id.

        Args:
            relationships: Candidates that already passed validation.
            project_id: Project the edges belong to.

        Returns:
            Resolved edges, in candidate order.
        """
        resolved: List[RelationshipInsert] = []

        for rel in relationships:
            from_id = self.lookup(rel.from_concept_name)
            to_id = self.lookup(rel.to_concept_name)

            if from_id is None or to_id is None:
                missing = [
                    name
                    for name, found in (
                        (rel.from_concept_name, from_id),
                        (rel.to_concept_name, to_id),
                    )
                    if found is None
                ]
                logger.info(f"Skipping relationship with unknown concept name(s): {missing}")
                continue

            if self._drop_self_references and from_id == to_id:
                logger.info(f"Skipping self-referencing relationship on '{rel.from_concept_name}'")
                continue

            metadata = {"reasoning": rel.reasoning} if rel.reasoning else {}
            resolved.append(RelationshipInsert(
                project_id=project_id,
                from_concept_id=from_id,
                to_concept_id=to_id,
                relationship_type=RelationshipType(rel.relationship_type),
                strength=rel.strength,
                metadata=metadata,
            ))

        return resolved


def build_name_index(concepts: Iterable[Concept]) -> Dict[str, str]:
    """Build a name → id map; the first concept with a given name wins."""
    index: Dict[str, str] = {}
    for concept in concepts:
        if concept.name in index:
            logger.debug(
                f"Duplicate concept name '{concept.name}': keeping {index[concept.name]}, "
                f"ignoring {concept.id}"
            )
            continue
        index[concept.name] = concept.id
    return index
