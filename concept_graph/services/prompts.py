"""Prompts for LLM relationship identification."""

from typing import Sequence

from concept_graph.schemas.graph import Concept

RELATIONSHIP_IDENTIFICATION_PROMPT = """You analyse how educational concepts relate to each other. Identify the meaningful relationships between the concepts listed by the user.

## Fields for each relationship
- from_concept_name: source concept, copied exactly from the list
- to_concept_name: target concept, copied exactly from the list
- relationship_type: one of
  - prerequisite: the source must be understood before the target ("Variables" → "Functions")
  - causal: the source causes or leads to the target ("Bug" → "Error")
  - taxonomic: the source is a kind of the target ("Integer" → "Number")
  - temporal: the source comes before the target in a sequence ("Planning" → "Implementation")
  - contrasts_with: the two are often confused or contrasted ("Iteration" → "Recursion")
- strength: confidence between 0.0 and 1.0
- reasoning: one short sentence (optional)

## Output format (JSON array)
[
  {"from_concept_name": "Variables", "to_concept_name": "Functions", "relationship_type": "prerequisite", "strength": 0.9},
  {"from_concept_name": "For Loop", "to_concept_name": "While Loop", "relationship_type": "contrasts_with", "strength": 0.7}
]

## Rules
1. Only relate concepts from the provided list, using their exact names
2. Never relate a concept to itself
3. Skip trivial or weak relationships (strength < 0.3)
4. Prerequisite relationships matter most: they define the learning order"""


def build_user_message(concepts: Sequence[Concept]) -> str:
    """Render the concept list (name, definition, key points) for the model."""
    lines = ["Identify relationships between the following concepts:", ""]

    for i, concept in enumerate(concepts, start=1):
        lines.append(f"{i}. **{concept.name}**: {concept.definition}")
        if concept.key_points:
            lines.append(f"   Key points: {', '.join(concept.key_points)}")

    lines.append("")
    lines.append("Return a JSON array of relationships between these concepts.")
    return "\n".join(lines)
